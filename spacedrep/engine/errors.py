"""Errors raised by the scheduling engine."""

from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for rejected engine inputs."""


class InvalidQuality(SchedulingError):
    """Raised when a review quality falls outside the 0-5 scale."""

    def __init__(self, quality: object) -> None:
        super().__init__(f"Review quality must be an integer between 0 and 5, got {quality!r}.")
        self.quality = quality


class InvalidState(SchedulingError):
    """Raised when a card state violates its invariants."""
