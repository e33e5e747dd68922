"""Tunable parameters for the scheduling engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


QUALITY_MIN = 0
QUALITY_MAX = 5
CORRECT_THRESHOLD = 3
MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
GRADUATING_INTERVAL_DAYS = 1
DEFAULT_LEARNING_STEPS = (timedelta(minutes=1), timedelta(minutes=10))
UPCOMING_WINDOW = timedelta(hours=24)


@dataclass(frozen=True)
class SchedulerConfig:
    """Scheduling parameters passed explicitly to every engine call."""

    learning_steps: tuple[timedelta, ...] = DEFAULT_LEARNING_STEPS
    graduating_interval_days: int = GRADUATING_INTERVAL_DAYS
    correct_threshold: int = CORRECT_THRESHOLD
    min_ease_factor: float = MIN_EASE_FACTOR
    default_ease_factor: float = DEFAULT_EASE_FACTOR
    upcoming_window: timedelta = UPCOMING_WINDOW
    maximum_interval_days: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.learning_steps:
            raise ValueError("At least one learning step is required.")
        if any(step <= timedelta(0) for step in self.learning_steps):
            raise ValueError("Learning steps must be positive durations.")
        if self.graduating_interval_days < 1:
            raise ValueError("The graduating interval must be at least one day.")
        if not QUALITY_MIN < self.correct_threshold <= QUALITY_MAX:
            raise ValueError("The correct threshold must be between 1 and 5.")
        if self.default_ease_factor < self.min_ease_factor:
            raise ValueError("The default ease factor cannot be below the minimum ease factor.")
        if self.maximum_interval_days is not None and self.maximum_interval_days < self.graduating_interval_days:
            raise ValueError("The maximum interval cannot be shorter than the graduating interval.")

    @property
    def step_count(self) -> int:
        return len(self.learning_steps)

    @classmethod
    def from_env(cls) -> SchedulerConfig:
        """Construct a scheduler configuration from environment variables."""
        raw_steps = os.getenv("SRS_LEARNING_STEPS")
        learning_steps = DEFAULT_LEARNING_STEPS
        if raw_steps:
            try:
                learning_steps = tuple(
                    timedelta(minutes=float(part)) for part in raw_steps.split(",") if part.strip()
                )
            except (ValueError, OverflowError) as exc:
                raise RuntimeError(
                    "SRS_LEARNING_STEPS must be a comma-separated list of minutes."
                ) from exc

        graduating_interval_days = _int_from_env("SRS_GRADUATING_INTERVAL_DAYS", GRADUATING_INTERVAL_DAYS)
        correct_threshold = _int_from_env("SRS_CORRECT_THRESHOLD", CORRECT_THRESHOLD)

        maximum_interval_days: Optional[int] = None
        if os.getenv("SRS_MAXIMUM_INTERVAL_DAYS"):
            maximum_interval_days = _int_from_env("SRS_MAXIMUM_INTERVAL_DAYS", 0)

        try:
            return cls(
                learning_steps=learning_steps,
                graduating_interval_days=graduating_interval_days,
                correct_threshold=correct_threshold,
                maximum_interval_days=maximum_interval_days,
            )
        except ValueError as exc:
            raise RuntimeError(f"Invalid scheduler configuration: {exc}") from exc


def _int_from_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


DEFAULT_CONFIG = SchedulerConfig()
