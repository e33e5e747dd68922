"""Value types exchanged with the scheduling engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .config import DEFAULT_CONFIG, SchedulerConfig


REVIEW_TYPES = ("scheduled", "extra_practice", "cramming")


@dataclass(frozen=True, slots=True)
class CardState:
    """Persisted scheduling fields of a single flashcard.

    ``interval`` is always measured in days and only grows once the card has
    graduated. While the card is learning, the wait before the next step is
    kept separately in ``learning_delay``.
    """

    next_review_date: datetime
    ease_factor: float = DEFAULT_CONFIG.default_ease_factor
    interval: int = 0
    repetitions: int = 0
    is_learning: bool = True
    learning_step: int = 0
    learning_delay: timedelta = timedelta(0)
    last_review_date: Optional[datetime] = None
    total_reviews: int = 0
    correct_reviews: int = 0
    streak_count: int = 0
    max_streak: int = 0
    average_response_time: Optional[float] = None

    @classmethod
    def new(cls, now: datetime, config: SchedulerConfig = DEFAULT_CONFIG) -> CardState:
        """Return a fresh learning card that is due immediately."""
        return cls(next_review_date=now, ease_factor=config.default_ease_factor)


@dataclass(frozen=True, slots=True)
class ReviewOutcome:
    """A single rating submitted by the learner."""

    quality: int
    response_time_ms: Optional[float] = None
    review_type: str = "scheduled"


@dataclass(frozen=True, slots=True)
class SchedulerResult:
    """Scheduling fields produced by one call to ``advance``."""

    ease_factor: float
    interval: int
    repetitions: int
    is_learning: bool
    learning_step: int
    learning_delay: timedelta
    next_review_date: datetime
    graduated: bool = False


@dataclass(frozen=True, slots=True)
class ReviewRecord:
    """Audit entry describing how a review changed a card."""

    quality: int
    was_correct: bool
    reviewed_at: datetime
    ease_factor_before: float
    ease_factor_after: float
    interval_before: int
    interval_after: int
    response_time_ms: Optional[float] = None
    review_type: str = "scheduled"


class Bucket(str, Enum):
    """Review status a card falls into at a given moment."""

    DUE_NOW = "due_now"
    LEARNING = "learning"
    UPCOMING = "upcoming"
    FUTURE = "future"
