"""Pure spaced-repetition scheduling engine."""

from .classifier import CategorizedCards, bucket, categorize, due
from .config import CORRECT_THRESHOLD, DEFAULT_CONFIG, SchedulerConfig
from .errors import InvalidQuality, InvalidState, SchedulingError
from .models import Bucket, CardState, ReviewOutcome, ReviewRecord, SchedulerResult
from .scheduler import advance, apply_review, is_correct, validate_quality, validate_state
from .stats import StudyStats, aggregate

__all__ = [
    "Bucket",
    "CORRECT_THRESHOLD",
    "CardState",
    "CategorizedCards",
    "DEFAULT_CONFIG",
    "InvalidQuality",
    "InvalidState",
    "ReviewOutcome",
    "ReviewRecord",
    "SchedulerConfig",
    "SchedulerResult",
    "SchedulingError",
    "StudyStats",
    "advance",
    "aggregate",
    "apply_review",
    "bucket",
    "categorize",
    "due",
    "is_correct",
    "validate_quality",
    "validate_state",
]
