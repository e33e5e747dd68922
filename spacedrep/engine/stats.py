"""Dashboard statistics derived from card states."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from .classifier import bucket
from .config import DEFAULT_CONFIG, SchedulerConfig
from .models import Bucket, CardState, ReviewRecord


@dataclass(frozen=True, slots=True)
class StudyStats:
    """Summary counters for a collection of cards."""

    total_cards: int
    cards_due: int
    cards_learning: int
    cards_graduated: int
    total_reviews: int
    correct_reviews: int
    accuracy: float
    average_ease_factor: float
    streak_current: int
    streak_best: int
    average_response_time: float
    time_spent_today_ms: float = 0.0
    time_spent_total_ms: float = 0.0


def aggregate(
    cards: Iterable[CardState],
    reviews: Optional[Iterable[ReviewRecord]] = None,
    *,
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> StudyStats:
    """Compute study statistics for ``cards`` as of ``now``.

    The optional review log only contributes the time-spent totals; review
    counters always come from the card states.
    """
    states = list(cards)

    cards_due = sum(1 for state in states if bucket(state, now, config) is Bucket.DUE_NOW)
    cards_learning = sum(1 for state in states if state.is_learning)
    cards_graduated = sum(1 for state in states if not state.is_learning and state.repetitions > 0)

    total_reviews = sum(state.total_reviews for state in states)
    correct_reviews = sum(state.correct_reviews for state in states)
    accuracy = correct_reviews / total_reviews * 100 if total_reviews else 0.0

    if states:
        average_ease_factor = sum(state.ease_factor for state in states) / len(states)
    else:
        average_ease_factor = config.default_ease_factor

    response_times = [
        state.average_response_time for state in states if state.average_response_time is not None
    ]
    average_response_time = sum(response_times) / len(response_times) if response_times else 0.0

    time_spent_today = 0.0
    time_spent_total = 0.0
    if reviews is not None:
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        for review in reviews:
            spent = review.response_time_ms or 0.0
            time_spent_total += spent
            if start_of_day <= review.reviewed_at <= now:
                time_spent_today += spent

    return StudyStats(
        total_cards=len(states),
        cards_due=cards_due,
        cards_learning=cards_learning,
        cards_graduated=cards_graduated,
        total_reviews=total_reviews,
        correct_reviews=correct_reviews,
        accuracy=accuracy,
        average_ease_factor=average_ease_factor,
        streak_current=max((state.streak_count for state in states), default=0),
        streak_best=max((state.max_streak for state in states), default=0),
        average_response_time=average_response_time,
        time_spent_today_ms=time_spent_today,
        time_spent_total_ms=time_spent_total,
    )
