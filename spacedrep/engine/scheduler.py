"""Learning-step and SM-2 review scheduling for flashcards."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

from .config import DEFAULT_CONFIG, QUALITY_MAX, QUALITY_MIN, SchedulerConfig
from .errors import InvalidQuality, InvalidState, SchedulingError
from .models import REVIEW_TYPES, CardState, ReviewOutcome, ReviewRecord, SchedulerResult


LOGGER = logging.getLogger(__name__)


def is_correct(quality: int, config: SchedulerConfig = DEFAULT_CONFIG) -> bool:
    """Return whether a rating counts as a correct answer."""
    return quality >= config.correct_threshold


def validate_quality(quality: object) -> int:
    """Return ``quality`` unchanged or raise ``InvalidQuality``."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQuality(quality)
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        raise InvalidQuality(quality)
    return quality


def validate_state(state: CardState, config: SchedulerConfig = DEFAULT_CONFIG) -> None:
    """Reject card states that could only come from a storage bug."""
    if state.ease_factor < config.min_ease_factor:
        raise InvalidState(
            f"Ease factor {state.ease_factor} is below the minimum of {config.min_ease_factor}."
        )
    for name in ("interval", "repetitions", "total_reviews", "correct_reviews", "streak_count", "max_streak"):
        if getattr(state, name) < 0:
            raise InvalidState(f"{name} cannot be negative.")
    if state.correct_reviews > state.total_reviews:
        raise InvalidState("correct_reviews cannot exceed total_reviews.")
    if state.max_streak < state.streak_count:
        raise InvalidState("max_streak cannot be lower than streak_count.")
    if state.is_learning:
        if not 0 <= state.learning_step < config.step_count:
            raise InvalidState(
                f"Learning step {state.learning_step} is outside the {config.step_count} configured steps."
            )
    elif state.interval < 1:
        raise InvalidState("A graduated card needs an interval of at least one day.")


def advance(
    state: CardState,
    outcome: ReviewOutcome,
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> SchedulerResult:
    """Compute the next scheduling fields for ``state`` after ``outcome``."""
    quality = validate_quality(outcome.quality)
    validate_state(state, config)

    if state.is_learning:
        return _advance_learning(state, quality, now, config)
    return _advance_review(state, quality, now, config)


def _advance_learning(
    state: CardState, quality: int, now: datetime, config: SchedulerConfig
) -> SchedulerResult:
    if not is_correct(quality, config):
        first_step = config.learning_steps[0]
        return SchedulerResult(
            ease_factor=state.ease_factor,
            interval=state.interval,
            repetitions=state.repetitions,
            is_learning=True,
            learning_step=0,
            learning_delay=first_step,
            next_review_date=now + first_step,
        )

    next_step = state.learning_step + 1
    if next_step < config.step_count:
        delay = config.learning_steps[next_step]
        return SchedulerResult(
            ease_factor=state.ease_factor,
            interval=state.interval,
            repetitions=state.repetitions,
            is_learning=True,
            learning_step=next_step,
            learning_delay=delay,
            next_review_date=now + delay,
        )

    interval = config.graduating_interval_days
    LOGGER.debug("Card graduated with a %s day interval.", interval)
    return SchedulerResult(
        ease_factor=state.ease_factor,
        interval=interval,
        repetitions=1,
        is_learning=False,
        learning_step=0,
        learning_delay=timedelta(0),
        next_review_date=now + timedelta(days=interval),
        graduated=True,
    )


def _advance_review(
    state: CardState, quality: int, now: datetime, config: SchedulerConfig
) -> SchedulerResult:
    easiness_factor = update_ease_factor(state.ease_factor, quality, config)

    if not is_correct(quality, config):
        first_step = config.learning_steps[0]
        LOGGER.debug("Card lapsed; ease factor %.2f -> %.2f.", state.ease_factor, easiness_factor)
        return SchedulerResult(
            ease_factor=easiness_factor,
            interval=state.interval,
            repetitions=0,
            is_learning=True,
            learning_step=0,
            learning_delay=first_step,
            next_review_date=now + first_step,
        )

    repetition = state.repetitions + 1
    if repetition == 1:
        interval = 1
    elif repetition == 2:
        interval = 6
    else:
        interval = max(1, _round_half_up(state.interval * easiness_factor))

    if config.maximum_interval_days is not None and interval > config.maximum_interval_days:
        interval = config.maximum_interval_days

    return SchedulerResult(
        ease_factor=easiness_factor,
        interval=interval,
        repetitions=repetition,
        is_learning=False,
        learning_step=0,
        learning_delay=timedelta(0),
        next_review_date=now + timedelta(days=interval),
    )


def update_ease_factor(
    ease_factor: float, quality: int, config: SchedulerConfig = DEFAULT_CONFIG
) -> float:
    """Apply the SM-2 ease adjustment and clamp it to the configured floor."""
    easiness_factor = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    return max(easiness_factor, config.min_ease_factor)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def apply_review(
    state: CardState,
    outcome: ReviewOutcome,
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> tuple[CardState, SchedulerResult, ReviewRecord]:
    """Advance the schedule and update the review counters of ``state``.

    Returns the complete next card state, the scheduler result it was built
    from, and the audit record describing the change. When the card has no
    average response time yet, the first supplied response time becomes the
    average regardless of how many reviews came before it.
    """
    if outcome.review_type not in REVIEW_TYPES:
        raise SchedulingError(f"Unknown review type {outcome.review_type!r}.")
    if outcome.response_time_ms is not None and outcome.response_time_ms < 0:
        raise SchedulingError("Response time cannot be negative.")

    result = advance(state, outcome, now, config)
    was_correct = is_correct(outcome.quality, config)

    total_reviews = state.total_reviews + 1
    streak_count = state.streak_count + 1 if was_correct else 0

    new_state = replace(
        state,
        ease_factor=result.ease_factor,
        interval=result.interval,
        repetitions=result.repetitions,
        is_learning=result.is_learning,
        learning_step=result.learning_step,
        learning_delay=result.learning_delay,
        next_review_date=result.next_review_date,
        last_review_date=now,
        total_reviews=total_reviews,
        correct_reviews=state.correct_reviews + (1 if was_correct else 0),
        streak_count=streak_count,
        max_streak=max(state.max_streak, streak_count),
        average_response_time=_running_mean(
            state.average_response_time, state.total_reviews, outcome.response_time_ms
        ),
    )
    record = ReviewRecord(
        quality=outcome.quality,
        was_correct=was_correct,
        reviewed_at=now,
        ease_factor_before=state.ease_factor,
        ease_factor_after=result.ease_factor,
        interval_before=state.interval,
        interval_after=result.interval,
        response_time_ms=outcome.response_time_ms,
        review_type=outcome.review_type,
    )
    return new_state, result, record


def _running_mean(
    average: Optional[float], reviews_before: int, response_time: Optional[float]
) -> Optional[float]:
    if response_time is None:
        return average
    if average is None:
        return float(response_time)
    return (average * reviews_before + response_time) / (reviews_before + 1)
