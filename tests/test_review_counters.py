from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from spacedrep.engine import CardState, ReviewOutcome, SchedulingError, apply_review


NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _reviewed_card() -> CardState:
    return CardState(
        next_review_date=NOW,
        ease_factor=2.5,
        interval=6,
        repetitions=2,
        is_learning=False,
        last_review_date=NOW - timedelta(days=6),
        total_reviews=4,
        correct_reviews=3,
        streak_count=2,
        max_streak=3,
        average_response_time=1500.0,
    )


def test_correct_review_updates_counters_and_streak() -> None:
    card = replace(_reviewed_card(), max_streak=2)

    updated, _, record = apply_review(card, ReviewOutcome(quality=4), NOW)

    assert updated.total_reviews == 5
    assert updated.correct_reviews == 4
    assert updated.streak_count == 3
    assert updated.max_streak == 3
    assert updated.last_review_date == NOW
    assert record.was_correct is True


def test_incorrect_review_resets_streak_but_keeps_best() -> None:
    updated, _, record = apply_review(_reviewed_card(), ReviewOutcome(quality=2), NOW)

    assert updated.total_reviews == 5
    assert updated.correct_reviews == 3
    assert updated.streak_count == 0
    assert updated.max_streak == 3
    assert record.was_correct is False


def test_response_time_running_mean() -> None:
    updated, _, _ = apply_review(
        _reviewed_card(), ReviewOutcome(quality=5, response_time_ms=4000), NOW
    )

    assert updated.average_response_time == pytest.approx((1500.0 * 4 + 4000) / 5)


def test_missing_response_time_keeps_average() -> None:
    updated, _, _ = apply_review(_reviewed_card(), ReviewOutcome(quality=5), NOW)

    assert updated.average_response_time == 1500.0


def test_first_response_time_becomes_average() -> None:
    updated, _, _ = apply_review(
        CardState.new(NOW), ReviewOutcome(quality=3, response_time_ms=2200), NOW
    )

    assert updated.average_response_time == 2200.0


def test_review_record_describes_schedule_change() -> None:
    _, result, record = apply_review(
        _reviewed_card(),
        ReviewOutcome(quality=1, response_time_ms=900, review_type="extra_practice"),
        NOW,
    )

    assert record.quality == 1
    assert record.reviewed_at == NOW
    assert record.ease_factor_before == 2.5
    assert record.ease_factor_after == result.ease_factor
    assert record.interval_before == 6
    assert record.interval_after == 6
    assert record.response_time_ms == 900
    assert record.review_type == "extra_practice"


def test_scheduler_fields_are_copied_into_state() -> None:
    updated, result, _ = apply_review(_reviewed_card(), ReviewOutcome(quality=1), NOW)

    assert updated.is_learning is result.is_learning is True
    assert updated.learning_delay == result.learning_delay
    assert updated.next_review_date == result.next_review_date
    assert updated.repetitions == 0


def test_unknown_review_type_is_rejected() -> None:
    with pytest.raises(SchedulingError):
        apply_review(_reviewed_card(), ReviewOutcome(quality=4, review_type="binge"), NOW)


def test_negative_response_time_is_rejected() -> None:
    with pytest.raises(SchedulingError):
        apply_review(_reviewed_card(), ReviewOutcome(quality=4, response_time_ms=-5), NOW)


def test_first_response_time_becomes_average_after_untimed_reviews() -> None:
    card = replace(_reviewed_card(), average_response_time=None)

    updated, _, _ = apply_review(card, ReviewOutcome(quality=4, response_time_ms=1800), NOW)

    assert updated.average_response_time == 1800.0
