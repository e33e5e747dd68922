from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from spacedrep.engine import CardState, ReviewRecord, aggregate


NOW = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


def _review(reviewed_at: datetime, response_time_ms) -> ReviewRecord:
    return ReviewRecord(
        quality=4,
        was_correct=True,
        reviewed_at=reviewed_at,
        ease_factor_before=2.5,
        ease_factor_after=2.5,
        interval_before=1,
        interval_after=6,
        response_time_ms=response_time_ms,
    )


def test_aggregate_without_cards_uses_defaults() -> None:
    stats = aggregate([], now=NOW)

    assert stats.total_cards == 0
    assert stats.cards_due == 0
    assert stats.accuracy == 0
    assert stats.average_ease_factor == 2.5
    assert stats.streak_current == 0
    assert stats.streak_best == 0
    assert stats.average_response_time == 0
    assert stats.time_spent_total_ms == 0


def test_aggregate_counts_cards_and_reviews() -> None:
    cards = [
        CardState(next_review_date=NOW - timedelta(minutes=1), total_reviews=1, correct_reviews=1,
                  streak_count=1, max_streak=1, learning_step=1, learning_delay=timedelta(minutes=10)),
        CardState(next_review_date=NOW - timedelta(days=1), ease_factor=2.0, interval=6, repetitions=2,
                  is_learning=False, total_reviews=6, correct_reviews=4, streak_count=2, max_streak=4,
                  average_response_time=3000.0),
        CardState(next_review_date=NOW + timedelta(days=10), ease_factor=2.9, interval=10, repetitions=3,
                  is_learning=False, total_reviews=3, correct_reviews=3, streak_count=3, max_streak=3,
                  average_response_time=1000.0),
        CardState(next_review_date=NOW),
    ]

    stats = aggregate(cards, now=NOW)

    assert stats.total_cards == 4
    assert stats.cards_due == 1
    assert stats.cards_learning == 2
    assert stats.cards_graduated == 2
    assert stats.total_reviews == 10
    assert stats.correct_reviews == 8
    assert stats.accuracy == pytest.approx(80.0)
    assert stats.average_ease_factor == pytest.approx((2.5 + 2.0 + 2.9 + 2.5) / 4)
    assert stats.streak_current == 3
    assert stats.streak_best == 4
    assert stats.average_response_time == pytest.approx(2000.0)


def test_graduated_requires_a_successful_repetition() -> None:
    relapsed_then_graduated = CardState(next_review_date=NOW + timedelta(days=5), interval=5,
                                        repetitions=0, is_learning=False)

    assert aggregate([relapsed_then_graduated], now=NOW).cards_graduated == 0


def test_review_log_contributes_time_spent() -> None:
    reviews = [
        _review(NOW - timedelta(days=2), 5000),
        _review(NOW - timedelta(hours=3), 2000),
        _review(NOW - timedelta(minutes=5), 1500),
        _review(NOW - timedelta(minutes=1), None),
    ]

    stats = aggregate([CardState(next_review_date=NOW)], reviews, now=NOW)

    assert stats.time_spent_today_ms == 3500
    assert stats.time_spent_total_ms == 8500
    assert stats.total_reviews == 0
