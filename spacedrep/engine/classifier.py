"""Grouping of cards into due, learning, upcoming and future buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from .config import DEFAULT_CONFIG, SchedulerConfig
from .models import Bucket, CardState


T = TypeVar("T")


def bucket(state: CardState, now: datetime, config: SchedulerConfig = DEFAULT_CONFIG) -> Bucket:
    """Return the review bucket ``state`` belongs to at ``now``."""
    if state.is_learning:
        return Bucket.LEARNING
    if state.next_review_date <= now:
        return Bucket.DUE_NOW
    if state.next_review_date <= now + config.upcoming_window:
        return Bucket.UPCOMING
    return Bucket.FUTURE


@dataclass
class CategorizedCards(Generic[T]):
    """Cards grouped by bucket, each list keeping the input order."""

    due_now: List[T] = field(default_factory=list)
    learning: List[T] = field(default_factory=list)
    upcoming: List[T] = field(default_factory=list)
    future: List[T] = field(default_factory=list)

    def get(self, kind: Bucket) -> List[T]:
        return getattr(self, kind.value)

    @property
    def total(self) -> int:
        return len(self.due_now) + len(self.learning) + len(self.upcoming) + len(self.future)

    def summary(self) -> dict[str, int]:
        counts = {kind.value: len(self.get(kind)) for kind in Bucket}
        counts["total"] = self.total
        return counts


def categorize(
    cards: Iterable[T],
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG,
    key: Optional[Callable[[T], CardState]] = None,
) -> CategorizedCards[T]:
    """Split ``cards`` into the four buckets.

    ``key`` extracts the ``CardState`` from each item; items are treated as
    card states themselves when it is omitted.
    """
    grouped: CategorizedCards[T] = CategorizedCards()
    for card in cards:
        state = key(card) if key is not None else card
        grouped.get(bucket(state, now, config)).append(card)
    return grouped


def due(
    cards: Iterable[T],
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG,
    key: Optional[Callable[[T], CardState]] = None,
) -> List[T]:
    """Return cards to offer in a study session: learning cards, then due ones."""
    grouped = categorize(cards, now, config, key=key)
    return grouped.learning + grouped.due_now
