"""Review workflow that drives the scheduling engine against stored cards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spacedrep.db.cards import (
    StoredCard,
    ensure_card_schedules,
    get_card_schedule,
    list_card_states,
    list_review_records,
    record_review_log,
    save_card_state,
    to_card_state,
)
from spacedrep.engine import (
    DEFAULT_CONFIG,
    CardState,
    CategorizedCards,
    ReviewOutcome,
    ReviewRecord,
    SchedulerConfig,
    SchedulerResult,
    SchedulingError,
    StudyStats,
    aggregate,
    apply_review,
    categorize,
    due,
    validate_quality,
)


LOGGER = logging.getLogger(__name__)


class CardNotFoundError(LookupError):
    """Raised when a review targets a card without a stored schedule."""

    def __init__(self, card_id: int) -> None:
        super().__init__(f"Card {card_id} has no spaced-repetition schedule.")
        self.card_id = card_id


@dataclass(slots=True)
class ReviewSubmission:
    """Outcome of processing one review."""

    card_id: int
    state: CardState
    result: SchedulerResult
    record: ReviewRecord

    @property
    def graduated(self) -> bool:
        return self.result.graduated


@dataclass(slots=True)
class DueOverview:
    """Cards of an owner grouped for the due-cards views."""

    cards: CategorizedCards[StoredCard]
    due_cards: List[StoredCard]

    @property
    def total_due(self) -> int:
        return len(self.due_cards)


def _state_of(card: StoredCard) -> CardState:
    return card.state


class ReviewService:
    """Loads card state, applies reviews and persists the results."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        config: SchedulerConfig = DEFAULT_CONFIG,
    ) -> None:
        self._session_factory = session_factory
        self._config = config

    async def add_cards(
        self,
        owner_id: str,
        card_ids: Iterable[int],
        now: Optional[datetime] = None,
    ) -> List[int]:
        """Start scheduling the given cards; returns the newly scheduled ids."""
        async with self._session_factory() as session:
            async with session.begin():
                created = await ensure_card_schedules(
                    session, owner_id, card_ids, now=now, config=self._config
                )
        if created:
            LOGGER.info("Scheduled %s new cards for owner %s.", len(created), owner_id)
        return created

    async def submit_review(
        self,
        card_id: int,
        outcome: ReviewOutcome,
        now: Optional[datetime] = None,
    ) -> ReviewSubmission:
        """Apply a review to a stored card and record it in the audit log.

        The card row stays locked for the whole transaction, so concurrent
        reviews of the same card are applied one after another.
        """
        validate_quality(outcome.quality)
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    schedule = await get_card_schedule(session, card_id, for_update=True)
                    if schedule is None:
                        raise CardNotFoundError(card_id)

                    previous = to_card_state(schedule)
                    state, result, record = apply_review(previous, outcome, now, self._config)
                    await save_card_state(session, card_id, state, now=now)
                    await record_review_log(session, card_id, schedule.owner_id, record)
        except (CardNotFoundError, SchedulingError):
            raise
        except Exception:
            LOGGER.exception("Failed to store review for card %s.", card_id)
            raise

        if result.graduated:
            LOGGER.info("Card %s graduated; next review in %s days.", card_id, result.interval)
        elif not previous.is_learning and result.is_learning:
            LOGGER.info(
                "Card %s lapsed; ease factor %.2f -> %.2f.",
                card_id,
                record.ease_factor_before,
                record.ease_factor_after,
            )
        return ReviewSubmission(card_id=card_id, state=state, result=result, record=record)

    async def due_overview(self, owner_id: str, now: Optional[datetime] = None) -> DueOverview:
        """Group an owner's cards into due, learning, upcoming and future."""
        if now is None:
            now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            cards = await list_card_states(session, owner_id)

        return DueOverview(
            cards=categorize(cards, now, self._config, key=_state_of),
            due_cards=due(cards, now, self._config, key=_state_of),
        )

    async def study_stats(self, owner_id: str, now: Optional[datetime] = None) -> StudyStats:
        """Compute dashboard statistics for an owner."""
        if now is None:
            now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            cards = await list_card_states(session, owner_id)
            reviews = await list_review_records(session, owner_id)

        return aggregate(
            [card.state for card in cards],
            reviews,
            now=now,
            config=self._config,
        )
