"""Storage of card scheduling state and the review audit log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from spacedrep.engine import DEFAULT_CONFIG, CardState, ReviewRecord, SchedulerConfig

from . import CardSchedule, ReviewLog


@dataclass(slots=True)
class StoredCard:
    """A card state together with the identifiers it is stored under."""

    card_id: int
    owner_id: str
    state: CardState


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands timestamps back without tzinfo even for timezone-aware columns.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_card_state(schedule: CardSchedule) -> CardState:
    """Build the engine value from a stored schedule row."""
    return CardState(
        next_review_date=_as_utc(schedule.next_review_date),
        ease_factor=schedule.ease_factor,
        interval=schedule.interval,
        repetitions=schedule.repetitions,
        is_learning=schedule.is_learning,
        learning_step=schedule.learning_step,
        learning_delay=schedule.learning_delay,
        last_review_date=_as_utc(schedule.last_review_date),
        total_reviews=schedule.total_reviews,
        correct_reviews=schedule.correct_reviews,
        streak_count=schedule.streak_count,
        max_streak=schedule.max_streak,
        average_response_time=schedule.average_response_time,
    )


def _copy_state(schedule: CardSchedule, state: CardState) -> None:
    schedule.ease_factor = state.ease_factor
    schedule.interval = state.interval
    schedule.repetitions = state.repetitions
    schedule.is_learning = state.is_learning
    schedule.learning_step = state.learning_step
    schedule.learning_delay = state.learning_delay
    schedule.next_review_date = state.next_review_date
    schedule.last_review_date = state.last_review_date
    schedule.total_reviews = state.total_reviews
    schedule.correct_reviews = state.correct_reviews
    schedule.streak_count = state.streak_count
    schedule.max_streak = state.max_streak
    schedule.average_response_time = state.average_response_time


async def create_card_schedule(
    session: AsyncSession,
    card_id: int,
    owner_id: str,
    now: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> CardSchedule:
    """Store a fresh learning schedule for a newly created flashcard."""
    if now is None:
        now = datetime.now(timezone.utc)

    schedule = CardSchedule(card_id=card_id, owner_id=owner_id, created_at=now, updated_at=now)
    _copy_state(schedule, CardState.new(now, config))
    session.add(schedule)
    await session.flush()
    return schedule


async def ensure_card_schedules(
    session: AsyncSession,
    owner_id: str,
    card_ids: Iterable[int],
    now: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> list[int]:
    """Create schedules for the cards that do not have one yet.

    Returns the ids that were initialised; cards already scheduled keep their
    state untouched.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    wanted = list(dict.fromkeys(card_ids))
    if not wanted:
        return []

    result = await session.execute(
        select(CardSchedule.card_id).where(CardSchedule.card_id.in_(wanted))
    )
    existing = set(result.scalars().all())

    created: list[int] = []
    for card_id in wanted:
        if card_id in existing:
            continue
        schedule = CardSchedule(card_id=card_id, owner_id=owner_id, created_at=now, updated_at=now)
        _copy_state(schedule, CardState.new(now, config))
        session.add(schedule)
        created.append(card_id)

    if created:
        await session.flush()
    return created


async def get_card_schedule(
    session: AsyncSession, card_id: int, *, for_update: bool = False
) -> Optional[CardSchedule]:
    """Fetch a schedule row, optionally locking it for the rest of the transaction."""
    stmt = select(CardSchedule).where(CardSchedule.card_id == card_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalars().first()


async def load_card_state(
    session: AsyncSession, card_id: int, *, for_update: bool = False
) -> Optional[CardState]:
    """Return the scheduling state of a card, or ``None`` when it is unknown."""
    schedule = await get_card_schedule(session, card_id, for_update=for_update)
    if schedule is None:
        return None
    return to_card_state(schedule)


async def save_card_state(
    session: AsyncSession,
    card_id: int,
    state: CardState,
    now: Optional[datetime] = None,
) -> CardSchedule:
    """Persist a state returned by the engine."""
    if now is None:
        now = datetime.now(timezone.utc)

    schedule = await session.get(CardSchedule, card_id)
    if schedule is None:
        raise LookupError(f"No schedule stored for card {card_id}.")

    _copy_state(schedule, state)
    schedule.updated_at = now
    await session.flush()
    return schedule


async def list_card_states(session: AsyncSession, owner_id: str) -> list[StoredCard]:
    """Return every stored card of an owner, soonest due first."""
    stmt = (
        select(CardSchedule)
        .where(CardSchedule.owner_id == owner_id)
        .order_by(CardSchedule.next_review_date, CardSchedule.card_id)
    )
    result = await session.execute(stmt)
    return [
        StoredCard(card_id=row.card_id, owner_id=row.owner_id, state=to_card_state(row))
        for row in result.scalars().all()
    ]


async def record_review_log(
    session: AsyncSession,
    card_id: int,
    owner_id: str,
    record: ReviewRecord,
) -> ReviewLog:
    """Append an audit entry for a processed review."""
    entry = ReviewLog(
        card_id=card_id,
        owner_id=owner_id,
        quality=record.quality,
        was_correct=record.was_correct,
        response_time_ms=record.response_time_ms,
        review_type=record.review_type,
        ease_factor_before=record.ease_factor_before,
        ease_factor_after=record.ease_factor_after,
        interval_before=record.interval_before,
        interval_after=record.interval_after,
        reviewed_at=record.reviewed_at,
    )
    session.add(entry)
    await session.flush()
    return entry


async def list_review_records(
    session: AsyncSession,
    owner_id: str,
    since: Optional[datetime] = None,
) -> list[ReviewRecord]:
    """Return an owner's review log in chronological order."""
    stmt = select(ReviewLog).where(ReviewLog.owner_id == owner_id)
    if since is not None:
        stmt = stmt.where(ReviewLog.reviewed_at >= since)
    stmt = stmt.order_by(ReviewLog.reviewed_at, ReviewLog.id)
    result = await session.execute(stmt)
    return [
        ReviewRecord(
            quality=entry.quality,
            was_correct=entry.was_correct,
            reviewed_at=_as_utc(entry.reviewed_at),
            ease_factor_before=entry.ease_factor_before,
            ease_factor_after=entry.ease_factor_after,
            interval_before=entry.interval_before,
            interval_after=entry.interval_after,
            response_time_ms=entry.response_time_ms,
            review_type=entry.review_type,
        )
        for entry in result.scalars().all()
    ]


async def delete_card_schedule(session: AsyncSession, card_id: int) -> bool:
    """Remove a card's schedule and review log when its flashcard is deleted."""
    schedule = await session.get(CardSchedule, card_id)
    if schedule is None:
        return False
    await session.execute(delete(ReviewLog).where(ReviewLog.card_id == card_id))
    await session.delete(schedule)
    await session.flush()
    return True
