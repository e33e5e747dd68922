"""Bootstrap logic for running scheduler reports."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from spacedrep.app.settings import AppSettings
from spacedrep.db import get_session_factory, run_migrations_if_needed
from spacedrep.engine import Bucket
from spacedrep.services import ReviewService


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


async def build_report(
    service: ReviewService, owner_id: str, now: Optional[datetime] = None
) -> str:
    """Render the due-card summary and study statistics of an owner."""
    if now is None:
        now = datetime.now(timezone.utc)

    overview = await service.due_overview(owner_id, now=now)
    stats = await service.study_stats(owner_id, now=now)
    summary = overview.cards.summary()

    lines = [
        f"Cards for {owner_id}: {summary['total']}",
        f"  due now:  {summary[Bucket.DUE_NOW.value]}",
        f"  learning: {summary[Bucket.LEARNING.value]}",
        f"  upcoming: {summary[Bucket.UPCOMING.value]}",
        f"  future:   {summary[Bucket.FUTURE.value]}",
        f"Ready to study: {overview.total_due}",
        f"Reviews: {stats.total_reviews} ({round(stats.accuracy)}% correct)",
        f"Average ease: {stats.average_ease_factor:.2f}",
        f"Streak: {stats.streak_current} (best {stats.streak_best})",
    ]
    return "\n".join(lines)


def run_report(settings: AppSettings, owner_id: str) -> None:
    """Print a due-card report for ``owner_id`` using the provided settings."""
    _configure_logging(settings.log_level)
    LOGGER.info("%s running in %s mode.", settings.app_name, settings.app_env)

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    service = ReviewService(get_session_factory(), settings.scheduler)
    print(asyncio.run(build_report(service, owner_id)))
