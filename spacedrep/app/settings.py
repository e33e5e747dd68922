"""Configuration helpers for the scheduling service runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass

from spacedrep.engine import SchedulerConfig


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    scheduler: SchedulerConfig

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Spaced Repetition Scheduler")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise RuntimeError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR or CRITICAL.")

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            scheduler=SchedulerConfig.from_env(),
        )
