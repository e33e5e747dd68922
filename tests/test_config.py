from __future__ import annotations

from datetime import timedelta

import pytest

from spacedrep.app.settings import AppSettings
from spacedrep.engine import CORRECT_THRESHOLD, DEFAULT_CONFIG, SchedulerConfig


def _clear_scheduler_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SRS_LEARNING_STEPS",
        "SRS_GRADUATING_INTERVAL_DAYS",
        "SRS_CORRECT_THRESHOLD",
        "SRS_MAXIMUM_INTERVAL_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_default_configuration() -> None:
    assert DEFAULT_CONFIG.learning_steps == (timedelta(minutes=1), timedelta(minutes=10))
    assert DEFAULT_CONFIG.graduating_interval_days == 1
    assert DEFAULT_CONFIG.correct_threshold == CORRECT_THRESHOLD == 3
    assert DEFAULT_CONFIG.min_ease_factor == 1.3
    assert DEFAULT_CONFIG.default_ease_factor == 2.5
    assert DEFAULT_CONFIG.upcoming_window == timedelta(hours=24)
    assert DEFAULT_CONFIG.maximum_interval_days is None


def test_from_env_without_overrides_matches_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_scheduler_env(monkeypatch)

    assert SchedulerConfig.from_env() == DEFAULT_CONFIG


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_scheduler_env(monkeypatch)
    monkeypatch.setenv("SRS_LEARNING_STEPS", "1, 5, 30")
    monkeypatch.setenv("SRS_GRADUATING_INTERVAL_DAYS", "2")
    monkeypatch.setenv("SRS_CORRECT_THRESHOLD", "2")
    monkeypatch.setenv("SRS_MAXIMUM_INTERVAL_DAYS", "180")

    config = SchedulerConfig.from_env()

    assert config.learning_steps == (timedelta(minutes=1), timedelta(minutes=5), timedelta(minutes=30))
    assert config.graduating_interval_days == 2
    assert config.correct_threshold == 2
    assert config.maximum_interval_days == 180


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SRS_LEARNING_STEPS", "one,ten"),
        ("SRS_LEARNING_STEPS", "0,10"),
        ("SRS_LEARNING_STEPS", "1,inf"),
        ("SRS_GRADUATING_INTERVAL_DAYS", "soon"),
        ("SRS_GRADUATING_INTERVAL_DAYS", "0"),
        ("SRS_CORRECT_THRESHOLD", "7"),
        ("SRS_MAXIMUM_INTERVAL_DAYS", "forever"),
    ],
)
def test_from_env_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    _clear_scheduler_env(monkeypatch)
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError):
        SchedulerConfig.from_env()


def test_config_requires_learning_steps() -> None:
    with pytest.raises(ValueError):
        SchedulerConfig(learning_steps=())


def test_app_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_scheduler_env(monkeypatch)
    monkeypatch.setenv("APP_NAME", "Review Desk")
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = AppSettings.from_env()

    assert settings.app_name == "Review Desk"
    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.scheduler == DEFAULT_CONFIG


def test_app_settings_rejects_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "loud")

    with pytest.raises(RuntimeError):
        AppSettings.from_env()
