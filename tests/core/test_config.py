from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from release_logger.core.config import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    DEFAULT_PREFIX,
    LoggerConfig,
    default_log_directory,
)
from release_logger.core.models import LogLevel

ENV_NAMES = (
    "MAX_FILE_SIZE",
    "MAX_FILES",
    "MAX_PENDING",
    "DIR",
    "PREFIX",
    "ENABLED",
    "MIN_LEVEL",
    "INCLUDE_STACK_TRACE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(f"RELEASE_LOGGER_{name}", raising=False)


def test_defaults() -> None:
    config = LoggerConfig()

    assert config.max_file_size == DEFAULT_MAX_FILE_SIZE == 5 * 1024 * 1024
    assert config.max_files == DEFAULT_MAX_FILES == 5
    assert config.file_prefix == DEFAULT_PREFIX == "app-log"
    assert config.enabled is True
    assert config.min_level is LogLevel.LOG
    assert config.include_stack_trace is True
    assert config.max_pending == 10_000
    assert config.log_directory == default_log_directory()
    assert config.log_directory.name == "logs"


def test_config_is_frozen(tmp_path: Path) -> None:
    config = LoggerConfig(log_directory=tmp_path)
    with pytest.raises(ValidationError):
        config.max_files = 10


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_file_size": 0},
        {"max_files": 0},
        {"max_pending": 0},
        {"file_prefix": ""},
        {"file_prefix": "a/b"},
        {"file_prefix": ".."},
        {"min_level": "loud"},
    ],
)
def test_invalid_values_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        LoggerConfig(**overrides)


def test_min_level_accepts_strings() -> None:
    assert LoggerConfig(min_level="WARNING").min_level is LogLevel.WARN


def test_log_directory_expands_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert LoggerConfig(log_directory="~/logs").log_directory == tmp_path / "logs"


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RELEASE_LOGGER_MAX_FILE_SIZE", "2048")
    monkeypatch.setenv("RELEASE_LOGGER_MAX_FILES", "3")
    monkeypatch.setenv("RELEASE_LOGGER_MAX_PENDING", "50")
    monkeypatch.setenv("RELEASE_LOGGER_DIR", str(tmp_path))
    monkeypatch.setenv("RELEASE_LOGGER_PREFIX", "mobile")
    monkeypatch.setenv("RELEASE_LOGGER_ENABLED", "no")
    monkeypatch.setenv("RELEASE_LOGGER_MIN_LEVEL", "error")
    monkeypatch.setenv("RELEASE_LOGGER_INCLUDE_STACK_TRACE", "0")

    config = LoggerConfig.from_env()

    assert config.max_file_size == 2048
    assert config.max_files == 3
    assert config.max_pending == 50
    assert config.log_directory == tmp_path
    assert config.file_prefix == "mobile"
    assert config.enabled is False
    assert config.min_level is LogLevel.ERROR
    assert config.include_stack_trace is False


def test_from_env_overrides_win_and_none_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RELEASE_LOGGER_MAX_FILES", "3")
    monkeypatch.setenv("RELEASE_LOGGER_PREFIX", "env")

    config = LoggerConfig.from_env(max_files=7, file_prefix=None)

    assert config.max_files == 7
    assert config.file_prefix == "env"


@pytest.mark.parametrize(
    ("name", "value", "match"),
    [
        ("MAX_FILES", "many", "must be an integer"),
        ("ENABLED", "maybe", "must be a boolean"),
    ],
)
def test_from_env_rejects_malformed_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str, match: str) -> None:
    monkeypatch.setenv(f"RELEASE_LOGGER_{name}", value)
    with pytest.raises(ValueError, match=match):
        LoggerConfig.from_env()
