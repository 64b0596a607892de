"""
Unit tests for environment-based configuration.
"""

from __future__ import annotations

import pytest

from shared.config import DEFAULT_AUDIT_LIST_LIMIT, AppConfig


@pytest.fixture
def env(monkeypatch):
    for name in ("APP_ENV", "LOG_LEVEL", "LOG_FILE", "LOG_STDOUT", "DATABASE_URL", "AUDIT_LIST_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(env):
    config = AppConfig.from_env()

    assert config.environment == "local"
    assert config.log_level == "INFO"
    assert config.log_file is None
    assert config.log_stdout is True
    assert config.database_url is None
    assert config.database_configured is False
    assert config.audit_list_limit == DEFAULT_AUDIT_LIST_LIMIT


def test_database_url(env):
    env.setenv("DATABASE_URL", "postgresql+psycopg://u:p@localhost:5432/site")

    config = AppConfig.from_env()

    assert config.database_configured is True


def test_blank_database_url_is_not_configured(env):
    env.setenv("DATABASE_URL", "   ")

    assert AppConfig.from_env().database_configured is False


def test_unsupported_environment_rejected(env):
    env.setenv("APP_ENV", "production")

    with pytest.raises(ValueError):
        AppConfig.from_env()


def test_log_stdout_false(env):
    env.setenv("LOG_STDOUT", "no")

    assert AppConfig.from_env().log_stdout is False


@pytest.mark.parametrize(
    "raw, expected",
    [("25", 25), ("0", 1), ("10000", 500), ("abc", DEFAULT_AUDIT_LIST_LIMIT)],
)
def test_audit_list_limit_clamped(env, raw, expected):
    env.setenv("AUDIT_LIST_LIMIT", raw)

    assert AppConfig.from_env().audit_list_limit == expected
