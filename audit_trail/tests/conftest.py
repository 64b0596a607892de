"""
Pytest fixtures for audit trail tests.

Database-backed tests run against an in-memory SQLite database whose schema
is built by the Alembic migrations, the same way a deployed database is.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.db import reset_engine


def run_migrations(engine) -> None:
    """Upgrade the database behind `engine` to the latest revision."""
    # This file is at audit_trail/tests/conftest.py, so go up two levels
    repo_root = Path(__file__).parent.parent.parent

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(repo_root / "migrations"))

    with engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.upgrade(alembic_cfg, "head")


@pytest.fixture
def sqlite_engine():
    """Fresh in-memory database with the audit_log table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(bind=sqlite_engine, autocommit=False, autoflush=False)


@pytest.fixture
def clean_env(monkeypatch):
    """Environment with no database configured and no cached engine."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("APP_ENV", "local")
    reset_engine()
    yield monkeypatch
    reset_engine()
