"""
Pytest configuration and fixtures for API tests.

This module provides shared test fixtures including database setup
and FastAPI test client. The schema is built by running the Alembic
migrations against an in-memory SQLite database, and every test runs inside
a transaction that is rolled back afterwards.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.db import get_db_session
from api.main import create_app
from shared.repository import AuditLogRepository

BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def run_migrations(engine) -> None:
    """
    Run Alembic migrations against the test database.

    The in-memory database lives on a single connection, so the migration
    runs on a connection handed to Alembic rather than on a URL.
    """
    # This file is at api/tests/conftest.py, so go up two levels
    repo_root = Path(__file__).parent.parent.parent

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(repo_root / "migrations"))

    with engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine and bootstrap the schema."""
    engine = _sqlite_engine()
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_engine):
    """Create a test database session with transaction rollback."""
    connection = test_engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection)

    session = SessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


def _client_for(session):
    app = create_app()

    def override_get_db():
        yield session

    app.dependency_overrides[get_db_session] = override_get_db
    return app


@pytest.fixture
def client(test_session):
    """Create a FastAPI test client with a test database session."""
    app = _client_for(test_session)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def unmigrated_client():
    """Test client whose database has no audit_log table."""
    engine = _sqlite_engine()
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    app = _client_for(session)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    session.close()
    engine.dispose()


@pytest.fixture
def db_session(test_session):
    """Provide a test database session for direct repository testing."""
    return test_session


@pytest.fixture
def repository(db_session):
    return AuditLogRepository(db_session)


@pytest.fixture
def seeded_entries(repository):
    """
    Five entries, one minute apart, oldest first.
    """
    rows = [
        ("alice@example.com", "Post", "1", "CREATE"),
        ("alice@example.com", "Post", "1", "UPDATE"),
        ("bob@example.com", "Tool", "7", "CREATE"),
        ("unknown", "WorkSample", "12", "DELETE"),
        ("bob@example.com", "Post", "2", "CREATE"),
    ]
    created = []
    for offset, (actor, entity_type, entity_id, action) in enumerate(rows):
        created.append(
            repository.insert_entry(
                actor_email=actor,
                entity_type=entity_type,
                entity_id=entity_id,
                action=action,
                diff={
                    "before": None,
                    "after": {"id": entity_id},
                    "changes": {"id": {"before": None, "after": entity_id}},
                },
                created_at=BASE_TIME + timedelta(minutes=offset),
            )
        )
    return created
