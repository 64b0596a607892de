"""
Shared database connection and session management.

This module provides sync SQLAlchemy engine and session setup reused by the
audit recorder and the API service. The `audit_log` table is declared here as
a Core `Table`, mirroring the Alembic-managed schema, so the repository can
work with it without ORM models.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator, Optional

import sqlalchemy as sa
from sqlalchemy import MetaData, Table, create_engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shared.config import get_config

AUDIT_LOG_TABLE = "audit_log"

metadata = MetaData()

audit_log_table = Table(
    AUDIT_LOG_TABLE,
    metadata,
    sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
    sa.Column("actor_email", sa.Text(), nullable=False),
    sa.Column("entity_type", sa.Text(), nullable=False),
    sa.Column("entity_id", sa.Text(), nullable=False),
    sa.Column("action", sa.String(16), nullable=False),
    sa.Column(
        "diff",
        sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql"),
        nullable=False,
    ),
    sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    ),
    sa.CheckConstraint(
        "action IN ('CREATE', 'UPDATE', 'DELETE')",
        name="ck_audit_log_action",
    ),
    sa.Index("ix_audit_log_created_at", "created_at"),
    sa.Index("ix_audit_log_entity", "entity_type", "entity_id"),
    sa.Index("ix_audit_log_actor_email", "actor_email"),
)


# Global engine and session factory (initialized on first use).
_engine: Optional[Engine] = None
_SessionLocal = None


def is_database_configured() -> bool:
    """Return True when DATABASE_URL is set."""
    return get_config().database_configured


def get_engine() -> Engine:
    """Get or create the SQLAlchemy engine."""
    global _engine
    if _engine is None:
        config = get_config()
        if not config.database_url:
            raise ValueError(
                "DATABASE_URL environment variable is required. "
                "Set it to a PostgreSQL connection string."
            )
        _engine = create_engine(
            config.database_url,
            pool_pre_ping=True,
            echo=False,  # Set to True for SQL debugging in development.
        )
    return _engine


def get_session_factory() -> Callable[[], Session]:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def reset_engine() -> None:
    """Dispose of the global engine so the next call rebuilds it from config."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def session_scope(factory: Callable[[], Session]) -> Generator[Session, None, None]:
    """Open a session from `factory`, commit on success, roll back on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            # Use session here
            pass
    """
    with session_scope(get_session_factory()) as session:
        yield session


def get_audit_log_table() -> Table:
    """Get the audit_log table."""
    return audit_log_table
