"""
Database session dependency for the API service.

Wraps the shared session context manager for FastAPI's Depends and turns a
missing DATABASE_URL into a 503 instead of an import-time failure.
"""

from __future__ import annotations

from typing import Generator

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from shared.db import get_db_session as _get_db_session
from shared.db import is_database_configured

__all__ = ["get_db_session"]


def get_db_session() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    This is a generator function that FastAPI's Depends can use.
    FastAPI will handle the cleanup automatically.
    """
    if not is_database_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The database connection is not configured. "
            "Configure DATABASE_URL to enable audit logging.",
        )
    with _get_db_session() as session:
        yield session
