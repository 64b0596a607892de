"""
Storage capability for audit entries.

The recorder never talks to the database directly; it is handed an
`AuditStore`. A deployment without DATABASE_URL gets the unconfigured store,
which reports itself unavailable so the recorder can skip the write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from shared.db import AUDIT_LOG_TABLE, get_session_factory, is_database_configured, session_scope
from shared.repository import AuditLogRepository

if TYPE_CHECKING:
    from audit_trail.recorder import AuditEntry

# PostgreSQL SQLSTATE for "undefined_table"
UNDEFINED_TABLE_SQLSTATE = "42P01"


class AuditStoreUnavailableError(RuntimeError):
    """Raised when writing to a store that has no database behind it."""


class AuditStore(Protocol):
    available: bool

    def write(self, entry: "AuditEntry") -> None: ...


class UnconfiguredAuditStore:
    available = False

    def write(self, entry: "AuditEntry") -> None:
        raise AuditStoreUnavailableError(
            "Audit storage is not configured. Set DATABASE_URL to enable audit logging."
        )


class SqlAuditStore:
    """Writes each entry in its own short transaction."""

    available = True

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def write(self, entry: "AuditEntry") -> None:
        with session_scope(self._session_factory) as session:
            AuditLogRepository(session).insert_entry(
                actor_email=entry.actor_email,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                action=entry.action.value,
                diff=entry.diff,
                created_at=entry.created_at,
            )


def get_default_store() -> AuditStore:
    """SQL store over the shared session factory, or the unconfigured store."""
    if not is_database_configured():
        return UnconfiguredAuditStore()
    return SqlAuditStore(get_session_factory())


def is_missing_audit_table_error(exc: BaseException) -> bool:
    """
    Return True if `exc` says the audit_log table does not exist yet.

    Recognises PostgreSQL's undefined_table error and SQLite's "no such table".
    """
    if not isinstance(exc, (ProgrammingError, OperationalError)):
        return False

    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNDEFINED_TABLE_SQLSTATE:
        return True

    message = str(orig if orig is not None else exc).lower()
    return AUDIT_LOG_TABLE in message and (
        "no such table" in message or "does not exist" in message
    )
