"""
Service layer for the audit trail endpoints.

Resolves the loosely-typed query parameters the admin dashboard sends and
turns repository rows into response models. A database that has not been
migrated yet is reported as `table_missing` rather than as an error.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from api.schemas import AuditEntryResponse, AuditTrailResponse
from audit_trail.constants import AUDIT_ACTIONS
from audit_trail.store import is_missing_audit_table_error
from shared.config import MAX_AUDIT_LIST_LIMIT
from shared.logging import get_logger
from shared.repository import AuditLogRepository

logger = get_logger(__name__)


def resolve_param(value: Optional[str]) -> Optional[str]:
    """Strip a query parameter; blank means not provided."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def resolve_action(value: Optional[str]) -> Optional[str]:
    """Upper-case a known action; unknown actions are dropped, not rejected."""
    normalized = resolve_param(value)
    if normalized is None:
        return None
    normalized = normalized.upper()
    return normalized if normalized in AUDIT_ACTIONS else None


class AuditLogService:
    """Service for audit trail queries."""

    def __init__(self, repository: AuditLogRepository, default_limit: int = 100):
        self.repository = repository
        self.default_limit = default_limit

    def list_trail(
        self,
        *,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> AuditTrailResponse:
        """
        List recent audit entries plus the entity types available for filtering.
        """
        effective_limit = min(limit or self.default_limit, MAX_AUDIT_LIST_LIMIT)

        try:
            rows = self.repository.list_entries(
                action=resolve_action(action),
                entity_type=resolve_param(entity_type),
                query=resolve_param(query),
                limit=effective_limit,
            )
            entity_types = self.repository.list_entity_types()
        except SQLAlchemyError as e:
            if not is_missing_audit_table_error(e):
                raise
            self.repository.session.rollback()
            logger.warning(
                "audit_table_missing",
                detail="Run the Alembic migrations to enable audit logging.",
            )
            return AuditTrailResponse(entries=[], entity_types=[], table_missing=True)

        return AuditTrailResponse(
            entries=[AuditEntryResponse.model_validate(row) for row in rows],
            entity_types=entity_types,
        )

    def get_entity_history(self, entity_type: str, entity_id: str) -> list[AuditEntryResponse]:
        """
        Return every entry for one entity, oldest first.

        An unmigrated database has no history yet, so it yields an empty list.
        """
        try:
            rows = self.repository.get_entries_for_entity(entity_type, entity_id)
        except SQLAlchemyError as e:
            if not is_missing_audit_table_error(e):
                raise
            self.repository.session.rollback()
            logger.warning(
                "audit_table_missing",
                detail="Run the Alembic migrations to enable audit logging.",
                entity_type=entity_type,
                entity_id=entity_id,
            )
            return []

        return [AuditEntryResponse.model_validate(row) for row in rows]
