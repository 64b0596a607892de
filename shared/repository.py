"""
Shared repository for audit log data access.

This module provides low-level database access using SQLAlchemy Table objects,
keeping the recorder and API service layers clean and testable. Rows are
append-only: there is deliberately no update or delete method.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from shared.db import get_audit_log_table

LIKE_ESCAPE = "\\"


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class AuditLogRepository:
    """Repository for audit log database operations."""

    def __init__(self, session: Session):
        self.session = session
        self.audit_log_table = get_audit_log_table()

    def insert_entry(
        self,
        *,
        actor_email: str,
        entity_type: str,
        entity_id: str,
        action: str,
        diff: dict,
        created_at: Optional[datetime] = None,
    ) -> dict:
        """
        Append one audit entry.

        Returns the created entry as a dict (matching table columns).
        """
        entry_id = uuid4()

        insert_stmt = self.audit_log_table.insert().values(
            id=entry_id,
            actor_email=actor_email,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            diff=diff,
            created_at=created_at or datetime.now(timezone.utc),
        )

        self.session.execute(insert_stmt)
        self.session.flush()

        select_stmt = select(self.audit_log_table).where(self.audit_log_table.c.id == entry_id)
        row = self.session.execute(select_stmt).one()
        return dict(row._mapping)

    def list_entries(
        self,
        *,
        action: Optional[str] = None,
        entity_type: Optional[str] = None,
        query: Optional[str] = None,
        limit: int = 100,
    ) -> list[dict]:
        """
        List audit entries, newest first.

        `query` matches case-insensitively anywhere in the actor, entity type,
        entity id or action. `%` and `_` in it match literally.
        """
        table = self.audit_log_table
        stmt = select(table)

        if action:
            stmt = stmt.where(table.c.action == action)
        if entity_type:
            stmt = stmt.where(table.c.entity_type == entity_type)
        if query:
            pattern = f"%{_escape_like(query)}%"
            stmt = stmt.where(
                or_(
                    table.c.actor_email.ilike(pattern, escape=LIKE_ESCAPE),
                    table.c.entity_type.ilike(pattern, escape=LIKE_ESCAPE),
                    table.c.entity_id.ilike(pattern, escape=LIKE_ESCAPE),
                    table.c.action.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        stmt = stmt.order_by(table.c.created_at.desc()).limit(limit)
        results = self.session.execute(stmt).all()
        return [dict(row._mapping) for row in results]

    def list_entity_types(self) -> list[str]:
        """Return the distinct entity types that have audit entries, sorted."""
        stmt = select(self.audit_log_table.c.entity_type).distinct()
        return sorted(self.session.execute(stmt).scalars().all())

    def get_entries_for_entity(self, entity_type: str, entity_id: str) -> list[dict]:
        """
        Get the full history of one entity in stable order (created_at, then id).
        """
        table = self.audit_log_table
        stmt = (
            select(table)
            .where(table.c.entity_type == entity_type, table.c.entity_id == entity_id)
            .order_by(table.c.created_at.asc(), table.c.id.asc())
        )
        results = self.session.execute(stmt).all()
        return [dict(row._mapping) for row in results]
