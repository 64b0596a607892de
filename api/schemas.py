"""
Pydantic schemas for the audit trail API response contracts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FieldChangeResponse(BaseModel):
    """Before/after values of one changed field."""

    before: Any = None
    after: Any = None


class AuditDiffResponse(BaseModel):
    """Stored diff: whole snapshots plus the changed fields."""

    before: Optional[Any] = None
    after: Optional[Any] = None
    changes: dict[str, FieldChangeResponse] = Field(default_factory=dict)


class AuditEntryResponse(BaseModel):
    """Response schema for one audit log entry."""

    id: UUID
    actor_email: str
    entity_type: str
    entity_id: str
    action: Literal["CREATE", "UPDATE", "DELETE"]
    diff: AuditDiffResponse
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuditTrailResponse(BaseModel):
    """Response schema for GET /audit-log."""

    entries: list[AuditEntryResponse] = Field(default_factory=list)
    entity_types: list[str] = Field(
        default_factory=list, description="Distinct entity types, for the filter dropdown"
    )
    table_missing: bool = Field(
        False, description="True when the audit_log table has not been migrated yet"
    )
