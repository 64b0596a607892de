"""
Audit trail for admin mutations.

Typical use from a mutation endpoint, after the entity write succeeded:

    from audit_trail import AuditAction, build_audit_diff, record_audit

    record_audit(
        actor_email=session_email,
        entity_type="Post",
        entity_id=post["id"],
        action=AuditAction.UPDATE,
        diff=build_audit_diff(existing, post),
    )
"""

from __future__ import annotations

from audit_trail.constants import UNKNOWN_ACTOR, AuditAction
from audit_trail.diff import AuditDiff, FieldChange, build_audit_diff, values_equal
from audit_trail.recorder import AuditEntry, record_audit, record_change
from audit_trail.snapshot import normalize_snapshot
from audit_trail.store import (
    AuditStore,
    AuditStoreUnavailableError,
    SqlAuditStore,
    UnconfiguredAuditStore,
    get_default_store,
    is_missing_audit_table_error,
)

__all__ = [
    "AuditAction",
    "AuditDiff",
    "AuditEntry",
    "AuditStore",
    "AuditStoreUnavailableError",
    "FieldChange",
    "SqlAuditStore",
    "UNKNOWN_ACTOR",
    "UnconfiguredAuditStore",
    "build_audit_diff",
    "get_default_store",
    "is_missing_audit_table_error",
    "normalize_snapshot",
    "record_audit",
    "record_change",
    "values_equal",
]
