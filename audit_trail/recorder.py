"""
Audit recorder: appends one entry per admin mutation.

Recording is best-effort. A missing database, an invalid action or diff, or a
failed write is logged and reported through the return value; nothing raised here
reaches the mutation endpoint that called it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from audit_trail.constants import UNKNOWN_ACTOR, AuditAction
from audit_trail.diff import AuditDiff, build_audit_diff
from audit_trail.store import AuditStore, get_default_store
from shared.logging import get_logger

logger = get_logger(__name__)

EntityId = Union[str, int]


@dataclass(frozen=True)
class AuditEntry:
    actor_email: str
    entity_type: str
    entity_id: str
    action: AuditAction
    diff: dict
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _coerce_action(action: Union[AuditAction, str]) -> AuditAction:
    if isinstance(action, AuditAction):
        return action
    return AuditAction(str(action).strip().upper())


def _diff_payload(diff: Union[AuditDiff, Mapping[str, Any]]) -> dict:
    if isinstance(diff, AuditDiff):
        return diff.as_dict()
    if not isinstance(diff, Mapping):
        raise TypeError(f"diff must be an AuditDiff or a mapping, got {type(diff).__name__}")
    return dict(diff)


def _changed_fields(diff: Mapping[str, Any]) -> list[str]:
    changes = diff.get("changes")
    if not isinstance(changes, Mapping):
        return []
    return [str(name) for name in changes]


def record_audit(
    *,
    actor_email: Optional[str],
    entity_type: str,
    entity_id: EntityId,
    action: Union[AuditAction, str],
    diff: Union[AuditDiff, Mapping[str, Any]],
    store: Optional[AuditStore] = None,
) -> bool:
    """
    Persist one audit entry.

    Args:
        actor_email: Identity of the admin making the change; None or empty
            is recorded as "unknown".
        entity_type: Kind of entity changed (e.g. "Post", "WorkSample").
        entity_id: Entity primary key; stored as a string.
        action: CREATE, UPDATE or DELETE (strings are case-insensitive).
        diff: Result of build_audit_diff, or an equivalent mapping.
        store: Storage capability; resolved from configuration when omitted.

    Returns:
        True if the entry was written, False if it was skipped or failed.
    """
    try:
        audit_action = _coerce_action(action)
    except ValueError:
        logger.error(
            "audit_record_invalid_action",
            action=str(action),
            entity_type=entity_type,
            entity_id=str(entity_id),
        )
        return False

    if store is None:
        try:
            store = get_default_store()
        except Exception as e:
            logger.error(
                "audit_store_resolution_failed",
                error=str(e),
                error_type=type(e).__name__,
                entity_type=entity_type,
                entity_id=str(entity_id),
            )
            return False

    if not store.available:
        logger.warning(
            "audit_store_unavailable",
            detail="Database is not configured. Audit entry was not recorded.",
            entity_type=entity_type,
            entity_id=str(entity_id),
            action=audit_action.value,
        )
        return False

    try:
        entry = AuditEntry(
            actor_email=actor_email or UNKNOWN_ACTOR,
            entity_type=entity_type,
            entity_id=str(entity_id),
            action=audit_action,
            diff=_diff_payload(diff),
        )
    except (TypeError, ValueError) as e:
        logger.error(
            "audit_record_invalid_diff",
            error=str(e),
            error_type=type(e).__name__,
            entity_type=entity_type,
            action=audit_action.value,
        )
        return False

    try:
        store.write(entry)
    except Exception as e:
        logger.error(
            "audit_record_failed",
            error=str(e),
            error_type=type(e).__name__,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            action=entry.action.value,
        )
        return False

    logger.info(
        "audit_recorded",
        actor_email=entry.actor_email,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        action=entry.action.value,
        changed_fields=_changed_fields(entry.diff),
    )
    return True


def record_change(
    *,
    actor_email: Optional[str],
    entity_type: str,
    entity_id: EntityId,
    action: Union[AuditAction, str],
    before: Any,
    after: Any,
    store: Optional[AuditStore] = None,
) -> bool:
    """
    Diff `before` against `after` and record the result.

    Mutation endpoints pass None as `before` for creates and as `after` for
    deletes.
    """
    try:
        diff = build_audit_diff(before, after)
    except Exception as e:
        logger.error(
            "audit_diff_failed",
            error=str(e),
            error_type=type(e).__name__,
            entity_type=entity_type,
        )
        return False

    return record_audit(
        actor_email=actor_email,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        diff=diff,
        store=store,
    )
