"""
Field-level diffs between two entity snapshots (pure functions).

Both snapshots are normalized first. Only dict-shaped snapshots contribute
fields; a field present on only one side is always a change, with None shown
for the missing side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from audit_trail.snapshot import JsonValue, normalize_snapshot


@dataclass(frozen=True)
class FieldChange:
    before: JsonValue
    after: JsonValue

    def as_dict(self) -> dict:
        return {"before": self.before, "after": self.after}


@dataclass(frozen=True)
class AuditDiff:
    """Whole before/after snapshots plus the fields that differ between them."""

    before: Optional[JsonValue]
    after: Optional[JsonValue]
    changes: dict[str, FieldChange] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    def as_dict(self) -> dict:
        """JSON shape stored in audit_log.diff."""
        return {
            "before": self.before,
            "after": self.after,
            "changes": {name: change.as_dict() for name, change in self.changes.items()},
        }


def values_equal(a: JsonValue, b: JsonValue) -> bool:
    """
    Structural equality over normalized JSON values.

    Dict key order is irrelevant, booleans never equal numbers, and ints and
    floats compare by value. Nested containers are walked with an explicit
    stack, so arbitrarily deep snapshots compare without recursion.
    """
    pending: list[tuple[JsonValue, JsonValue]] = [(a, b)]
    while pending:
        left, right = pending.pop()
        if isinstance(left, bool) or isinstance(right, bool):
            if type(left) is not type(right) or left != right:
                return False
        elif isinstance(left, dict) and isinstance(right, dict):
            if left.keys() != right.keys():
                return False
            pending.extend((left[key], right[key]) for key in left)
        elif isinstance(left, list) and isinstance(right, list):
            if len(left) != len(right):
                return False
            pending.extend(zip(left, right))
        elif isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
            return False
        elif left != right:
            return False
    return True


def _fields(snapshot: Optional[JsonValue]) -> dict[str, Any]:
    return snapshot if isinstance(snapshot, dict) else {}


def build_audit_diff(before: Any, after: Any) -> AuditDiff:
    """
    Compute the audit diff between two entity states.

    Pass None as `before` for a create and as `after` for a delete; every
    field of the other side is then reported as changed, including fields
    whose value is null. A field present on only one side is always a change.
    """
    plain_before = normalize_snapshot(before)
    plain_after = normalize_snapshot(after)

    before_fields = _fields(plain_before)
    after_fields = _fields(plain_after)

    changes: dict[str, FieldChange] = {}
    # dict.fromkeys keeps first-seen order: before's fields, then new ones
    for name in dict.fromkeys([*before_fields, *after_fields]):
        before_value = before_fields.get(name)
        after_value = after_fields.get(name)
        present_on_both = name in before_fields and name in after_fields
        if not present_on_both or not values_equal(before_value, after_value):
            changes[name] = FieldChange(before=before_value, after=after_value)

    return AuditDiff(before=plain_before, after=plain_after, changes=changes)
