"""
Audit trail constants shared by the recorder and the API.
"""

from __future__ import annotations

from enum import Enum


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


AUDIT_ACTIONS = tuple(action.value for action in AuditAction)

# Recorded when a mutation arrives without an authenticated actor
UNKNOWN_ACTOR = "unknown"
