"""
Snapshot normalization (pure functions).

Converts an entity's persisted state (a dict, a SQLAlchemy row mapping, a
pydantic model, ...) into a plain JSON-compatible value so two snapshots can
be compared structurally and stored in the audit_log.diff column.

Normalization fails closed: if any part of the value cannot be represented
as JSON, the whole snapshot becomes None instead of a partial copy.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel

JsonValue = Any


def _json_default(value: Any) -> Any:
    """Encode the non-JSON types ORM rows and API models typically carry."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        # iteration order depends on insertion history; repr gives a total order
        return sorted(value, key=repr)
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def normalize_snapshot(value: Any) -> Optional[JsonValue]:
    """
    Return a deep, JSON-only copy of `value`, or None.

    None in, None out. Unserializable content (functions, arbitrary objects,
    cyclic references, NaN/Infinity) also yields None. Never raises.
    """
    if value is None:
        return None

    try:
        return json.loads(json.dumps(value, default=_json_default, allow_nan=False))
    except (TypeError, ValueError, RecursionError):
        return None
