"""
Structured logging setup for the portfolio admin audit trail.

All runtime logging goes through structlog. Logs are rendered as JSON with
an ISO timestamp and level, and context bound per request (actor, entity)
is merged into every event emitted while handling that request.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import structlog


def _build_shared_processors() -> list[structlog.types.Processor]:
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
        structlog.processors.EventRenamer("message"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    log_stdout: bool = True,
) -> None:
    """
    Configure structlog and the standard logging module.

    Called once at process startup. Unknown level names fall back to INFO.

    - When log_stdout is True (default), a StreamHandler(sys.stdout) is added.
    - When log_file is set, a FileHandler is added (parent dir created if needed).
    - If neither applies, stdout is used so the process never has zero handlers.
    """

    level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handlers: list[logging.Handler] = []
    if log_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    if not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.configure(
        processors=_build_shared_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Obtain a structured logger.

    Usage:
        from shared.logging import get_logger

        logger = get_logger(__name__)
        logger.info("audit_recorded", entity_type="post", entity_id="42")
    """

    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_request_context(
    *,
    actor_email: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    **extra: Any,
) -> Mapping[str, Any]:
    """
    Bind actor and entity fields into the logging context.

    Keys with None values are dropped. Returns the bound mapping.
    """

    context: dict[str, Any] = {
        "actor_email": actor_email,
        "entity_type": entity_type,
        "entity_id": entity_id,
        **extra,
    }
    filtered_context = {k: v for k, v in context.items() if v is not None}

    structlog.contextvars.bind_contextvars(**filtered_context)
    return filtered_context
