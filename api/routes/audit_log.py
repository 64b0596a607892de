"""
Route handlers for the audit trail endpoints.

Read-only: audit entries are written by the recorder, never through the API.
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from api.db import get_db_session
from api.schemas import AuditEntryResponse, AuditTrailResponse
from api.services.audit_log_service import AuditLogService
from shared.config import MAX_AUDIT_LIST_LIMIT, get_config
from shared.logging import bind_request_context, get_logger
from shared.repository import AuditLogRepository

logger = get_logger(__name__)
router = APIRouter(prefix="/audit-log", tags=["audit-log"])


def get_audit_log_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> AuditLogService:
    """Dependency to get an AuditLogService instance."""
    repository = AuditLogRepository(session)
    return AuditLogService(repository, default_limit=get_config().audit_list_limit)


@router.get(
    "",
    response_model=AuditTrailResponse,
    summary="List recent audit entries",
)
def list_audit_entries(
    service: Annotated[AuditLogService, Depends(get_audit_log_service)],
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    q: Optional[str] = None,
    limit: Annotated[Optional[int], Query(ge=1, le=MAX_AUDIT_LIST_LIMIT)] = None,
) -> AuditTrailResponse:
    """
    List audit entries, newest first.

    `action` and `entity_type` filter exactly; `q` searches actor, entity
    type, entity id and action case-insensitively.
    """
    try:
        return service.list_trail(action=action, entity_type=entity_type, query=q, limit=limit)
    except Exception as e:
        logger.error(
            "audit_log_list_error",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load audit entries",
        )


@router.get(
    "/{entity_type}/{entity_id}",
    response_model=list[AuditEntryResponse],
    summary="Get the audit history of one entity",
)
def get_entity_history(
    entity_type: str,
    entity_id: str,
    service: Annotated[AuditLogService, Depends(get_audit_log_service)],
) -> list[AuditEntryResponse]:
    """Return every audit entry of one entity, oldest first."""
    bind_request_context(entity_type=entity_type, entity_id=entity_id)
    try:
        return service.get_entity_history(entity_type, entity_id)
    except Exception as e:
        logger.error(
            "audit_log_history_error",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load audit history",
        )
