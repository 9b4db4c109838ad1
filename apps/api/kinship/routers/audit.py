from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from kinship.core.db import get_db
from kinship.schemas.audit import AuditEventListResponse, AuditEventResponse
from kinship.services.audit import list_audit_events

router = APIRouter(prefix="/v1/audit", tags=["audit"])


@router.get("", response_model=AuditEventListResponse)
def list_audit(
    limit: int = Query(default=100, ge=1, le=1000),
    target_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    items = list_audit_events(db, limit=limit, target_id=target_id)
    return AuditEventListResponse(items=[AuditEventResponse.model_validate(item, from_attributes=True) for item in items])
