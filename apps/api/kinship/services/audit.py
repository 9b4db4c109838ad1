from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kinship.models.audit import AuditLog

logger = logging.getLogger(__name__)


def record_audit_event(
    db: Session,
    *,
    actor: str,
    action: str,
    target_type: str,
    target_id: str | None,
    details: dict[str, Any] | None = None,
) -> AuditLog | None:
    """
    Append one audit entry after a committed mutation.

    The mutation it describes is already durable, so a failed audit write is
    rolled back and logged rather than surfaced to the caller.
    """
    entry = AuditLog(
        actor=actor,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details,
    )
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("failed to record audit event %s %s %s", action, target_type, target_id)
        return None
    return entry


def list_audit_events(db: Session, *, limit: int = 100, target_id: str | None = None) -> list[AuditLog]:
    query = select(AuditLog)
    if target_id is not None:
        query = query.where(AuditLog.target_id == target_id)
    query = query.order_by(AuditLog.created_at.desc()).limit(limit)
    return list(db.execute(query).scalars().all())
