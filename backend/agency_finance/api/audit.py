from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import AuditLog
from ..schemas import AuditLogResponse

router = APIRouter()

MAX_LOGS = 100


@router.get("/logs", response_model=list[AuditLogResponse])
def list_audit_logs(
    user_name: str | None = Query(None),
    action: str | None = Query(None),
    entity: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """Most recent audit records, newest first."""
    query = db.query(AuditLog)

    if user_name:
        pattern = f"%{user_name.strip().lower()}%"
        query = query.filter(func.lower(func.trim(AuditLog.user_name)).like(pattern))
    if action:
        query = query.filter(AuditLog.action == action.upper())
    if entity:
        query = query.filter(AuditLog.entity == entity)

    return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(MAX_LOGS).all()
