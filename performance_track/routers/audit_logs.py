"""Audit log router - admin search over the audit trail."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from performance_track.database import get_database
from performance_track.models.audit_log import AuditLog
from performance_track.models.user import CurrentUser
from performance_track.routers.auth import require_admin
from performance_track.services.audit_service import AuditService


router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=list[AuditLog])
async def list_audit_logs(
    user_id: Optional[str] = Query(None, description="Filter by actor"),
    action: Optional[str] = Query(None, description="Filter by action, e.g. GOAL_APPROVED"),
    start: Optional[datetime] = Query(None, description="Range start (needs end)"),
    end: Optional[datetime] = Query(None, description="Range end (needs start)"),
    current_user: CurrentUser = Depends(require_admin),
    db=Depends(get_database),
):
    """Search audit records, newest first (admins only)."""
    service = AuditService(db)
    return await service.list_audit_logs(user_id=user_id, action=action, start=start, end=end)
