"""
감사 로그 라우트

감사 로그 기록/조회 API
"""

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.permissions import Permissions, require_role
from core.domain.records import AuditLogEntry
from core.storage.audit_store import AuditTrail
from core.types import Actor
from web.dependencies import get_actor, get_db, get_db_write
from web.models.requests import AuditRecordRequest
from web.models.responses import AuditEntryResponse

router = APIRouter(prefix="/api/audit", tags=["Audit"])


@router.post("", response_model=AuditEntryResponse, status_code=201)
async def record_audit_entry(
    request: AuditRecordRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AuditEntryResponse:
    """감사 로그 기록"""
    require_role(actor, Permissions.RECORD_AUDIT, "record audit entries")

    entry = await AuditTrail(db).record(
        AuditLogEntry.create(
            action=request.action,
            description=request.description,
            performed_by=actor.name,
        )
    )
    return AuditEntryResponse(**entry.to_dict())


@router.get("", response_model=list[AuditEntryResponse])
async def list_audit_entries(
    q: str | None = Query(default=None, description="검색어 (action/description/performed_by)"),
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db),
) -> list[AuditEntryResponse]:
    """감사 로그 조회 (최신순)"""
    require_role(actor, Permissions.VIEW_AUDIT, "view the audit log")

    entries = await AuditTrail(db).list(q)
    return [AuditEntryResponse(**e.to_dict()) for e in entries]
