"""
사용자 라우트

사용자 삭제 API (감사 로그 기록 포함)
"""

from fastapi import APIRouter, Depends, Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import IIdentityProvider
from core.services.user_admin import UserAdminService
from core.storage.audit_store import AuditTrail
from core.types import Actor
from web.dependencies import get_actor, get_db_write, get_identity
from web.models.responses import AuditEntryResponse, UserRemovalResponse

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.delete("/{user_id}", response_model=UserRemovalResponse)
async def remove_user(
    user_id: str = Path(..., description="삭제할 사용자 ID"),
    actor: Actor = Depends(get_actor),
    identity: IIdentityProvider = Depends(get_identity),
    db: SQLiteAdapter = Depends(get_db_write),
) -> UserRemovalResponse:
    """사용자 삭제 (OWNER/ADMIN)"""
    service = UserAdminService(identity, AuditTrail(db))

    entry = await service.remove_user(user_id, actor)

    return UserRemovalResponse(
        user_id=user_id,
        audit_entry=AuditEntryResponse(**entry.to_dict()),
    )
