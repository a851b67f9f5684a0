"""
사용자 관리 서비스

권한이 필요한 사용자 삭제 흐름. 삭제 후 반드시 감사 로그(USER_DELETED)를 남김.
"""

import logging

from adapters.interfaces import IIdentityProvider
from adapters.models import UserRecord
from core.constants import AuditActions
from core.domain.errors import ConsistencyError, NotFoundError
from core.domain.permissions import Permissions, require_role
from core.domain.records import AuditLogEntry
from core.storage.audit_store import AuditTrail
from core.types import Actor

logger = logging.getLogger(__name__)


class UserAdminService:
    """사용자 삭제 + 감사 기록

    Args:
        identity: 사용자 관리 협력자
        audit: 감사 로그 저장소
    """

    def __init__(self, identity: IIdentityProvider, audit: AuditTrail):
        self.identity = identity
        self.audit = audit

    async def remove_user(self, user_id: str, actor: Actor) -> AuditLogEntry:
        """사용자 삭제

        Args:
            user_id: 삭제할 사용자 ID
            actor: 호출 주체 (OWNER/ADMIN)

        Returns:
            기록된 감사 로그

        Raises:
            PermissionDeniedError: 권한 부족
            NotFoundError: 없는 사용자
            ConsistencyError: 삭제는 됐으나 감사 기록 실패
        """
        require_role(actor, Permissions.REMOVE_USER, "remove users")

        user: UserRecord | None = await self.identity.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        await self.identity.remove_user(user_id)

        entry = AuditLogEntry.create(
            action=AuditActions.USER_DELETED,
            description=f"Usuário removido: {user.name} ({user.role.value}, id={user.user_id})",
            performed_by=actor.name or actor.user_id,
        )
        try:
            await self.audit.record(entry)
        except Exception as e:
            logger.critical(
                "사용자 삭제 후 감사 기록 실패",
                extra={"user_id": user_id, "actor": actor.user_id, "error": str(e)},
            )
            raise ConsistencyError(
                f"User {user_id} was removed but the audit entry could not be recorded: {e}"
            ) from e

        logger.info(
            "사용자 삭제",
            extra={"user_id": user_id, "actor": actor.user_id},
        )
        return entry
