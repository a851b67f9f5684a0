"""
역할 기반 권한 규칙

Identity 제공자가 넘겨준 역할로 호출 가능 여부를 판단.
"""

import logging

from core.domain.errors import PermissionDeniedError
from core.types import Actor, UserRole

logger = logging.getLogger(__name__)


class Permissions:
    """작업별 허용 역할"""

    # 매장 운영 (판매/조정/선물/응대/마감)
    OPERATE_REGISTER: frozenset[UserRole] = frozenset(
        {UserRole.SELLER, UserRole.ADMIN, UserRole.OWNER}
    )
    CLOSE_REGISTER: frozenset[UserRole] = OPERATE_REGISTER

    # 비용/매입 기록
    RECORD_EXPENSE: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.OWNER})

    # 감사 로그 기록, 사용자 삭제, 설정 변경
    RECORD_AUDIT: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.OWNER})
    REMOVE_USER: frozenset[UserRole] = RECORD_AUDIT
    MUTATE_SETTINGS: frozenset[UserRole] = RECORD_AUDIT

    # 감사 로그/자금 흐름 조회
    VIEW_AUDIT: frozenset[UserRole] = frozenset({UserRole.AUDITOR, UserRole.OWNER})

    # DRE/엑셀/생산성 리포트
    VIEW_REPORTS: frozenset[UserRole] = frozenset(
        {UserRole.OWNER, UserRole.ADMIN, UserRole.AUDITOR}
    )


def require_role(actor: Actor, allowed: frozenset[UserRole], action: str) -> None:
    """역할 확인

    Args:
        actor: 호출 주체
        allowed: 허용 역할 집합
        action: 작업 이름 (로그/메시지용)

    Raises:
        PermissionDeniedError: 허용되지 않은 역할
    """
    if actor.role not in allowed:
        logger.warning(
            "권한 거부",
            extra={"user_id": actor.user_id, "role": actor.role.value, "action": action},
        )
        raise PermissionDeniedError(
            f"Role {actor.role.value} is not allowed to {action}"
        )
