"""
도메인 서비스

여러 저장소/협력자를 묶는 원자적 업무 흐름.
"""

from core.services.user_admin import UserAdminService

__all__ = [
    "UserAdminService",
]
