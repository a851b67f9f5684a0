"""
Mock 사용자 관리

테스트/교육 모드용 인메모리 사용자 저장소.
IIdentityProvider Protocol 준수.
"""

from adapters.models import UserRecord
from core.types import UserRole


class MockIdentityProvider:
    """Mock 사용자 관리

    IIdentityProvider Protocol 구현.
    삭제된 사용자 ID를 기록하여 테스트에서 검증 가능.

    사용 예시:
    ```python
    identity = MockIdentityProvider([
        UserRecord("seller-1", "Ana", UserRole.SELLER),
    ])
    await identity.remove_user("seller-1")
    assert identity.removed == ["seller-1"]
    ```
    """

    def __init__(self, users: list[UserRecord] | None = None, should_fail: bool = False):
        """
        Args:
            users: 초기 사용자 목록
            should_fail: True면 remove_user 실패 (에러 시나리오 테스트용)
        """
        self._users: dict[str, UserRecord] = {u.user_id: u for u in users or []}
        self.should_fail = should_fail
        self.removed: list[str] = []

    def add_user(self, user: UserRecord) -> None:
        """사용자 추가 (테스트 준비용)"""
        self._users[user.user_id] = user

    async def get_user(self, user_id: str) -> UserRecord | None:
        return self._users.get(user_id)

    async def list_users(self) -> list[UserRecord]:
        return list(self._users.values())

    async def list_sellers(self) -> list[UserRecord]:
        return [u for u in self._users.values() if u.role == UserRole.SELLER]

    async def remove_user(self, user_id: str) -> None:
        if self.should_fail:
            raise RuntimeError(f"Mock identity provider failed to remove {user_id}")
        if user_id not in self._users:
            raise KeyError(user_id)
        del self._users[user_id]
        self.removed.append(user_id)
