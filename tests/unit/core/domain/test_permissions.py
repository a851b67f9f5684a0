"""
core/domain/permissions.py 테스트
"""

import pytest

from core.domain.errors import PermissionDeniedError
from core.domain.permissions import Permissions, require_role
from core.types import Actor, UserRole


def _actor(role: UserRole) -> Actor:
    return Actor(user_id=f"{role.value.lower()}-1", name=role.value.title(), role=role)


class TestRequireRole:
    def test_allowed(self) -> None:
        require_role(_actor(UserRole.OWNER), Permissions.REMOVE_USER, "remove users")

    def test_denied(self) -> None:
        with pytest.raises(PermissionDeniedError, match="SELLER"):
            require_role(_actor(UserRole.SELLER), Permissions.REMOVE_USER, "remove users")


class TestPermissionMatrix:
    @pytest.mark.parametrize("role", list(UserRole))
    def test_view_audit_only_auditor_and_owner(self, role: UserRole) -> None:
        assert (role in Permissions.VIEW_AUDIT) == (role in {UserRole.AUDITOR, UserRole.OWNER})

    def test_sellers_operate_but_do_not_administer(self) -> None:
        assert UserRole.SELLER in Permissions.OPERATE_REGISTER
        assert UserRole.SELLER in Permissions.CLOSE_REGISTER
        assert UserRole.SELLER not in Permissions.MUTATE_SETTINGS
        assert UserRole.SELLER not in Permissions.VIEW_REPORTS

    def test_auditor_is_read_only(self) -> None:
        assert UserRole.AUDITOR not in Permissions.OPERATE_REGISTER
        assert UserRole.AUDITOR not in Permissions.RECORD_AUDIT
        assert UserRole.AUDITOR in Permissions.VIEW_REPORTS
