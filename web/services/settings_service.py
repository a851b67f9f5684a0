"""
회계 설정 서비스

ConfigStore의 accounting 키 조회/변경. 변경 시 감사 로그(SETTINGS_CHANGED) 기록.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import AuditActions
from core.domain.accounting import AccountingSettings
from core.domain.errors import ConsistencyError
from core.domain.permissions import Permissions, require_role
from core.domain.records import AuditLogEntry
from core.storage.audit_store import AuditTrail
from core.storage.config_store import ConfigStore
from core.types import Actor

logger = logging.getLogger(__name__)

ACCOUNTING_KEY = "accounting"


class SettingsService:
    """회계 설정 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.config_store = ConfigStore(db)

    async def get_accounting(self) -> tuple[AccountingSettings, int]:
        """현재 회계 설정과 버전"""
        settings = await self.config_store.get_accounting_settings()
        version = await self.config_store.get_version(ACCOUNTING_KEY)
        return settings, version

    async def update_accounting(
        self,
        settings: AccountingSettings,
        actor: Actor,
        expected_version: int | None = None,
    ) -> tuple[AccountingSettings, int]:
        """회계 설정 변경

        Args:
            settings: 새 설정
            actor: 변경 주체 (OWNER/ADMIN)
            expected_version: 예상 버전 (낙관적 락, None이면 검사 안 함)

        Returns:
            (저장된 설정, 새 버전)

        Raises:
            PermissionDeniedError: 권한 부족
            ValidationError: 범위를 벗어난 비율
            ValueError: 버전 충돌
            ConsistencyError: 설정은 변경됐으나 감사 기록 실패
        """
        require_role(actor, Permissions.MUTATE_SETTINGS, "change accounting settings")
        settings.validate()

        previous = await self.config_store.get_accounting_settings()
        await self.config_store.set_accounting_settings(
            settings, updated_by=actor.user_id, expected_version=expected_version
        )

        changes = ", ".join(
            f"{name}: {old} → {new}"
            for (name, old), new in zip(previous.to_dict().items(), settings.to_dict().values())
            if old != new
        )
        try:
            await AuditTrail(self.db).record(
                AuditLogEntry.create(
                    action=AuditActions.SETTINGS_CHANGED,
                    description=f"Configurações contábeis alteradas ({changes or 'sem alterações'})",
                    performed_by=actor.name,
                )
            )
        except Exception as e:
            logger.critical(
                "설정 변경 후 감사 기록 실패",
                extra={"actor": actor.user_id, "error": str(e)},
            )
            raise ConsistencyError(
                f"Accounting settings changed but the audit entry could not be recorded: {e}"
            ) from e

        version = await self.config_store.get_version(ACCOUNTING_KEY)
        return settings, version
