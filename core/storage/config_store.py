"""
ConfigStore - 런타임 설정 저장소

config_store 테이블을 통해 런타임 설정 관리.
웹 프로세스와 CLI 스크립트가 공유하는 설정을 저장/조회.

설정 키 구조:
- "accounting": 회계 설정 (tax_rate, mdr_pix, mdr_card, mdr_cash)

주의: 설정은 버전 번호만 증가하며 기간별 이력은 보관하지 않음.
과거 월 DRE도 조회 시점의 현재 설정으로 계산된다.
"""

import json
import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import AuditActions
from core.domain.accounting import AccountingSettings
from core.domain.errors import ConsistencyError
from core.utils.timezone import now_utc, to_db_ts

logger = logging.getLogger(__name__)


# 기본 설정값
DEFAULT_CONFIGS: dict[str, dict[str, Any]] = {
    "accounting": AccountingSettings().to_dict(),
}


class ConfigStore:
    """설정 저장소

    config_store 테이블을 읽고 쓰는 클래스.
    DRE 계산 시 회계 설정을 조회할 때 사용.

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        config_store = ConfigStore(db)

        settings = await config_store.get_accounting_settings()

        await config_store.set_accounting_settings(
            AccountingSettings(tax_rate=Decimal("0.06")),
            updated_by="owner-1",
        )
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._cache: dict[str, dict[str, Any]] = {}
        self._cache_version: dict[str, int] = {}

    async def get(self, key: str, use_cache: bool = True) -> dict[str, Any]:
        """설정 조회

        Args:
            key: 설정 키 (accounting 등)
            use_cache: 캐시 사용 여부 (기본 True)

        Returns:
            설정 값 (dict). 없으면 기본값 반환.
        """
        if use_cache and key in self._cache:
            return dict(self._cache[key])

        try:
            row = await self.db.fetchone(
                """
                SELECT value_json, version
                FROM config_store
                WHERE config_key = ?
                """,
                (key,),
            )

            if row:
                value = json.loads(row[0]) if isinstance(row[0], str) else row[0]

                self._cache[key] = value
                self._cache_version[key] = row[1]

                return dict(value)

        except Exception as e:
            logger.warning(f"Failed to get config '{key}': {e}")

        return dict(DEFAULT_CONFIGS.get(key, {}))

    async def get_version(self, key: str) -> int:
        """설정 버전 조회 (DB에 없으면 0)"""
        row = await self.db.fetchone(
            "SELECT version FROM config_store WHERE config_key = ?",
            (key,),
        )
        return row[0] if row else 0

    async def set(
        self,
        key: str,
        value: dict[str, Any],
        updated_by: str = "system",
        expected_version: int | None = None,
    ) -> bool:
        """설정 저장 (UPSERT)

        expected_version이 주어지면 버전 비교와 쓰기를 한 문장으로 수행한다.
        다른 프로세스가 사이에 버전을 올렸다면 아무것도 쓰지 않는다.

        Args:
            key: 설정 키
            value: 설정 값
            updated_by: 업데이트 주체
            expected_version: 예상 버전 (낙관적 락, 0이면 키가 없어야 함)

        Returns:
            성공 여부

        Raises:
            ValueError: 버전 충돌
        """
        now = to_db_ts(now_utc())
        value_json = json.dumps(value, ensure_ascii=False)

        try:
            if expected_version is None:
                cursor = await self.db.execute(
                    """
                    INSERT INTO config_store (config_key, value_json, version, updated_by, created_at, updated_at)
                    VALUES (?, ?, 1, ?, ?, ?)
                    ON CONFLICT(config_key) DO UPDATE SET
                        value_json = excluded.value_json,
                        version = config_store.version + 1,
                        updated_by = excluded.updated_by,
                        updated_at = excluded.updated_at
                    """,
                    (key, value_json, updated_by, now, now),
                )
            elif expected_version == 0:
                cursor = await self.db.execute(
                    """
                    INSERT INTO config_store (config_key, value_json, version, updated_by, created_at, updated_at)
                    VALUES (?, ?, 1, ?, ?, ?)
                    ON CONFLICT(config_key) DO NOTHING
                    """,
                    (key, value_json, updated_by, now, now),
                )
            else:
                cursor = await self.db.execute(
                    """
                    UPDATE config_store
                    SET value_json = ?, version = version + 1, updated_by = ?, updated_at = ?
                    WHERE config_key = ? AND version = ?
                    """,
                    (value_json, updated_by, now, key, expected_version),
                )
            written = cursor.rowcount
            await self.db.commit()

        except Exception as e:
            logger.error(f"Failed to set config '{key}': {e}")
            await self.db.rollback()
            return False

        if expected_version is not None and written == 0:
            current = await self.get_version(key)
            logger.warning(
                f"Config '{key}' version conflict",
                extra={"expected": expected_version, "current": current},
            )
            raise ValueError(
                f"Version conflict: expected {expected_version}, current {current}"
            )

        # 캐시 무효화
        self._cache.pop(key, None)
        self._cache_version.pop(key, None)

        logger.info(
            f"Config '{key}' updated by {updated_by}",
            extra={"action": AuditActions.SETTINGS_CHANGED, "updated_by": updated_by},
        )
        return True

    async def ensure_defaults(self) -> None:
        """기본 설정이 없는 키만 생성 (기존 값/버전 유지)"""
        for key, default_value in DEFAULT_CONFIGS.items():
            if await self.get_version(key) == 0:
                await self.set(key, default_value, updated_by="system:init")
                logger.info(f"기본 설정 생성: {key}")

    # =========================================================================
    # 회계 설정
    # =========================================================================

    async def get_accounting_settings(self) -> AccountingSettings:
        """현재 회계 설정 조회

        Raises:
            ValidationError: 저장된 값이 범위를 벗어남
        """
        return AccountingSettings.from_dict(await self.get("accounting"))

    async def set_accounting_settings(
        self,
        settings: AccountingSettings,
        updated_by: str,
        expected_version: int | None = None,
    ) -> AccountingSettings:
        """회계 설정 저장

        Args:
            settings: 새 설정
            updated_by: 변경 주체 (사용자 ID)
            expected_version: 예상 버전 (None이면 검사 안 함)

        Raises:
            ValidationError: 0~1 범위를 벗어난 비율
            ValueError: 버전 충돌
            ConsistencyError: 저장 실패
        """
        settings.validate()

        previous = await self.get("accounting", use_cache=False)
        if not await self.set(
            "accounting",
            settings.to_dict(),
            updated_by=updated_by,
            expected_version=expected_version,
        ):
            raise ConsistencyError("Failed to persist accounting settings")

        logger.info(
            "회계 설정 변경",
            extra={
                "updated_by": updated_by,
                "previous": previous,
                "current": settings.to_dict(),
            },
        )
        return settings


async def init_default_configs(db: SQLiteAdapter) -> None:
    """기본 설정 초기화

    웹/CLI 시작 시 호출하여 기본 설정이 존재하도록 보장.

    Args:
        db: SQLiteAdapter 인스턴스
    """
    config_store = ConfigStore(db)
    await config_store.ensure_defaults()
