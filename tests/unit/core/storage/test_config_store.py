"""
ConfigStore 테스트

config_store 테이블 CRUD 및 회계 설정 테스트
"""

import json
from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.accounting import AccountingSettings
from core.domain.errors import ValidationError
from core.storage.config_store import (
    ConfigStore,
    DEFAULT_CONFIGS,
    init_default_configs,
)


@pytest.fixture
def config_store(db: SQLiteAdapter) -> ConfigStore:
    """ConfigStore 인스턴스"""
    return ConfigStore(db)


class TestConfigStoreGet:
    """get() 메서드 테스트"""

    @pytest.mark.asyncio
    async def test_get_returns_default_when_not_exists(
        self,
        config_store: ConfigStore,
    ) -> None:
        """존재하지 않는 키는 기본값 반환"""
        result = await config_store.get("accounting")

        assert result == DEFAULT_CONFIGS["accounting"]

    @pytest.mark.asyncio
    async def test_get_unknown_key_returns_empty(
        self,
        config_store: ConfigStore,
    ) -> None:
        assert await config_store.get("nope") == {}

    @pytest.mark.asyncio
    async def test_get_uses_cache(
        self,
        config_store: ConfigStore,
    ) -> None:
        """캐시 사용 확인"""
        test_value = {"test": "value"}
        await config_store.set("test_key", test_value)

        result1 = await config_store.get("test_key")
        assert result1 == test_value
        assert "test_key" in config_store._cache

        result2 = await config_store.get("test_key")
        assert result2 == test_value

    @pytest.mark.asyncio
    async def test_get_returns_copy(
        self,
        config_store: ConfigStore,
    ) -> None:
        """반환값 수정이 캐시에 영향 없음"""
        await config_store.set("test_key", {"a": "1"})
        result = await config_store.get("test_key")
        result["a"] = "changed"

        assert (await config_store.get("test_key"))["a"] == "1"

    @pytest.mark.asyncio
    async def test_get_bypass_cache(
        self,
        config_store: ConfigStore,
        db: SQLiteAdapter,
    ) -> None:
        """캐시 무시하고 DB에서 직접 읽기"""
        await config_store.set("test_key", {"test": "value"})
        await config_store.get("test_key")  # 캐시에 저장

        await db.execute(
            "UPDATE config_store SET value_json = ? WHERE config_key = ?",
            (json.dumps({"test": "modified"}), "test_key"),
        )
        await db.commit()

        result = await config_store.get("test_key", use_cache=False)

        assert result == {"test": "modified"}


class TestConfigStoreSet:
    """set() 메서드 테스트"""

    @pytest.mark.asyncio
    async def test_set_creates_new_config(
        self,
        config_store: ConfigStore,
    ) -> None:
        result = await config_store.set("new_config", {"key1": "value1", "key2": 123})

        assert result is True
        assert await config_store.get("new_config", use_cache=False) == {
            "key1": "value1",
            "key2": 123,
        }

    @pytest.mark.asyncio
    async def test_set_increments_version(
        self,
        config_store: ConfigStore,
    ) -> None:
        """UPSERT마다 버전 +1"""
        assert await config_store.get_version("test") == 0

        await config_store.set("test", {"v": 1})
        assert await config_store.get_version("test") == 1

        await config_store.set("test", {"v": 2})
        assert await config_store.get_version("test") == 2
        assert await config_store.get("test", use_cache=False) == {"v": 2}

    @pytest.mark.asyncio
    async def test_set_invalidates_cache(
        self,
        config_store: ConfigStore,
    ) -> None:
        await config_store.set("test", {"v": 1})
        await config_store.get("test")
        assert "test" in config_store._cache

        await config_store.set("test", {"v": 2})

        assert "test" not in config_store._cache

    @pytest.mark.asyncio
    async def test_set_with_matching_version(
        self,
        config_store: ConfigStore,
    ) -> None:
        assert await config_store.set("test", {"v": 1}, expected_version=0) is True
        assert await config_store.set("test", {"v": 2}, expected_version=1) is True

        assert await config_store.get_version("test") == 2
        assert await config_store.get("test", use_cache=False) == {"v": 2}

    @pytest.mark.asyncio
    async def test_stale_version_writes_nothing(
        self,
        db: SQLiteAdapter,
        config_store: ConfigStore,
    ) -> None:
        """버전을 읽은 뒤 다른 쓰기가 끼어들면 충돌, 값/버전 유지"""
        await config_store.set("test", {"v": 1})
        seen_version = await config_store.get_version("test")

        await ConfigStore(db).set("test", {"v": "other"}, updated_by="owner-2")

        with pytest.raises(ValueError, match="expected 1, current 2"):
            await config_store.set("test", {"v": "mine"}, expected_version=seen_version)

        assert await config_store.get_version("test") == 2
        assert await config_store.get("test", use_cache=False) == {"v": "other"}

    @pytest.mark.asyncio
    async def test_expected_zero_requires_missing_key(
        self,
        config_store: ConfigStore,
    ) -> None:
        await config_store.set("test", {"v": 1})

        with pytest.raises(ValueError, match="Version conflict"):
            await config_store.set("test", {"v": 2}, expected_version=0)

        assert await config_store.get_version("test") == 1


class TestConfigStoreDefaults:
    """ensure_defaults() / init_default_configs() 테스트"""

    @pytest.mark.asyncio
    async def test_ensure_defaults_creates_missing(
        self,
        config_store: ConfigStore,
    ) -> None:
        await config_store.ensure_defaults()

        for key in DEFAULT_CONFIGS:
            assert await config_store.get_version(key) == 1

    @pytest.mark.asyncio
    async def test_ensure_defaults_preserves_existing(
        self,
        config_store: ConfigStore,
    ) -> None:
        custom = {"tax_rate": "0.06", "mdr_pix": "0", "mdr_card": "0.02", "mdr_cash": "0"}
        await config_store.set("accounting", custom)

        await config_store.ensure_defaults()

        assert await config_store.get("accounting", use_cache=False) == custom

    @pytest.mark.asyncio
    async def test_init_default_configs(
        self,
        db: SQLiteAdapter,
    ) -> None:
        await init_default_configs(db)

        settings = await ConfigStore(db).get_accounting_settings()

        assert settings == AccountingSettings()


class TestAccountingSettingsStore:
    """회계 설정 조회/저장"""

    @pytest.mark.asyncio
    async def test_default_settings(
        self,
        config_store: ConfigStore,
    ) -> None:
        assert await config_store.get_accounting_settings() == AccountingSettings()

    @pytest.mark.asyncio
    async def test_set_and_get(
        self,
        config_store: ConfigStore,
    ) -> None:
        new_settings = AccountingSettings(
            tax_rate=Decimal("0.06"),
            mdr_pix=Decimal("0"),
            mdr_card=Decimal("0.02"),
            mdr_cash=Decimal("0"),
        )

        await config_store.set_accounting_settings(new_settings, updated_by="owner-1")

        assert await config_store.get_accounting_settings() == new_settings

    @pytest.mark.asyncio
    async def test_out_of_range_not_saved(
        self,
        config_store: ConfigStore,
    ) -> None:
        with pytest.raises(ValidationError):
            await config_store.set_accounting_settings(
                AccountingSettings(tax_rate=Decimal("1.5")), updated_by="owner-1"
            )

        assert await config_store.get_version("accounting") == 0
