"""
pytest 공통 fixture 정의

인메모리 DB, Ledger 저장소, Mock 협력자, 호출 주체
"""

import tempfile
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.mock import MockCatalog, MockIdentityProvider
from adapters.models import CatalogProduct, UserRecord
from core.ledger.store import LedgerStore
from core.types import Actor, UserRole
from factories import STORE_TZ


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
mode: training

store:
  name: "Loja Teste"
  timezone: "America/Rio_Branco"

web:
  host: "0.0.0.0"
  port: 8100
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_production(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (production 모드, store/web 생략)"""
    settings_path = temp_dir / "settings_prod.yaml"
    settings_path.write_text("mode: production\n", encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 settings.yaml 파일 생성"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text("mode: invalid_mode\n", encoding="utf-8")
    return settings_path


@pytest.fixture
async def db() -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 준비된 인메모리 DB"""
    adapter = SQLiteAdapter(":memory:")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def ledger(db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(db)


@pytest.fixture
def store_tz():
    return STORE_TZ


@pytest.fixture
def catalog() -> MockCatalog:
    return MockCatalog([
        CatalogProduct("VEST-001", "Vestido Floral", Decimal("100.00"), Decimal("50.00"), 3),
        CatalogProduct("BLUSA-002", "Blusa Linho", Decimal("80.00"), Decimal("35.50"), 2),
    ])


@pytest.fixture
def identity() -> MockIdentityProvider:
    return MockIdentityProvider([
        UserRecord("seller-a", "Ana", UserRole.SELLER),
        UserRecord("seller-b", "Bia", UserRole.SELLER),
        UserRecord("owner-1", "Maria", UserRole.OWNER),
        UserRecord("auditor-1", "Carlos", UserRole.AUDITOR),
    ])


@pytest.fixture
def owner() -> Actor:
    return Actor(user_id="owner-1", name="Maria", role=UserRole.OWNER)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id="admin-1", name="Paulo", role=UserRole.ADMIN)


@pytest.fixture
def auditor() -> Actor:
    return Actor(user_id="auditor-1", name="Carlos", role=UserRole.AUDITOR)


@pytest.fixture
def seller() -> Actor:
    return Actor(user_id="seller-a", name="Ana", role=UserRole.SELLER)
