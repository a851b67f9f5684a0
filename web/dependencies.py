"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from datetime import tzinfo
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import ICatalog, IIdentityProvider
from core.config.loader import Settings, get_settings
from core.types import Actor, UserRole


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


def get_db_path() -> Path:
    """현재 모드의 DB 경로"""
    return get_settings().db_path


def get_store_tz() -> tzinfo:
    """영업일/월 경계 타임존"""
    return get_settings().store_tz


async def get_db(
    db_path: Path = Depends(get_db_path),
) -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    리포트/조회 API용. 단일 SELECT 단위 스냅샷으로 읽음.
    """
    async with SQLiteAdapter(db_path, readonly=True) as db:
        yield db


async def get_db_write(
    db_path: Path = Depends(get_db_path),
) -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    Ledger 기록, 마감, 설정 변경 시 사용.
    """
    async with SQLiteAdapter(db_path, readonly=False) as db:
        yield db


def get_actor(
    x_actor_id: str = Header(..., description="호출자 ID"),
    x_actor_role: str = Header(..., description="호출자 역할 (OWNER/AUDITOR/ADMIN/SELLER)"),
    x_actor_name: str = Header(default="", description="호출자 이름"),
) -> Actor:
    """요청 헤더에서 호출 주체 구성

    세션 관리는 외부 인증 계층 담당. 여기서는 전달된 신원을 그대로 사용.
    """
    if not x_actor_id.strip():
        raise HTTPException(status_code=401, detail="X-Actor-Id header is empty")

    try:
        role = UserRole(x_actor_role.upper())
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail=f"Invalid X-Actor-Role: {x_actor_role}",
        )

    return Actor(user_id=x_actor_id, name=x_actor_name or x_actor_id, role=role)


# =========================================================================
# 외부 협력자 (상품 카탈로그, 사용자 관리)
# =========================================================================

# 앱 시작 시 설정되는 전역 인스턴스
_catalog: ICatalog | None = None
_identity: IIdentityProvider | None = None


def set_collaborators(catalog: ICatalog, identity: IIdentityProvider) -> None:
    """카탈로그/사용자 관리 구현체 설정

    Args:
        catalog: ICatalog 구현체
        identity: IIdentityProvider 구현체
    """
    global _catalog, _identity
    _catalog = catalog
    _identity = identity


def has_collaborators() -> bool:
    return _catalog is not None and _identity is not None


def get_catalog() -> ICatalog:
    if _catalog is None:
        raise HTTPException(status_code=503, detail="Catalog is not configured")
    return _catalog


def get_identity() -> IIdentityProvider:
    if _identity is None:
        raise HTTPException(status_code=503, detail="Identity provider is not configured")
    return _identity
