"""
FastAPI 애플리케이션

라우터 등록, 예외 매핑 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.domain.errors import (
    ConsistencyError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import (
    health,
    ledger,
    purchases,
    closures,
    reports,
    audit,
    users,
    config,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
    from adapters.mock import MockCatalog, MockIdentityProvider
    from core.storage.config_store import init_default_configs
    from web.dependencies import has_collaborators, set_collaborators

    settings = get_settings()

    # 시작 시 - DB 스키마 및 기본 설정 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)
        await init_default_configs(db)

    if not has_collaborators():
        set_collaborators(MockCatalog(), MockIdentityProvider())
        logger.warning("Web: 외부 카탈로그/사용자 관리 미설정, 인메모리 Mock 사용")

    logger.info(
        "Web 시작",
        extra={"mode": settings.mode.value, "store": settings.store_name},
    )

    yield


app = FastAPI(
    title="ChicLedger API",
    description="매장 POS 원장 및 마감 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 도메인 예외 → HTTP 상태 코드
# =========================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(ConsistencyError)
async def consistency_error_handler(request: Request, exc: ConsistencyError) -> JSONResponse:
    logger.critical(f"정합성 오류: {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(ledger.router)
app.include_router(purchases.router)
app.include_router(closures.router)
app.include_router(reports.router)
app.include_router(audit.router)
app.include_router(users.router)
app.include_router(config.router)
