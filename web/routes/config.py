"""
Config 라우트

회계 설정(세율/MDR) 조회 및 변경 API
"""

from fastapi import APIRouter, Depends, HTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.accounting import AccountingSettings
from core.domain.permissions import Permissions, require_role
from core.types import Actor
from web.dependencies import get_actor, get_db, get_db_write
from web.models.requests import AccountingSettingsRequest
from web.models.responses import AccountingSettingsResponse
from web.services.settings_service import SettingsService

router = APIRouter(prefix="/api/settings", tags=["Config"])


@router.get("/accounting", response_model=AccountingSettingsResponse)
async def get_accounting_settings(
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db),
) -> AccountingSettingsResponse:
    """회계 설정 조회"""
    require_role(actor, Permissions.VIEW_REPORTS, "view accounting settings")

    settings, version = await SettingsService(db).get_accounting()

    return AccountingSettingsResponse(**settings.to_dict(), version=version)


@router.put("/accounting", response_model=AccountingSettingsResponse)
async def update_accounting_settings(
    request: AccountingSettingsRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountingSettingsResponse:
    """회계 설정 변경

    과거 월 DRE도 변경된 설정으로 다시 계산됨 (기간별 이력 없음).
    expected_version을 지정하면 해당 버전일 때만 업데이트.
    """
    service = SettingsService(db)

    try:
        settings, version = await service.update_accounting(
            AccountingSettings(
                tax_rate=request.tax_rate,
                mdr_pix=request.mdr_pix,
                mdr_card=request.mdr_card,
                mdr_cash=request.mdr_cash,
            ),
            actor=actor,
            expected_version=request.expected_version,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=409,
            detail=str(e)
        )

    return AccountingSettingsResponse(**settings.to_dict(), version=version)
