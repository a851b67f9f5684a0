"""
리포트 라우트

DRE, 판매자 생산성, 자금 흐름, 월 마감 엑셀 API.
모두 Ledger 이력에서 매 요청마다 재계산.
"""

from datetime import datetime, tzinfo

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import ICatalog, IIdentityProvider
from core.domain.permissions import Permissions, require_role
from core.ledger.store import LedgerStore
from core.reports.dre_calculator import DRECalculator
from core.reports.financial_trail import FinancialTrail
from core.reports.monthly_export import MonthlyClosingExporter
from core.reports.productivity import ProductivityAnalyzer
from core.storage.config_store import ConfigStore
from core.types import Actor, DateWindow
from web.dependencies import get_actor, get_catalog, get_db, get_identity, get_store_tz
from web.models.responses import DREResponse, SellerYieldResponse, TrailEntryResponse

router = APIRouter(prefix="/api", tags=["Reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/dre", response_model=DREResponse)
async def get_dre(
    month: int = Query(..., description="월 (1~12)"),
    year: int = Query(..., description="연도"),
    actor: Actor = Depends(get_actor),
    tz: tzinfo = Depends(get_store_tz),
    db: SQLiteAdapter = Depends(get_db),
) -> DREResponse:
    """월간 DRE (현재 회계 설정 기준)"""
    require_role(actor, Permissions.VIEW_REPORTS, "view the DRE")

    settings = await ConfigStore(db).get_accounting_settings()
    result = await DRECalculator(LedgerStore(db), tz).calculate_dre(month, year, settings)

    return DREResponse(**result.to_dict())


@router.get("/productivity", response_model=list[SellerYieldResponse])
async def get_productivity(
    from_: datetime | None = Query(default=None, alias="from", description="시작 시각 (포함)"),
    to: datetime | None = Query(default=None, description="종료 시각 (미포함)"),
    actor: Actor = Depends(get_actor),
    identity: IIdentityProvider = Depends(get_identity),
    db: SQLiteAdapter = Depends(get_db),
) -> list[SellerYieldResponse]:
    """판매자 응대당 매출 랭킹"""
    require_role(actor, Permissions.VIEW_REPORTS, "view productivity")

    sellers = await identity.list_sellers()
    ranking = await ProductivityAnalyzer(LedgerStore(db)).rank(
        sellers, DateWindow(start=from_, end=to)
    )

    return [SellerYieldResponse(**r.to_dict()) for r in ranking]


@router.get("/trail", response_model=list[TrailEntryResponse])
async def get_trail(
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db),
) -> list[TrailEntryResponse]:
    """자금 흐름 (최신순)"""
    require_role(actor, Permissions.VIEW_AUDIT, "view the financial trail")

    entries = await FinancialTrail(LedgerStore(db)).get()
    return [TrailEntryResponse(**e.to_dict()) for e in entries]


@router.get("/export/monthly")
async def export_monthly(
    month: int = Query(..., description="월 (1~12)"),
    year: int = Query(..., description="연도"),
    actor: Actor = Depends(get_actor),
    tz: tzinfo = Depends(get_store_tz),
    catalog: ICatalog = Depends(get_catalog),
    identity: IIdentityProvider = Depends(get_identity),
    db: SQLiteAdapter = Depends(get_db),
) -> Response:
    """월 마감 엑셀 다운로드"""
    require_role(actor, Permissions.VIEW_REPORTS, "export the monthly closing")

    settings = await ConfigStore(db).get_accounting_settings()
    exporter = MonthlyClosingExporter(LedgerStore(db), catalog, identity, tz)
    file_name, content = await exporter.export(month, year, settings)

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
