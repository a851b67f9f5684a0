"""
Ledger 라우트

판매/현금 조정/선물/비용/매입/응대 기록 및 이벤트 조회 API.
기록 API는 append만 제공하며 수정/삭제 엔드포인트는 없음.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import ICatalog
from core.domain.events import Adjustment, CartLine, Expense, Gift, Purchase, Sale, SaleItem
from core.domain.permissions import Permissions, require_role
from core.ledger.store import KIND_TABLES, LedgerStore
from core.types import Actor
from web.dependencies import get_actor, get_catalog, get_db, get_db_write
from web.models.requests import (
    AdjustmentCreateRequest,
    AttendanceCreateRequest,
    ExpenseCreateRequest,
    GiftCreateRequest,
    PurchaseCreateRequest,
    SaleCreateRequest,
)
from web.models.responses import AttendanceResponse, EventAppendResponse, EventListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])

# URL 경로 이름(sales 등) → 이벤트 종류
_PATH_KINDS = {table: kind for kind, table in KIND_TABLES.items()}


@router.post("/sales", response_model=EventAppendResponse, status_code=201)
async def record_sale(
    request: SaleCreateRequest,
    actor: Actor = Depends(get_actor),
    catalog: ICatalog = Depends(get_catalog),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EventAppendResponse:
    """판매 기록 (응대 기록 자동 생성)"""
    require_role(actor, Permissions.OPERATE_REGISTER, "record sales")

    sale = Sale.create(
        seller_id=request.seller_id or actor.user_id,
        seller_name=request.seller_name or actor.name,
        items=[
            SaleItem(
                product_ref=item.product_ref,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price_at_sale=item.unit_price_at_sale,
                note=item.note,
            )
            for item in request.items
        ],
        payment_method=request.payment_method,
        total=request.total,
        payment_details=request.payment_details,
        occurred_at=request.occurred_at,
    )

    event_id = await LedgerStore(db, catalog=catalog).append(sale)
    return EventAppendResponse(id=event_id, kind=sale.kind.value)


@router.post("/adjustments", response_model=EventAppendResponse, status_code=201)
async def record_adjustment(
    request: AdjustmentCreateRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EventAppendResponse:
    """현금 시재 조정 기록"""
    require_role(actor, Permissions.OPERATE_REGISTER, "record cash adjustments")

    adjustment = Adjustment.create(
        performed_by=actor.user_id,
        adjustment_kind=request.adjustment_kind,
        amount=request.amount,
        justification=request.justification,
        occurred_at=request.occurred_at,
    )

    event_id = await LedgerStore(db).append(adjustment)
    return EventAppendResponse(id=event_id, kind=adjustment.kind.value)


@router.post("/gifts", response_model=EventAppendResponse, status_code=201)
async def record_gift(
    request: GiftCreateRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EventAppendResponse:
    """협찬/선물 출고 기록"""
    require_role(actor, Permissions.OPERATE_REGISTER, "record gifts")

    gift = Gift.create(
        performed_by=actor.user_id,
        items=[
            CartLine(
                product_ref=item.product_ref,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
            )
            for item in request.items
        ],
        recipient_name=request.recipient_name,
        authorized_by=request.authorized_by or actor.name,
        total_value_at_cost=request.total_value_at_cost,
        occurred_at=request.occurred_at,
    )

    event_id = await LedgerStore(db).append(gift)
    return EventAppendResponse(id=event_id, kind=gift.kind.value)


@router.post("/expenses", response_model=EventAppendResponse, status_code=201)
async def record_expense(
    request: ExpenseCreateRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EventAppendResponse:
    """외부 서비스 비용 기록

    PENDING → PAID 전환은 PAID 비용을 새로 기록하여 처리.
    """
    require_role(actor, Permissions.RECORD_EXPENSE, "record expenses")

    expense = Expense.create(
        performed_by=actor.user_id,
        category=request.category,
        provider_name=request.provider_name,
        description=request.description,
        amount=request.amount,
        status=request.status,
        occurred_at=request.occurred_at,
    )

    event_id = await LedgerStore(db).append(expense)
    return EventAppendResponse(id=event_id, kind=expense.kind.value)


@router.post("/purchases", response_model=EventAppendResponse, status_code=201)
async def record_purchase(
    request: PurchaseCreateRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EventAppendResponse:
    """공급사 매입 수동 기록"""
    require_role(actor, Permissions.RECORD_EXPENSE, "record purchases")

    purchase = Purchase.create(
        performed_by=actor.user_id,
        supplier_name=request.supplier_name,
        tax_id=request.tax_id,
        total_value=request.total_value,
        invoice_number=request.invoice_number,
        invoice_key=request.invoice_key,
        invoice_date=request.invoice_date,
    )

    event_id = await LedgerStore(db).append(purchase)
    return EventAppendResponse(id=event_id, kind=purchase.kind.value)


@router.post("/attendances", response_model=AttendanceResponse, status_code=201)
async def record_attendance(
    request: AttendanceCreateRequest,
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AttendanceResponse:
    """고객 응대 기록"""
    require_role(actor, Permissions.OPERATE_REGISTER, "record attendances")

    attendance = await LedgerStore(db).record_attendance(
        seller_ref=request.seller_id or actor.user_id,
        seller_name=request.seller_name or actor.name,
        resulted_in_sale=request.resulted_in_sale,
        occurred_at=request.occurred_at,
    )
    return AttendanceResponse(**attendance.to_dict())


@router.get("/events", response_model=EventListResponse)
async def list_events(
    kind: str | None = Query(default=None, description="이벤트 종류 (SALE, ADJUSTMENT 등)"),
    from_: datetime | None = Query(default=None, alias="from", description="시작 시각 (포함)"),
    to: datetime | None = Query(default=None, description="종료 시각 (미포함)"),
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db),
) -> EventListResponse:
    """이벤트 조회 (occurred_at 오름차순)"""
    require_role(actor, Permissions.VIEW_REPORTS, "view ledger events")

    events = [
        event.to_dict()
        async for event in LedgerStore(db).query(kind=kind, from_=from_, to=to)
    ]
    return EventListResponse(events=events, count=len(events))


@router.get("/attendances", response_model=list[AttendanceResponse])
async def list_attendances(
    from_: datetime | None = Query(default=None, alias="from", description="시작 시각 (포함)"),
    to: datetime | None = Query(default=None, description="종료 시각 (미포함)"),
    seller_id: str | None = Query(default=None, description="판매자 ID"),
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db),
) -> list[AttendanceResponse]:
    """응대 기록 조회"""
    require_role(actor, Permissions.VIEW_REPORTS, "view attendances")

    attendances = await LedgerStore(db).query_attendances(
        from_=from_, to=to, seller_ref=seller_id
    )
    return [AttendanceResponse(**a.to_dict()) for a in attendances]


@router.get("/{kind}/{event_id}")
async def get_event(
    kind: str = Path(..., description="이벤트 종류 (sales, adjustments 또는 SALE 등)"),
    event_id: str = Path(..., description="이벤트 ID"),
    actor: Actor = Depends(get_actor),
    db: SQLiteAdapter = Depends(get_db),
) -> dict:
    """이벤트 단건 조회"""
    require_role(actor, Permissions.VIEW_REPORTS, "view ledger events")

    event = await LedgerStore(db).get(_PATH_KINDS.get(kind.lower(), kind), event_id)
    return event.to_dict()
