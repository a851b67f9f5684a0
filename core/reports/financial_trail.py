"""
Financial Trail View - 자금 흐름 추적

판매(입금), 현금 조정(초과=입금, 부족=출금), 지급 완료 비용(출금)을
하나의 최신순 목록으로 합침. 저장하지 않고 조회 때마다 재계산.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from core.domain.events import Adjustment, Expense, Gift, LedgerEvent, Purchase, Sale
from core.ledger.store import LedgerStore
from core.types import (
    AdjustmentKind,
    DateWindow,
    ExpenseStatus,
    PaymentMethod,
    TrailDirection,
    TrailSource,
)


@dataclass(frozen=True)
class TrailEntry:
    """자금 흐름 항목"""

    id: str
    date: datetime
    direction: TrailDirection
    source: TrailSource
    amount: Decimal
    description: str
    performed_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "direction": self.direction.value,
            "source": self.source.value,
            "amount": str(self.amount),
            "description": self.description,
            "performed_by": self.performed_by,
        }


def to_trail_entry(event: LedgerEvent) -> TrailEntry | None:
    """이벤트 → 자금 흐름 항목 (해당 없으면 None)"""
    if isinstance(event, Sale):
        method = PaymentMethod(event.payment_method).value
        return TrailEntry(
            id=event.event_id,
            date=event.occurred_at,
            direction=TrailDirection.INFLOW,
            source=TrailSource.SALE,
            amount=event.total,
            description=f"Venda #{event.event_id[-4:]} ({method})",
            performed_by=event.seller_name or event.performed_by,
        )
    if isinstance(event, Adjustment):
        return TrailEntry(
            id=event.event_id,
            date=event.occurred_at,
            direction=(
                TrailDirection.INFLOW
                if event.adjustment_kind == AdjustmentKind.SURPLUS
                else TrailDirection.OUTFLOW
            ),
            source=TrailSource.ADJUSTMENT,
            amount=event.amount,
            description=f"Ajuste: {event.justification}",
            performed_by=event.performed_by,
        )
    if isinstance(event, Expense):
        if event.status != ExpenseStatus.PAID:
            return None
        return TrailEntry(
            id=event.event_id,
            date=event.occurred_at,
            direction=TrailDirection.OUTFLOW,
            source=TrailSource.EXPENSE_PAYMENT,
            amount=event.amount,
            description=f"{event.provider_name}: {event.description}",
            performed_by=event.performed_by,
        )
    if isinstance(event, (Gift, Purchase)):
        return None
    raise TypeError(f"Unhandled ledger event type: {type(event).__name__}")


class FinancialTrail:
    """자금 흐름 조회

    Args:
        ledger: Ledger 저장소
    """

    def __init__(self, ledger: LedgerStore):
        self.ledger = ledger

    async def get(self, window: DateWindow | None = None) -> list[TrailEntry]:
        """자금 흐름 목록 (최신순)

        Args:
            window: 조회 구간 (None이면 전체)
        """
        window = window or DateWindow()

        entries: list[TrailEntry] = []
        async for event in self.ledger.query(from_=window.start, to=window.end):
            entry = to_trail_entry(event)
            if entry is not None:
                entries.append(entry)

        entries.reverse()
        return entries
