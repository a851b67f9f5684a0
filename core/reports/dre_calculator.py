"""
DRE Calculator - 월간 손익계산서 (Demonstrativo de Resultado)

매장 타임존 기준 달력 월의 판매/지급 완료 비용으로 계산.

    revenue    = Σ Sale.total
    taxes      = revenue x tax_rate
    mdr        = Σ Sale.total x rate(payment_method)
    expenses   = Σ Expense.amount (PAID만)
    cmv        = revenue x CMV_MARKUP_ASSUMPTION
    net_profit = revenue - taxes - mdr - expenses - cmv

CMV는 품목 원가 합산이 아니라 마크업 가정 상수로 추정함.
반올림하지 않은 Decimal 그대로 반환 (표시 단계에서 round_cents).
"""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from decimal import Decimal
from typing import Any

from core.constants import AccountingPolicy
from core.domain.accounting import AccountingSettings
from core.domain.errors import ValidationError
from core.domain.events import Adjustment, Expense, Gift, Purchase, Sale
from core.ledger.store import LedgerStore
from core.types import ExpenseStatus, PaymentMethod
from core.utils.money import ZERO
from core.utils.timezone import month_bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DREResult:
    """월간 DRE 결과"""

    month: int
    year: int
    revenue: Decimal
    taxes: Decimal
    mdr: Decimal
    expenses: Decimal
    cmv: Decimal
    net_profit: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "year": self.year,
            "revenue": str(self.revenue),
            "taxes": str(self.taxes),
            "mdr": str(self.mdr),
            "expenses": str(self.expenses),
            "cmv": str(self.cmv),
            "net_profit": str(self.net_profit),
        }


def validate_period(month: Any, year: Any) -> None:
    """월/연도 검증

    Raises:
        ValidationError: month가 1~12 범위 밖이거나 year가 양의 정수가 아님
    """
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(f"month must be within 1..12: {month!r}", field="month")
    if isinstance(year, bool) or not isinstance(year, int) or year < 1:
        raise ValidationError(f"year must be a positive integer: {year!r}", field="year")


class DRECalculator:
    """DRE 계산기

    쓰기 없음. 같은 입력과 같은 설정이면 항상 같은 결과.

    Args:
        ledger: Ledger 저장소
        tz: 월 경계 타임존
    """

    def __init__(self, ledger: LedgerStore, tz: tzinfo):
        self.ledger = ledger
        self.tz = tz

    async def calculate_dre(
        self,
        month: int,
        year: int,
        settings: AccountingSettings,
    ) -> DREResult:
        """월간 DRE 계산

        Args:
            month: 월 (1~12)
            year: 연도
            settings: 회계 설정 (호출 시점 값 그대로 적용)

        Raises:
            ValidationError: 잘못된 월/연도 또는 설정
        """
        validate_period(month, year)
        settings.validate()

        start, end = month_bounds(month, year, self.tz)

        revenue = ZERO
        mdr = ZERO
        expenses = ZERO

        async for event in self.ledger.query(from_=start, to=end):
            if isinstance(event, Sale):
                revenue += event.total
                mdr += event.total * settings.mdr_rate(PaymentMethod(event.payment_method))
            elif isinstance(event, Expense):
                if event.status == ExpenseStatus.PAID:
                    expenses += event.amount
            elif isinstance(event, (Adjustment, Gift, Purchase)):
                continue
            else:
                raise TypeError(f"Unhandled ledger event type: {type(event).__name__}")

        taxes = revenue * settings.tax_rate
        cmv = revenue * AccountingPolicy.CMV_MARKUP_ASSUMPTION
        net_profit = revenue - taxes - mdr - expenses - cmv

        logger.debug(
            "DRE 계산",
            extra={"month": month, "year": year, "revenue": str(revenue)},
        )

        return DREResult(
            month=month,
            year=year,
            revenue=revenue,
            taxes=taxes,
            mdr=mdr,
            expenses=expenses,
            cmv=cmv,
            net_profit=net_profit,
        )
