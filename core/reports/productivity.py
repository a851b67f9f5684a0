"""
Productivity Analyzer - 판매자 응대당 매출

    yield_per_attendance = 구간 매출 / 구간 응대 수 (응대 0이면 0)

매출과 응대가 모두 0인 판매자는 제외. 응대당 매출 내림차순 정렬
(동률은 입력 순서 유지).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from adapters.models import UserRecord
from core.domain.events import Sale
from core.ledger.store import LedgerStore
from core.types import DateWindow, LedgerEventKind
from core.utils.money import ZERO


@dataclass(frozen=True)
class SellerYield:
    """판매자별 생산성"""

    seller_id: str
    name: str
    revenue: Decimal
    sales_count: int
    attendance_count: int
    yield_per_attendance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "seller_id": self.seller_id,
            "name": self.name,
            "revenue": str(self.revenue),
            "sales_count": self.sales_count,
            "attendance_count": self.attendance_count,
            "yield_per_attendance": str(self.yield_per_attendance),
        }


class ProductivityAnalyzer:
    """판매자 랭킹

    Args:
        ledger: Ledger 저장소
    """

    def __init__(self, ledger: LedgerStore):
        self.ledger = ledger

    async def rank(
        self,
        sellers: list[UserRecord],
        window: DateWindow | None = None,
    ) -> list[SellerYield]:
        """응대당 매출 랭킹

        Args:
            sellers: 대상 판매자 목록 (이 순서가 동률 정렬 기준)
            window: 조회 구간 [start, end) (None이면 전체 기간)

        Returns:
            SellerYield 리스트 (yield 내림차순)
        """
        window = window or DateWindow()

        revenue: dict[str, Decimal] = {}
        sales_count: dict[str, int] = {}
        async for event in self.ledger.query(
            LedgerEventKind.SALE, from_=window.start, to=window.end
        ):
            assert isinstance(event, Sale)
            revenue[event.performed_by] = revenue.get(event.performed_by, ZERO) + event.total
            sales_count[event.performed_by] = sales_count.get(event.performed_by, 0) + 1

        attendance_count: dict[str, int] = {}
        for attendance in await self.ledger.query_attendances(
            from_=window.start, to=window.end
        ):
            attendance_count[attendance.seller_ref] = (
                attendance_count.get(attendance.seller_ref, 0) + 1
            )

        results: list[SellerYield] = []
        for seller in sellers:
            seller_revenue = revenue.get(seller.user_id, ZERO)
            seller_attendances = attendance_count.get(seller.user_id, 0)

            if seller_revenue == ZERO and seller_attendances == 0:
                continue

            results.append(
                SellerYield(
                    seller_id=seller.user_id,
                    name=seller.name,
                    revenue=seller_revenue,
                    sales_count=sales_count.get(seller.user_id, 0),
                    attendance_count=seller_attendances,
                    yield_per_attendance=(
                        seller_revenue / seller_attendances if seller_attendances else ZERO
                    ),
                )
            )

        return sorted(results, key=lambda r: r.yield_per_attendance, reverse=True)
