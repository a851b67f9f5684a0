"""
Closure Engine - 일일 마감

영업일(매장 타임존 기준 00:00 ~ 다음날 00:00)의 판매/선물/현금 조정/응대를
집계하여 불변 스냅샷(DailyClosure)으로 저장.

주의: 멱등이 아님. 같은 날을 다시 마감하면 새 스냅샷이 추가됨
(마감 이후 들어온 판매를 반영하려면 재마감).
"""

import logging
from datetime import date, tzinfo
from uuid import uuid4

from core.domain.errors import ValidationError
from core.domain.events import Adjustment, Expense, Gift, Purchase, Sale
from core.domain.records import DailyClosure, empty_payment_breakdown
from core.ledger.store import LedgerStore
from core.storage.closure_store import ClosureStore
from core.types import PaymentMethod
from core.utils.money import ZERO
from core.utils.timezone import day_bounds, now_utc

logger = logging.getLogger(__name__)


class ClosureEngine:
    """일일 마감 엔진

    Args:
        ledger: Ledger 저장소
        closures: 마감 스냅샷 저장소
        tz: 영업일 경계 타임존

    사용 예시:
    ```python
    engine = ClosureEngine(ledger, ClosureStore(db), get_store_tz())
    closure = await engine.close(date(2025, 1, 5), closed_by="seller-1")
    history = await engine.history()
    ```
    """

    def __init__(self, ledger: LedgerStore, closures: ClosureStore, tz: tzinfo):
        self.ledger = ledger
        self.closures = closures
        self.tz = tz

    async def close(self, day: date, closed_by: str) -> DailyClosure:
        """영업일 마감

        해당 날에 이벤트가 없어도 0 집계로 마감됨.

        Args:
            day: 영업일 (매장 타임존 달력 날짜)
            closed_by: 마감자 ID

        Returns:
            저장된 DailyClosure

        Raises:
            ValidationError: closed_by 누락
        """
        if not closed_by or not closed_by.strip():
            raise ValidationError("closed_by is required", field="closed_by")

        start, end = day_bounds(day, self.tz)

        total_sales = ZERO
        total_gifts = ZERO
        net_adjustments = ZERO
        sales_count = 0
        gifts_count = 0
        breakdown = empty_payment_breakdown()

        async for event in self.ledger.query(from_=start, to=end):
            if isinstance(event, Sale):
                total_sales += event.total
                sales_count += 1
                method = PaymentMethod(event.payment_method)
                breakdown[method] = breakdown[method] + event.total
            elif isinstance(event, Gift):
                total_gifts += event.total_value_at_cost
                gifts_count += 1
            elif isinstance(event, Adjustment):
                net_adjustments += event.signed_amount
            elif isinstance(event, (Expense, Purchase)):
                # 비용/매입은 일일 시재 마감 대상 아님 (DRE에서 반영)
                continue
            else:
                raise TypeError(f"Unhandled ledger event type: {type(event).__name__}")

        attendances = await self.ledger.query_attendances(from_=start, to=end)

        closure = DailyClosure(
            closure_id=str(uuid4()),
            business_day=day,
            closed_at=now_utc(),
            closed_by=closed_by,
            total_sales=total_sales,
            total_gifts_at_cost=total_gifts,
            sales_count=sales_count,
            gifts_count=gifts_count,
            attendance_count=len(attendances),
            net_adjustments=net_adjustments,
            payment_breakdown=breakdown,
        )

        await self.closures.save(closure)

        logger.info(
            "일일 마감 완료",
            extra={
                "closure_id": closure.closure_id,
                "business_day": day.isoformat(),
                "closed_by": closed_by,
                "total_sales": str(total_sales),
                "sales_count": sales_count,
            },
        )
        return closure

    async def history(self, business_day: date | None = None) -> list[DailyClosure]:
        """마감 이력 (최신순)

        Args:
            business_day: 특정 영업일의 스냅샷만 (재마감 포함)
        """
        return await self.closures.list(business_day=business_day)

    async def get(self, closure_id: str) -> DailyClosure:
        """마감 단건 조회

        Raises:
            NotFoundError: 없는 ID
        """
        return await self.closures.get(closure_id)
