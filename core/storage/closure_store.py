"""
ClosureStore - 일일 마감 스냅샷 저장소

마감 시점의 집계값을 그대로 저장. 같은 날을 여러 번 마감하면
마감 기록이 여러 건 쌓인다 (덮어쓰지 않음).
"""

import json
import logging
from datetime import date

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.errors import NotFoundError
from core.domain.records import DailyClosure, empty_payment_breakdown
from core.types import PaymentMethod
from core.utils.money import to_decimal
from core.utils.timezone import from_db_ts, to_db_ts

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = """
    closure_id, business_day, closed_at, closed_by,
    total_sales, total_gifts_at_cost, sales_count, gifts_count,
    attendance_count, net_adjustments, payment_breakdown_json
"""


class ClosureStore:
    """일일 마감 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def save(self, closure: DailyClosure) -> DailyClosure:
        """마감 스냅샷 저장"""
        breakdown_json = json.dumps(
            {method.value: str(amount) for method, amount in closure.payment_breakdown.items()}
        )

        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO closures (
                    closure_id, business_day, closed_at, closed_by,
                    total_sales, total_gifts_at_cost, sales_count, gifts_count,
                    attendance_count, net_adjustments, payment_breakdown_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    closure.closure_id,
                    closure.business_day.isoformat(),
                    to_db_ts(closure.closed_at),
                    closure.closed_by,
                    str(closure.total_sales),
                    str(closure.total_gifts_at_cost),
                    closure.sales_count,
                    closure.gifts_count,
                    closure.attendance_count,
                    str(closure.net_adjustments),
                    breakdown_json,
                ),
            )

        return closure

    async def list(self, business_day: date | None = None) -> list[DailyClosure]:
        """마감 이력 조회 (최신순)

        Args:
            business_day: 특정 영업일만 조회 (None이면 전체)
        """
        if business_day is not None:
            rows = await self.db.fetchall(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM closures
                WHERE business_day = ?
                ORDER BY closed_at DESC, seq DESC
                """,
                (business_day.isoformat(),),
            )
        else:
            rows = await self.db.fetchall(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM closures
                ORDER BY closed_at DESC, seq DESC
                """
            )

        return [self._row_to_closure(row) for row in rows]

    async def get(self, closure_id: str) -> DailyClosure:
        """ID로 마감 조회

        Raises:
            NotFoundError: 없는 ID
        """
        row = await self.db.fetchone(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM closures
            WHERE closure_id = ?
            """,
            (closure_id,),
        )

        if row is None:
            raise NotFoundError("DailyClosure", closure_id)

        return self._row_to_closure(row)

    def _row_to_closure(self, row: tuple) -> DailyClosure:
        breakdown = empty_payment_breakdown()
        for method, amount in json.loads(row[10]).items():
            breakdown[PaymentMethod(method)] = to_decimal(amount)

        return DailyClosure(
            closure_id=row[0],
            business_day=date.fromisoformat(row[1]),
            closed_at=from_db_ts(row[2]),
            closed_by=row[3],
            total_sales=to_decimal(row[4]),
            total_gifts_at_cost=to_decimal(row[5]),
            sales_count=row[6],
            gifts_count=row[7],
            attendance_count=row[8],
            net_adjustments=to_decimal(row[9]),
            payment_breakdown=breakdown,
        )
