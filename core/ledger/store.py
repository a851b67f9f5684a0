"""
Ledger 저장소

돈이 움직이는 이벤트(판매/조정/선물/비용/매입)를 종류별 테이블에 append-only로 저장.
판매는 고객 응대(Attendance) 기록과 하나의 트랜잭션으로 묶여 저장됨.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import TYPE_CHECKING, Any, AsyncIterator

from core.domain.errors import ConsistencyError, NotFoundError, ValidationError
from core.domain.events import (
    EVENT_CLASSES,
    Adjustment,
    Expense,
    Gift,
    LedgerEvent,
    LedgerEventBase,
    Purchase,
    Sale,
)
from core.domain.records import Attendance
from core.types import AdjustmentKind, ExpenseStatus, LedgerEventKind, PaymentMethod
from core.utils.timezone import ensure_utc, from_db_ts, now_utc, to_db_ts

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import ICatalog

logger = logging.getLogger(__name__)


# 종류 → 테이블
KIND_TABLES: dict[LedgerEventKind, str] = {
    LedgerEventKind.SALE: "sales",
    LedgerEventKind.ADJUSTMENT: "adjustments",
    LedgerEventKind.GIFT: "gifts",
    LedgerEventKind.EXPENSE: "expenses",
    LedgerEventKind.PURCHASE: "purchases",
}


def _parse_kind(kind: LedgerEventKind | str) -> LedgerEventKind:
    try:
        return LedgerEventKind(kind.upper() if isinstance(kind, str) else kind)
    except ValueError as e:
        raise ValidationError(f"Unknown ledger event kind: {kind!r}", field="kind") from e


def _index_columns(event: LedgerEvent) -> dict[str, Any]:
    """종류별 조회용 컬럼 (나머지 필드는 payload_json)"""
    if isinstance(event, Sale):
        return {
            "payment_method": PaymentMethod(event.payment_method).value,
            "total": str(event.total),
        }
    if isinstance(event, Adjustment):
        return {
            "adjustment_kind": AdjustmentKind(event.adjustment_kind).value,
            "amount": str(event.amount),
        }
    if isinstance(event, Gift):
        return {"total_value_at_cost": str(event.total_value_at_cost)}
    if isinstance(event, Expense):
        return {"status": ExpenseStatus(event.status).value, "amount": str(event.amount)}
    if isinstance(event, Purchase):
        return {"invoice_key": event.invoice_key, "total_value": str(event.total_value)}
    raise TypeError(f"Unhandled ledger event type: {type(event).__name__}")


class LedgerStore:
    """Ledger 저장소

    이벤트를 저장하고 시간순으로 조회하는 클래스.
    수정/삭제 API는 없으며 DB 트리거로도 차단됨.

    Args:
        db: SQLite 어댑터
        catalog: 상품 카탈로그 (주어지면 판매 품목 존재 여부 확인)

    사용 예시:
    ```python
    ledger = LedgerStore(db)

    sale = Sale.create("seller-1", "Ana", items, PaymentMethod.PIX)
    await ledger.append(sale)

    async for event in ledger.query(LedgerEventKind.SALE, from_=start, to=end):
        ...
    ```
    """

    def __init__(self, db: SQLiteAdapter, catalog: ICatalog | None = None):
        self.db = db
        self.catalog = catalog

    # =========================================================================
    # 쓰기
    # =========================================================================

    async def append(self, event: LedgerEvent) -> str:
        """이벤트 저장

        Sale은 Attendance(resulted_in_sale=True)와 같은 트랜잭션으로 저장.

        Args:
            event: 저장할 이벤트

        Returns:
            저장된 이벤트 ID

        Raises:
            ValidationError: 이벤트 검증 실패 (저장 전 거부)
            ConsistencyError: Sale은 저장됐으나 Attendance 저장 실패 (롤백됨)
        """
        if not isinstance(event, LedgerEventBase):
            raise ValidationError(f"Not a ledger event: {type(event).__name__}")

        try:
            event.validate()
            await self._check_references(event)
        except ValidationError as e:
            logger.warning(
                "이벤트 검증 실패",
                extra={"kind": event.kind.value, "event_id": event.event_id, "error": e.message},
            )
            raise

        if isinstance(event, Sale):
            await self._append_sale(event)
        else:
            async with self.db.transaction():
                await self._insert_event(event)

        logger.info(
            "이벤트 저장 완료",
            extra={"kind": event.kind.value, "event_id": event.event_id},
        )
        return event.event_id

    async def _check_references(self, event: LedgerEvent) -> None:
        """중복 ID 및 외부 참조 확인 (카탈로그 상품, NF-e 중복)"""
        row = await self.db.fetchone(
            f"SELECT 1 FROM {KIND_TABLES[event.kind]} WHERE event_id = ?",
            (event.event_id,),
        )
        if row is not None:
            raise ValidationError(
                f"Duplicate {event.kind.value} id: {event.event_id}", field="event_id"
            )

        if isinstance(event, Sale) and self.catalog is not None:
            for item in event.items:
                if await self.catalog.get_product(item.product_ref) is None:
                    raise ValidationError(
                        f"Unknown product: {item.product_ref}", field="items.product_ref"
                    )

        if isinstance(event, Purchase) and event.invoice_key:
            row = await self.db.fetchone(
                "SELECT event_id FROM purchases WHERE invoice_key = ?",
                (event.invoice_key,),
            )
            if row is not None:
                raise ValidationError(
                    f"Invoice already imported: {event.invoice_key}", field="invoice_key"
                )

    async def _append_sale(self, sale: Sale) -> None:
        """Sale + Attendance 원자적 저장"""
        attendance = Attendance(
            attendance_id=sale.event_id,
            occurred_at=sale.occurred_at,
            seller_ref=sale.performed_by,
            seller_name=sale.seller_name,
            resulted_in_sale=True,
        )

        async with self.db.transaction():
            await self._insert_event(sale)
            try:
                await self._insert_attendance(attendance)
            except Exception as e:
                logger.critical(
                    "판매-응대 동시 저장 실패 (롤백)",
                    extra={"event_id": sale.event_id, "error": str(e)},
                )
                raise ConsistencyError(
                    f"Sale {sale.event_id} could not record its attendance: {e}"
                ) from e

    async def _insert_event(self, event: LedgerEvent) -> None:
        table = KIND_TABLES[event.kind]
        index_columns = _index_columns(event)

        columns = ["event_id", "occurred_at", "performed_by", *index_columns, "payload_json", "created_at"]
        values = (
            event.event_id,
            to_db_ts(event.occurred_at),
            event.performed_by,
            *index_columns.values(),
            json.dumps(event.payload(), ensure_ascii=False),
            to_db_ts(now_utc()),
        )
        placeholders = ", ".join("?" for _ in columns)

        try:
            await self.db.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
        except sqlite3.IntegrityError as e:
            # 사전 확인 이후 다른 운영자가 같은 ID를 먼저 기록한 경우
            if f"{table}.event_id" not in str(e):
                raise
            logger.warning(
                "이벤트 ID 중복",
                extra={"kind": event.kind.value, "event_id": event.event_id},
            )
            raise ValidationError(
                f"Duplicate {event.kind.value} id: {event.event_id}", field="event_id"
            ) from e

    async def _insert_attendance(self, attendance: Attendance) -> None:
        await self.db.execute(
            """
            INSERT INTO attendances (
                attendance_id, occurred_at, seller_ref, seller_name, resulted_in_sale, created_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                attendance.attendance_id,
                to_db_ts(attendance.occurred_at),
                attendance.seller_ref,
                attendance.seller_name,
                1 if attendance.resulted_in_sale else 0,
                to_db_ts(now_utc()),
            ),
        )

    async def record_attendance(
        self,
        seller_ref: str,
        seller_name: str,
        resulted_in_sale: bool = False,
        occurred_at: datetime | None = None,
    ) -> Attendance:
        """고객 응대 기록 (판매로 이어지지 않은 응대 포함)

        Raises:
            ValidationError: seller_ref 누락
        """
        attendance = Attendance.create(
            seller_ref=seller_ref,
            seller_name=seller_name,
            resulted_in_sale=resulted_in_sale,
            occurred_at=occurred_at,
        )
        attendance.validate()

        async with self.db.transaction():
            await self._insert_attendance(attendance)

        logger.info(
            "응대 기록",
            extra={"attendance_id": attendance.attendance_id, "seller_ref": seller_ref},
        )
        return attendance

    # =========================================================================
    # 조회
    # =========================================================================

    async def query(
        self,
        kind: LedgerEventKind | str | None = None,
        from_: datetime | None = None,
        to: datetime | None = None,
    ) -> AsyncIterator[LedgerEvent]:
        """이벤트 조회 (occurred_at 오름차순)

        단일 SELECT 문으로 읽으므로 호출 시점의 스냅샷. 호출할 때마다 재실행됨.

        Args:
            kind: 이벤트 종류 (None이면 전체)
            from_: 시작 시각 (포함)
            to: 종료 시각 (미포함)

        Yields:
            LedgerEvent
        """
        kinds = [_parse_kind(kind)] if kind is not None else list(KIND_TABLES)

        conditions: list[str] = []
        bounds: list[str] = []
        if from_ is not None:
            conditions.append("occurred_at >= ?")
            bounds.append(to_db_ts(ensure_utc(from_)))
        if to is not None:
            conditions.append("occurred_at < ?")
            bounds.append(to_db_ts(ensure_utc(to)))
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        selects = []
        parameters: list[str] = []
        for k in kinds:
            selects.append(
                f"""
                SELECT '{k.value}' AS kind, event_id, occurred_at, performed_by,
                       payload_json, created_at, seq
                FROM {KIND_TABLES[k]}
                {where}
                """
            )
            parameters.extend(bounds)

        sql = " UNION ALL ".join(selects) + " ORDER BY occurred_at ASC, created_at ASC, seq ASC"

        async for row in self.db.iterate(sql, tuple(parameters)):
            yield self._row_to_event(LedgerEventKind(row[0]), row[1:5])

    async def get(self, kind: LedgerEventKind | str, event_id: str) -> LedgerEvent:
        """ID로 이벤트 조회

        Raises:
            NotFoundError: 해당 종류에 없는 ID
        """
        parsed = _parse_kind(kind)
        row = await self.db.fetchone(
            f"""
            SELECT event_id, occurred_at, performed_by, payload_json
            FROM {KIND_TABLES[parsed]}
            WHERE event_id = ?
            """,
            (event_id,),
        )

        if row is None:
            raise NotFoundError(parsed.value, event_id)

        return self._row_to_event(parsed, row)

    async def query_attendances(
        self,
        from_: datetime | None = None,
        to: datetime | None = None,
        seller_ref: str | None = None,
    ) -> list[Attendance]:
        """응대 기록 조회 (occurred_at 오름차순)"""
        conditions: list[str] = []
        parameters: list[str] = []
        if from_ is not None:
            conditions.append("occurred_at >= ?")
            parameters.append(to_db_ts(ensure_utc(from_)))
        if to is not None:
            conditions.append("occurred_at < ?")
            parameters.append(to_db_ts(ensure_utc(to)))
        if seller_ref is not None:
            conditions.append("seller_ref = ?")
            parameters.append(seller_ref)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        rows = await self.db.fetchall(
            f"""
            SELECT attendance_id, occurred_at, seller_ref, seller_name, resulted_in_sale
            FROM attendances
            {where}
            ORDER BY occurred_at ASC, seq ASC
            """,
            tuple(parameters),
        )

        return [
            Attendance(
                attendance_id=row[0],
                occurred_at=from_db_ts(row[1]),
                seller_ref=row[2],
                seller_name=row[3],
                resulted_in_sale=bool(row[4]),
            )
            for row in rows
        ]

    def _row_to_event(self, kind: LedgerEventKind, row: tuple[Any, ...]) -> LedgerEvent:
        """DB 행 (event_id, occurred_at, performed_by, payload_json) → 이벤트"""
        payload = json.loads(row[3]) if isinstance(row[3], str) else row[3]
        return EVENT_CLASSES[kind].from_record(
            event_id=row[0],
            occurred_at=from_db_ts(row[1]),
            performed_by=row[2],
            payload=payload,
        )
