"""LedgerStore 통합 테스트"""

import sqlite3
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.mock import MockCatalog
from core.domain.errors import ConsistencyError, NotFoundError, ValidationError
from core.domain.events import Adjustment, Purchase, Sale
from core.ledger.store import LedgerStore
from core.types import AdjustmentKind, LedgerEventKind
from factories import make_adjustment, make_expense, make_gift, make_sale, utc


@pytest_asyncio.fixture
async def db() -> SQLiteAdapter:
    """테스트용 임시 DB (파일)"""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test_ledger.db"
        adapter = SQLiteAdapter(db_path)
        await adapter.connect()
        await init_schema(adapter)

        yield adapter

        await adapter.close()


@pytest.fixture
def store(db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(db)


def _purchase(invoice_key: str) -> Purchase:
    return Purchase.create(
        performed_by="owner-1",
        supplier_name="Confecções Norte LTDA",
        tax_id="12345678000199",
        total_value=Decimal("500.00"),
        invoice_number="4521",
        invoice_key=invoice_key,
    )


class TestAppend:
    """append 테스트"""

    @pytest.mark.asyncio
    async def test_append_and_get(self, store: LedgerStore) -> None:
        sale = make_sale("100.00", occurred_at=utc(2024, 3, 1, 15))

        event_id = await store.append(sale)
        loaded = await store.get(LedgerEventKind.SALE, event_id)

        assert event_id == sale.event_id
        assert loaded == sale

    @pytest.mark.asyncio
    async def test_each_kind_goes_to_its_table(self, store: LedgerStore, db: SQLiteAdapter) -> None:
        await store.append(make_adjustment("10"))
        await store.append(make_gift("40"))
        await store.append(make_expense("50"))
        await store.append(_purchase(""))

        for table in ("adjustments", "gifts", "expenses", "purchases"):
            row = await db.fetchone(f"SELECT COUNT(*) FROM {table}")
            assert row[0] == 1, table

        row = await db.fetchone("SELECT COUNT(*) FROM sales")
        assert row[0] == 0

    @pytest.mark.asyncio
    async def test_invalid_event_not_written(self, store: LedgerStore, db: SQLiteAdapter) -> None:
        """검증 실패 시 아무것도 기록되지 않음"""
        bad = make_adjustment("10")
        bad = type(bad)(
            event_id=bad.event_id,
            occurred_at=bad.occurred_at,
            performed_by=bad.performed_by,
            adjustment_kind=bad.adjustment_kind,
            amount=Decimal("0"),
            justification=bad.justification,
        )

        with pytest.raises(ValidationError):
            await store.append(bad)

        row = await db.fetchone("SELECT COUNT(*) FROM adjustments")
        assert row[0] == 0

    @pytest.mark.asyncio
    async def test_not_an_event(self, store: LedgerStore) -> None:
        with pytest.raises(ValidationError):
            await store.append({"kind": "SALE"})  # type: ignore

    @pytest.mark.asyncio
    async def test_unknown_product_rejected_with_catalog(
        self, db: SQLiteAdapter, catalog: MockCatalog
    ) -> None:
        store = LedgerStore(db, catalog=catalog)

        with pytest.raises(ValidationError) as exc_info:
            await store.append(make_sale("10.00", product_ref="NAO-EXISTE"))

        assert exc_info.value.field == "items.product_ref"

    @pytest.mark.asyncio
    async def test_known_product_accepted_with_catalog(
        self, db: SQLiteAdapter, catalog: MockCatalog
    ) -> None:
        store = LedgerStore(db, catalog=catalog)

        await store.append(make_sale("100.00", product_ref="VEST-001"))

    @pytest.mark.asyncio
    async def test_duplicate_invoice_key_rejected(self, store: LedgerStore) -> None:
        key = "13240112345678000199550010000045211000045210"
        await store.append(_purchase(key))

        with pytest.raises(ValidationError) as exc_info:
            await store.append(_purchase(key))

        assert exc_info.value.field == "invoice_key"

    @pytest.mark.asyncio
    async def test_duplicate_sale_id_rejected(self, store: LedgerStore, db: SQLiteAdapter) -> None:
        """같은 판매 재전송 → ValidationError, 판매/응대 모두 1건만 남음"""
        sale = make_sale("100")
        await store.append(sale)

        with pytest.raises(ValidationError) as exc_info:
            await store.append(sale)

        assert exc_info.value.field == "event_id"
        for table in ("sales", "attendances"):
            row = await db.fetchone(f"SELECT COUNT(*) FROM {table}")
            assert row[0] == 1, table

    @pytest.mark.asyncio
    async def test_duplicate_adjustment_id_rejected(self, store: LedgerStore) -> None:
        adjustment = Adjustment.create("Ana", "SURPLUS", Decimal("5"), "troco")
        await store.append(adjustment)

        with pytest.raises(ValidationError) as exc_info:
            await store.append(adjustment)

        assert exc_info.value.field == "event_id"

    @pytest.mark.asyncio
    async def test_same_id_allowed_across_kinds(self, store: LedgerStore) -> None:
        """ID는 종류별로만 유일"""
        sale = make_sale("100")
        await store.append(sale)
        adjustment = Adjustment(
            event_id=sale.event_id,
            occurred_at=sale.occurred_at,
            performed_by="Ana",
            adjustment_kind=AdjustmentKind.SURPLUS,
            amount=Decimal("5"),
            justification="troco",
        )

        assert await store.append(adjustment) == sale.event_id

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_sale_rolls_back(
        self,
        store: LedgerStore,
        db: SQLiteAdapter,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """사전 확인을 통과한 중복도 DB 제약에서 ValidationError로 변환"""
        sale = make_sale("100")
        await store.append(sale)

        original_check = store._check_references

        async def check_without_id_lookup(event) -> None:
            # 다른 계산대가 먼저 기록한 상황: 사전 확인 시점엔 보이지 않음
            if not isinstance(event, Sale):
                await original_check(event)

        monkeypatch.setattr(store, "_check_references", check_without_id_lookup)

        with pytest.raises(ValidationError) as exc_info:
            await store.append(sale)

        assert exc_info.value.field == "event_id"
        row = await db.fetchone("SELECT COUNT(*) FROM attendances")
        assert row[0] == 1

    @pytest.mark.asyncio
    async def test_empty_invoice_key_not_unique(self, store: LedgerStore) -> None:
        """수동 매입(키 없음)은 여러 건 허용"""
        await store.append(_purchase(""))
        await store.append(_purchase(""))


class TestSaleAttendance:
    """판매-응대 원자적 저장"""

    @pytest.mark.asyncio
    async def test_sale_creates_attendance(self, store: LedgerStore) -> None:
        sale = make_sale("100.00", seller_id="seller-a", seller_name="Ana")

        await store.append(sale)
        attendances = await store.query_attendances()

        assert len(attendances) == 1
        assert attendances[0].attendance_id == sale.event_id
        assert attendances[0].seller_ref == "seller-a"
        assert attendances[0].resulted_in_sale is True
        assert attendances[0].occurred_at == sale.occurred_at

    @pytest.mark.asyncio
    async def test_attendance_failure_rolls_back_sale(
        self,
        store: LedgerStore,
        db: SQLiteAdapter,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """응대 저장 실패 → ConsistencyError, 판매도 남지 않음"""
        async def failing_insert(attendance) -> None:
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store, "_insert_attendance", failing_insert)

        with pytest.raises(ConsistencyError):
            await store.append(make_sale("100.00"))

        row = await db.fetchone("SELECT COUNT(*) FROM sales")
        assert row[0] == 0
        row = await db.fetchone("SELECT COUNT(*) FROM attendances")
        assert row[0] == 0

    @pytest.mark.asyncio
    async def test_record_attendance_without_sale(self, store: LedgerStore) -> None:
        attendance = await store.record_attendance("seller-b", "Bia", occurred_at=utc(2024, 3, 1))

        loaded = await store.query_attendances(seller_ref="seller-b")

        assert loaded == [attendance]
        assert loaded[0].resulted_in_sale is False

    @pytest.mark.asyncio
    async def test_record_attendance_requires_seller(self, store: LedgerStore) -> None:
        with pytest.raises(ValidationError):
            await store.record_attendance("", "Bia")


class TestQuery:
    """query 테스트"""

    @pytest.mark.asyncio
    async def test_ordered_by_occurred_at_across_kinds(self, store: LedgerStore) -> None:
        """기록 순서가 아니라 발생 시각 순서"""
        late = make_sale("30.00", occurred_at=utc(2024, 3, 1, 18))
        early = make_adjustment("5", occurred_at=utc(2024, 3, 1, 9))
        middle = make_expense("20", occurred_at=utc(2024, 3, 1, 12))

        for event in (late, early, middle):
            await store.append(event)

        events = [e async for e in store.query()]

        assert [e.event_id for e in events] == [early.event_id, middle.event_id, late.event_id]

    @pytest.mark.asyncio
    async def test_same_timestamp_keeps_write_order(self, store: LedgerStore) -> None:
        ts = utc(2024, 3, 1, 10)
        first = make_sale("10.00", occurred_at=ts)
        second = make_sale("20.00", occurred_at=ts)

        await store.append(first)
        await store.append(second)

        events = [e async for e in store.query(LedgerEventKind.SALE)]

        assert [e.event_id for e in events] == [first.event_id, second.event_id]

    @pytest.mark.asyncio
    async def test_half_open_window(self, store: LedgerStore) -> None:
        at_start = make_sale("10.00", occurred_at=utc(2024, 3, 1, 0))
        at_end = make_sale("20.00", occurred_at=utc(2024, 3, 2, 0))
        await store.append(at_start)
        await store.append(at_end)

        events = [e async for e in store.query(from_=utc(2024, 3, 1, 0), to=utc(2024, 3, 2, 0))]

        assert [e.event_id for e in events] == [at_start.event_id]

    @pytest.mark.asyncio
    async def test_kind_filter_accepts_string(self, store: LedgerStore) -> None:
        await store.append(make_sale("10.00"))
        await store.append(make_expense("5"))

        events = [e async for e in store.query("expense")]

        assert len(events) == 1
        assert events[0].kind == LedgerEventKind.EXPENSE

    @pytest.mark.asyncio
    async def test_unknown_kind(self, store: LedgerStore) -> None:
        with pytest.raises(ValidationError):
            [e async for e in store.query("REFUND")]

    @pytest.mark.asyncio
    async def test_query_is_restartable(self, store: LedgerStore) -> None:
        """매 호출 시 새로 읽음"""
        await store.append(make_sale("10.00"))
        first = [e async for e in store.query()]

        await store.append(make_sale("20.00"))
        second = [e async for e in store.query()]

        assert len(first) == 1
        assert len(second) == 2

    @pytest.mark.asyncio
    async def test_restored_types(self, store: LedgerStore) -> None:
        await store.append(make_sale("10.00"))

        events = [e async for e in store.query()]

        assert isinstance(events[0], Sale)
        assert events[0].total == Decimal("10.00")


class TestGet:
    @pytest.mark.asyncio
    async def test_not_found(self, store: LedgerStore) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await store.get(LedgerEventKind.SALE, "missing")

        assert exc_info.value.kind == "SALE"

    @pytest.mark.asyncio
    async def test_wrong_kind_is_not_found(self, store: LedgerStore) -> None:
        """ID는 종류 안에서만 유일"""
        sale = make_sale("10.00")
        await store.append(sale)

        with pytest.raises(NotFoundError):
            await store.get(LedgerEventKind.GIFT, sale.event_id)


class TestAppendOnly:
    """DB 트리거로 수정/삭제 차단"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("table", ["sales", "attendances"])
    async def test_update_blocked(
        self, store: LedgerStore, db: SQLiteAdapter, table: str
    ) -> None:
        await store.append(make_sale("10.00"))

        with pytest.raises(sqlite3.IntegrityError, match="append-only"):
            await db.execute(f"UPDATE {table} SET created_at = created_at")

    @pytest.mark.asyncio
    async def test_delete_blocked(self, store: LedgerStore, db: SQLiteAdapter) -> None:
        await store.append(make_expense("10"))

        with pytest.raises(sqlite3.IntegrityError, match="append-only"):
            await db.execute("DELETE FROM expenses")
