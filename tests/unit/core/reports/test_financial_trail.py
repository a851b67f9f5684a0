"""
FinancialTrail 테스트
"""

from decimal import Decimal

import pytest

from core.ledger.store import LedgerStore
from core.reports.financial_trail import FinancialTrail, to_trail_entry
from core.types import DateWindow, TrailDirection, TrailSource
from factories import make_adjustment, make_expense, make_gift, make_sale, utc


@pytest.fixture
def trail(ledger: LedgerStore) -> FinancialTrail:
    return FinancialTrail(ledger)


class TestToTrailEntry:
    def test_sale_is_inflow(self) -> None:
        sale = make_sale("100.00", "PIX", seller_name="Ana")

        entry = to_trail_entry(sale)

        assert entry.direction == TrailDirection.INFLOW
        assert entry.source == TrailSource.SALE
        assert entry.amount == Decimal("100.00")
        assert entry.description == f"Venda #{sale.event_id[-4:]} (PIX)"
        assert entry.performed_by == "Ana"

    def test_adjustment_direction(self) -> None:
        surplus = to_trail_entry(make_adjustment("5", "SURPLUS"))
        shortage = to_trail_entry(make_adjustment("20", "SHORTAGE"))

        assert surplus.direction == TrailDirection.INFLOW
        assert shortage.direction == TrailDirection.OUTFLOW
        assert shortage.amount == Decimal("20")
        assert shortage.description == "Ajuste: Conferência de caixa"

    def test_paid_expense_is_outflow(self) -> None:
        entry = to_trail_entry(make_expense("50"))

        assert entry.direction == TrailDirection.OUTFLOW
        assert entry.source == TrailSource.EXPENSE_PAYMENT
        assert entry.description == "Studio Acre: Vídeo de coleção"

    def test_pending_expense_and_gift_excluded(self) -> None:
        assert to_trail_entry(make_expense("50", status="PENDING")) is None
        assert to_trail_entry(make_gift("40")) is None

    def test_unknown_type(self) -> None:
        with pytest.raises(TypeError):
            to_trail_entry(object())  # type: ignore


class TestGet:
    @pytest.mark.asyncio
    async def test_newest_first(self, trail: FinancialTrail, ledger: LedgerStore) -> None:
        sale = make_sale("100.00", occurred_at=utc(2024, 3, 1, 10))
        expense = make_expense("50", occurred_at=utc(2024, 3, 2, 10))
        adjustment = make_adjustment("5", occurred_at=utc(2024, 3, 1, 18))
        for event in (sale, expense, adjustment):
            await ledger.append(event)
        await ledger.append(make_gift("40", occurred_at=utc(2024, 3, 3)))

        entries = await trail.get()

        assert [e.id for e in entries] == [expense.event_id, adjustment.event_id, sale.event_id]

    @pytest.mark.asyncio
    async def test_window(self, trail: FinancialTrail, ledger: LedgerStore) -> None:
        await ledger.append(make_sale("100.00", occurred_at=utc(2024, 3, 1)))
        await ledger.append(make_sale("200.00", occurred_at=utc(2024, 4, 1)))

        entries = await trail.get(DateWindow(start=utc(2024, 4, 1, 0)))

        assert [e.amount for e in entries] == [Decimal("200.00")]

    @pytest.mark.asyncio
    async def test_to_dict(self, trail: FinancialTrail, ledger: LedgerStore) -> None:
        await ledger.append(make_sale("100.00"))

        data = (await trail.get())[0].to_dict()

        assert data["direction"] == "INFLOW"
        assert data["source"] == "SALE"
        assert data["amount"] == "100.00"
