"""
DRECalculator 테스트
"""

from datetime import datetime
from decimal import Decimal

import pytest

from core.domain.accounting import AccountingSettings
from core.domain.errors import ValidationError
from core.ledger.store import LedgerStore
from core.reports.dre_calculator import DRECalculator, DREResult, validate_period
from factories import STORE_TZ, make_adjustment, make_expense, make_gift, make_sale, utc

SETTINGS = AccountingSettings(
    tax_rate=Decimal("0.155"),
    mdr_pix=Decimal("0.009"),
    mdr_card=Decimal("0.035"),
    mdr_cash=Decimal("0"),
)


@pytest.fixture
def calculator(ledger: LedgerStore) -> DRECalculator:
    return DRECalculator(ledger, STORE_TZ)


class TestCalculateDRE:
    @pytest.mark.asyncio
    async def test_reference_month(self, calculator: DRECalculator, ledger: LedgerStore) -> None:
        """PIX 100 x 3, PAID 비용 50"""
        for day in (5, 12, 20):
            await ledger.append(make_sale("100", "PIX", occurred_at=utc(2025, 1, day, 15)))
        await ledger.append(make_expense("50", occurred_at=utc(2025, 1, 10, 15)))

        result = await calculator.calculate_dre(1, 2025, SETTINGS)

        assert result.revenue == Decimal("300")
        assert result.taxes == Decimal("46.5")
        assert result.mdr == Decimal("2.7")
        assert result.expenses == Decimal("50")
        assert result.cmv == Decimal("150")
        assert result.net_profit == Decimal("50.8")

    @pytest.mark.asyncio
    async def test_pending_expenses_excluded(
        self, calculator: DRECalculator, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_expense("50", status="PENDING", occurred_at=utc(2025, 1, 10)))

        result = await calculator.calculate_dre(1, 2025, SETTINGS)

        assert result.expenses == Decimal("0")

    @pytest.mark.asyncio
    async def test_mdr_per_payment_method(
        self, calculator: DRECalculator, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_sale("100", "CARD", occurred_at=utc(2025, 1, 5)))
        await ledger.append(make_sale("100", "CASH", occurred_at=utc(2025, 1, 5)))
        await ledger.append(make_sale("100", "STORE_CREDIT", occurred_at=utc(2025, 1, 5)))

        result = await calculator.calculate_dre(1, 2025, SETTINGS)

        assert result.mdr == Decimal("3.5")

    @pytest.mark.asyncio
    async def test_non_revenue_events_ignored(
        self, calculator: DRECalculator, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_adjustment("20", "SHORTAGE", occurred_at=utc(2025, 1, 5)))
        await ledger.append(make_gift("40", occurred_at=utc(2025, 1, 5)))

        result = await calculator.calculate_dre(1, 2025, SETTINGS)

        assert result.revenue == Decimal("0")
        assert result.net_profit == Decimal("0")

    @pytest.mark.asyncio
    async def test_zero_revenue_negative_profit(
        self, calculator: DRECalculator, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_expense("80", occurred_at=utc(2025, 1, 5)))

        result = await calculator.calculate_dre(1, 2025, SETTINGS)

        assert result.revenue == Decimal("0")
        assert result.taxes == Decimal("0")
        assert result.net_profit == Decimal("-80")

    @pytest.mark.asyncio
    async def test_month_boundary_uses_store_timezone(
        self, calculator: DRECalculator, ledger: LedgerStore
    ) -> None:
        """1월 31일 현지 23시 판매는 UTC로 2월이지만 1월 매출"""
        await ledger.append(
            make_sale("100", occurred_at=datetime(2025, 1, 31, 23, 0, tzinfo=STORE_TZ))
        )
        await ledger.append(
            make_sale("70", occurred_at=datetime(2025, 2, 1, 0, 0, tzinfo=STORE_TZ))
        )

        january = await calculator.calculate_dre(1, 2025, SETTINGS)
        february = await calculator.calculate_dre(2, 2025, SETTINGS)

        assert january.revenue == Decimal("100")
        assert february.revenue == Decimal("70")

    @pytest.mark.asyncio
    async def test_pure(self, calculator: DRECalculator, ledger: LedgerStore) -> None:
        """같은 입력/설정 → 같은 결과"""
        await ledger.append(make_sale("123.45", "CARD", occurred_at=utc(2025, 1, 5)))

        first = await calculator.calculate_dre(1, 2025, SETTINGS)
        second = await calculator.calculate_dre(1, 2025, SETTINGS)

        assert first == second

    @pytest.mark.asyncio
    async def test_settings_change_applies_retroactively(
        self, calculator: DRECalculator, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_sale("100", occurred_at=utc(2025, 1, 5)))

        result = await calculator.calculate_dre(
            1, 2025, AccountingSettings(tax_rate=Decimal("0.1"))
        )

        assert result.taxes == Decimal("10.0")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", [0, 13])
    async def test_invalid_month(self, calculator: DRECalculator, month: int) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await calculator.calculate_dre(month, 2025, SETTINGS)

        assert exc_info.value.field == "month"

    @pytest.mark.asyncio
    async def test_invalid_settings(self, calculator: DRECalculator) -> None:
        with pytest.raises(ValidationError):
            await calculator.calculate_dre(1, 2025, AccountingSettings(tax_rate=Decimal("2")))

    def test_to_dict_uses_strings(self) -> None:
        result = DREResult(1, 2025, *(Decimal("1.5"),) * 6)

        assert result.to_dict()["net_profit"] == "1.5"


class TestValidatePeriod:
    @pytest.mark.parametrize("month, year", [(1, 2025), (12, 1)])
    def test_valid(self, month: int, year: int) -> None:
        validate_period(month, year)

    @pytest.mark.parametrize("year", [0, -1, True])
    def test_invalid_year(self, year) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_period(1, year)

        assert exc_info.value.field == "year"
