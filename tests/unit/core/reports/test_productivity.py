"""
ProductivityAnalyzer 테스트
"""

from decimal import Decimal

import pytest

from adapters.models import UserRecord
from core.ledger.store import LedgerStore
from core.reports.productivity import ProductivityAnalyzer
from core.types import DateWindow, UserRole
from factories import make_sale, utc

ANA = UserRecord("seller-a", "Ana", UserRole.SELLER)
BIA = UserRecord("seller-b", "Bia", UserRole.SELLER)
CLARA = UserRecord("seller-c", "Clara", UserRole.SELLER)


@pytest.fixture
def analyzer(ledger: LedgerStore) -> ProductivityAnalyzer:
    return ProductivityAnalyzer(ledger)


async def _attendances(ledger: LedgerStore, user: UserRecord, count: int, day: int = 1) -> None:
    for _ in range(count):
        await ledger.record_attendance(user.user_id, user.name, occurred_at=utc(2024, 3, day))


class TestRank:
    @pytest.mark.asyncio
    async def test_yield_ranking(self, analyzer: ProductivityAnalyzer, ledger: LedgerStore) -> None:
        """A: 200 / 10 = 20, B: 300 / 3 = 100 → B가 위"""
        await ledger.append(make_sale("120", seller_id="seller-a", seller_name="Ana"))
        await ledger.append(make_sale("80", seller_id="seller-a", seller_name="Ana"))
        await _attendances(ledger, ANA, 8)  # 판매 2건의 자동 응대 포함 10건

        await ledger.append(make_sale("300", seller_id="seller-b", seller_name="Bia"))
        await _attendances(ledger, BIA, 2)  # 자동 응대 포함 3건

        ranking = await analyzer.rank([ANA, BIA])

        assert [r.seller_id for r in ranking] == ["seller-b", "seller-a"]
        assert ranking[0].yield_per_attendance == Decimal("100")
        assert ranking[0].attendance_count == 3
        assert ranking[1].yield_per_attendance == Decimal("20")
        assert ranking[1].revenue == Decimal("200")
        assert ranking[1].sales_count == 2

    @pytest.mark.asyncio
    async def test_inactive_sellers_excluded(
        self, analyzer: ProductivityAnalyzer, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_sale("50", seller_id="seller-a", seller_name="Ana"))

        ranking = await analyzer.rank([ANA, BIA])

        assert [r.seller_id for r in ranking] == ["seller-a"]

    @pytest.mark.asyncio
    async def test_attendance_only_seller_has_zero_yield(
        self, analyzer: ProductivityAnalyzer, ledger: LedgerStore
    ) -> None:
        await _attendances(ledger, CLARA, 4)

        ranking = await analyzer.rank([CLARA])

        assert len(ranking) == 1
        assert ranking[0].revenue == Decimal("0")
        assert ranking[0].yield_per_attendance == Decimal("0")

    @pytest.mark.asyncio
    async def test_ties_keep_input_order(
        self, analyzer: ProductivityAnalyzer, ledger: LedgerStore
    ) -> None:
        await ledger.append(make_sale("50", seller_id="seller-a", seller_name="Ana"))
        await ledger.append(make_sale("50", seller_id="seller-b", seller_name="Bia"))

        assert [r.seller_id for r in await analyzer.rank([BIA, ANA])] == ["seller-b", "seller-a"]
        assert [r.seller_id for r in await analyzer.rank([ANA, BIA])] == ["seller-a", "seller-b"]

    @pytest.mark.asyncio
    async def test_window(self, analyzer: ProductivityAnalyzer, ledger: LedgerStore) -> None:
        await ledger.append(
            make_sale("100", seller_id="seller-a", seller_name="Ana", occurred_at=utc(2024, 3, 1))
        )
        await ledger.append(
            make_sale("900", seller_id="seller-a", seller_name="Ana", occurred_at=utc(2024, 4, 1))
        )

        ranking = await analyzer.rank(
            [ANA], DateWindow(start=utc(2024, 3, 1, 0), end=utc(2024, 4, 1, 0))
        )

        assert ranking[0].revenue == Decimal("100")
        assert ranking[0].attendance_count == 1

    @pytest.mark.asyncio
    async def test_unlisted_sellers_ignored(
        self, analyzer: ProductivityAnalyzer, ledger: LedgerStore
    ) -> None:
        """삭제된 사용자의 판매는 목록에 없으면 랭킹에 나오지 않음"""
        await ledger.append(make_sale("50", seller_id="former", seller_name="Ex"))

        assert await analyzer.rank([ANA]) == []
