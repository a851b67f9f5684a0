"""
월 마감 엑셀 (FECHAMENTO_CONTABIL_<m>_<y>.xlsx)

회계사 전달용 워크북. 시트 구성:
- Vendas: 판매별 총액/MDR/순액
- Despesas: 해당 월 전체 비용 (PENDING 포함)
- Comissões: 판매자별 매출과 커미션 (매출 0인 판매자 제외)
- Inventário: 현재 재고 평가액

읽기 전용. Ledger에 아무것도 기록하지 않음.
"""

import logging
from datetime import tzinfo
from decimal import Decimal
from io import BytesIO
from typing import Any

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from adapters.interfaces import ICatalog, IIdentityProvider
from core.constants import AccountingPolicy
from core.domain.accounting import AccountingSettings
from core.domain.events import Adjustment, Expense, Gift, Purchase, Sale
from core.ledger.store import LedgerStore
from core.reports.dre_calculator import validate_period
from core.types import ExpenseCategory, ExpenseStatus, PaymentMethod
from core.utils.money import ZERO, round_cents
from core.utils.timezone import format_local, month_bounds

logger = logging.getLogger(__name__)

SALES_HEADERS = [
    "Data",
    "ID Transação",
    "Valor Bruto (Base Imposto)",
    "MDR (Taxa Maquininha)",
    "Valor Líquido",
    "Meio de Pagamento",
    "Vendedor",
]
EXPENSE_HEADERS = ["Data", "Categoria", "Descrição", "Prestador", "Valor", "Status"]
COMMISSION_HEADERS = [
    "Vendedora",
    "Total Vendido (R$)",
    "Vendas Realizadas",
    "% Comissão",
    "Valor à Pagar (R$)",
]
INVENTORY_HEADERS = [
    "SKU/Ref",
    "Descrição",
    "Qtd Estoque",
    "Preço de Custo (un)",
    "Valor Total em Custo",
]

_HEADER_FONT = Font(bold=True)
_HEADER_FILL = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")


def export_file_name(month: int, year: int) -> str:
    """내보내기 파일명 (월은 1부터)"""
    return f"FECHAMENTO_CONTABIL_{month}_{year}.xlsx"


def _write_sheet(sheet: Worksheet, headers: list[str], rows: list[list[Any]]) -> None:
    sheet.append(headers)
    for cell in sheet[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
    for row in rows:
        sheet.append(row)


class MonthlyClosingExporter:
    """월 마감 엑셀 생성기

    Args:
        ledger: Ledger 저장소
        catalog: 상품 카탈로그 (재고 시트)
        identity: 사용자 관리 (커미션 시트의 판매자 목록)
        tz: 월 경계 및 날짜 표시 타임존
    """

    def __init__(
        self,
        ledger: LedgerStore,
        catalog: ICatalog,
        identity: IIdentityProvider,
        tz: tzinfo,
    ):
        self.ledger = ledger
        self.catalog = catalog
        self.identity = identity
        self.tz = tz

    async def build_workbook(
        self,
        month: int,
        year: int,
        settings: AccountingSettings,
    ) -> openpyxl.Workbook:
        """워크북 생성

        Raises:
            ValidationError: 잘못된 월/연도
        """
        validate_period(month, year)
        start, end = month_bounds(month, year, self.tz)

        sales_rows: list[list[Any]] = []
        expense_rows: list[list[Any]] = []
        revenue_by_seller: dict[str, Decimal] = {}
        count_by_seller: dict[str, int] = {}

        async for event in self.ledger.query(from_=start, to=end):
            if isinstance(event, Sale):
                method = PaymentMethod(event.payment_method)
                mdr_value = event.total * settings.mdr_rate(method)
                sales_rows.append([
                    format_local(event.occurred_at, self.tz),
                    event.event_id,
                    round_cents(event.total),
                    round_cents(mdr_value),
                    round_cents(event.total - mdr_value),
                    method.value,
                    event.seller_name,
                ])
                revenue_by_seller[event.performed_by] = (
                    revenue_by_seller.get(event.performed_by, ZERO) + event.total
                )
                count_by_seller[event.performed_by] = count_by_seller.get(event.performed_by, 0) + 1
            elif isinstance(event, Expense):
                expense_rows.append([
                    format_local(event.occurred_at, self.tz),
                    ExpenseCategory(event.category).value,
                    event.description,
                    event.provider_name,
                    round_cents(event.amount),
                    ExpenseStatus(event.status).value,
                ])
            elif isinstance(event, (Adjustment, Gift, Purchase)):
                continue
            else:
                raise TypeError(f"Unhandled ledger event type: {type(event).__name__}")

        commission_percent = f"{(AccountingPolicy.COMMISSION_RATE * 100).normalize()}%"
        commission_rows: list[list[Any]] = []
        for seller in await self.identity.list_sellers():
            revenue = revenue_by_seller.get(seller.user_id, ZERO)
            if revenue <= ZERO:
                continue
            commission_rows.append([
                seller.name,
                round_cents(revenue),
                count_by_seller.get(seller.user_id, 0),
                commission_percent,
                round_cents(revenue * AccountingPolicy.COMMISSION_RATE),
            ])

        inventory_rows = [
            [
                product.product_ref,
                product.name,
                product.stock,
                round_cents(product.cost),
                round_cents(product.stock_value),
            ]
            for product in await self.catalog.list_products()
        ]

        workbook = openpyxl.Workbook()
        sales_sheet = workbook.active
        sales_sheet.title = "Vendas"
        _write_sheet(sales_sheet, SALES_HEADERS, sales_rows)
        _write_sheet(workbook.create_sheet("Despesas"), EXPENSE_HEADERS, expense_rows)
        _write_sheet(workbook.create_sheet("Comissões"), COMMISSION_HEADERS, commission_rows)
        _write_sheet(workbook.create_sheet("Inventário"), INVENTORY_HEADERS, inventory_rows)

        logger.info(
            "월 마감 엑셀 생성",
            extra={
                "month": month,
                "year": year,
                "sales": len(sales_rows),
                "expenses": len(expense_rows),
            },
        )
        return workbook

    async def export(
        self,
        month: int,
        year: int,
        settings: AccountingSettings,
    ) -> tuple[str, bytes]:
        """워크북을 xlsx 바이트로 반환

        Returns:
            (파일명, xlsx 바이트)
        """
        workbook = await self.build_workbook(month, year, settings)
        buffer = BytesIO()
        workbook.save(buffer)
        return export_file_name(month, year), buffer.getvalue()
