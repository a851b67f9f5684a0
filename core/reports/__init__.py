"""
리포트 (Ledger 이력에서 매번 재계산하는 읽기 전용 집계)

- ClosureEngine: 일일 마감 스냅샷 (유일하게 결과를 저장)
- DRECalculator: 월간 손익계산서
- ProductivityAnalyzer: 판매자 응대당 매출 랭킹
- FinancialTrail: 자금 흐름 목록
- MonthlyClosingExporter: 월 마감 엑셀
"""

from core.reports.closure_engine import ClosureEngine
from core.reports.dre_calculator import DRECalculator, DREResult
from core.reports.financial_trail import FinancialTrail, TrailEntry
from core.reports.monthly_export import MonthlyClosingExporter, export_file_name
from core.reports.productivity import ProductivityAnalyzer, SellerYield

__all__ = [
    "ClosureEngine",
    "DRECalculator",
    "DREResult",
    "FinancialTrail",
    "TrailEntry",
    "MonthlyClosingExporter",
    "export_file_name",
    "ProductivityAnalyzer",
    "SellerYield",
]
