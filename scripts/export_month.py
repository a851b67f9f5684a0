"""
월 마감 엑셀 내보내기

사용법:
    python -m scripts.export_month --month 3 --year 2024
    python -m scripts.export_month --month 3 --year 2024 --mode training --output ./out

카탈로그/사용자 관리가 연결되지 않은 CLI에서는 Inventário 시트와
판매자 이름이 비어 있을 수 있음 (Mock 사용).
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path, init_schema
from adapters.mock import MockCatalog, MockIdentityProvider
from core.config.loader import get_settings
from core.constants import Paths
from core.ledger.store import LedgerStore
from core.logging import setup_logging
from core.reports.monthly_export import MonthlyClosingExporter
from core.storage.config_store import ConfigStore

logger = logging.getLogger(__name__)


async def main(month: int, year: int, mode: str | None, output_dir: Path) -> Path:
    settings = get_settings()
    db_path = get_db_path(mode) if mode else settings.db_path

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)

        accounting = await ConfigStore(db).get_accounting_settings()
        exporter = MonthlyClosingExporter(
            LedgerStore(db),
            MockCatalog(),
            MockIdentityProvider(),
            settings.store_tz,
        )
        file_name, content = await exporter.export(month, year, accounting)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / file_name
    output_path.write_bytes(content)

    logger.info(f"월 마감 내보내기 완료: {output_path} ({len(content)} bytes)")
    return output_path


if __name__ == "__main__":
    setup_logging("cli")

    parser = argparse.ArgumentParser(
        description="월 마감 엑셀(FECHAMENTO_CONTABIL) 내보내기"
    )
    parser.add_argument("--month", type=int, required=True, help="월 (1~12)")
    parser.add_argument("--year", type=int, required=True, help="연도")
    parser.add_argument(
        "--mode",
        choices=["production", "training"],
        default=None,
        help="운영 모드 (기본: settings.yaml)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Paths.EXPORT_DIR,
        help=f"출력 디렉토리 (기본: {Paths.EXPORT_DIR})"
    )
    args = parser.parse_args()

    asyncio.run(main(args.month, args.year, args.mode, args.output))
