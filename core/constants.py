"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → chicledger/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    STORE_NAME: str = "Chic Boutique"
    # 영업일 경계 기준 타임존 (매장 소재지: Rio Branco, Acre)
    STORE_TIMEZONE: str = "America/Rio_Branco"

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    CLI_LOGS_DIR: Path = LOGS_DIR / "cli"
    EXPORT_DIR: Path = DATA_DIR / "exports"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "chicledger_prod.db"
    TRAINING_DB: Path = DATA_DIR / "chicledger_training.db"


class AccountingPolicy:
    """회계 정책 상수

    CMV는 실제 품목 원가가 아니라 마크업 100% 가정으로 추정한다.
    (판매가 = 원가 x 2 → 원가 = 매출 x 0.5)
    """

    CMV_MARKUP_ASSUMPTION: Decimal = Decimal("0.5")

    # 판매자 커미션 비율 (월 마감 엑셀 'Comissões' 시트)
    COMMISSION_RATE: Decimal = Decimal("0.03")

    # AccountingSettings 기본값 (Lucro Presumido 소매 기준 추정치)
    DEFAULT_TAX_RATE: Decimal = Decimal("0.155")
    DEFAULT_MDR_PIX: Decimal = Decimal("0.009")
    DEFAULT_MDR_CARD: Decimal = Decimal("0.035")
    DEFAULT_MDR_CASH: Decimal = Decimal("0")


class AuditActions:
    """감사 로그 action 태그"""

    USER_DELETED: str = "USER_DELETED"
    SETTINGS_CHANGED: str = "SETTINGS_CHANGED"
