"""
타입 정의 모듈

Enum, Dataclass 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RunMode(str, Enum):
    """운영 모드 (실매장 / 교육용)"""

    PRODUCTION = "production"
    TRAINING = "training"


class PaymentMethod(str, Enum):
    """결제 수단"""

    CASH = "CASH"
    PIX = "PIX"
    CARD = "CARD"
    STORE_CREDIT = "STORE_CREDIT"  # 매장 크레딧 (외상)
    OTHER = "OTHER"


class AdjustmentKind(str, Enum):
    """현금 조정 유형"""

    SURPLUS = "SURPLUS"  # 시재 초과 (입금)
    SHORTAGE = "SHORTAGE"  # 시재 부족 (손실)


class ExpenseCategory(str, Enum):
    """외부 서비스 비용 분류"""

    VIDEO = "VIDEO"
    MAINTENANCE = "MAINTENANCE"
    MARKETING = "MARKETING"
    OTHER = "OTHER"


class ExpenseStatus(str, Enum):
    """비용 지급 상태"""

    PAID = "PAID"
    PENDING = "PENDING"


class LedgerEventKind(str, Enum):
    """Ledger 이벤트 종류 (종류별로 별도 테이블에 저장)"""

    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"
    GIFT = "GIFT"
    EXPENSE = "EXPENSE"
    PURCHASE = "PURCHASE"


class TrailDirection(str, Enum):
    """자금 흐름 방향"""

    INFLOW = "INFLOW"
    OUTFLOW = "OUTFLOW"


class TrailSource(str, Enum):
    """자금 흐름 출처"""

    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"
    EXPENSE_PAYMENT = "EXPENSE_PAYMENT"


class UserRole(str, Enum):
    """사용자 역할"""

    OWNER = "OWNER"
    AUDITOR = "AUDITOR"
    ADMIN = "ADMIN"
    SELLER = "SELLER"


@dataclass(frozen=True)
class Actor:
    """호출 주체 (불변)

    모든 쓰기/조회 호출에 명시적으로 전달되는 신원 정보.
    세션 전역 상태에서 읽지 않는다.
    """

    user_id: str
    name: str
    role: UserRole


@dataclass(frozen=True)
class DateWindow:
    """조회 구간 [start, end)

    None이면 해당 방향으로 제한 없음.
    """

    start: datetime | None = None
    end: datetime | None = None
