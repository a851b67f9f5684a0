"""
비재무 기록 도메인 모델

Attendance(고객 응대), AuditLogEntry(감사 로그), DailyClosure(일일 마감 스냅샷).
모두 생성 후 변경되지 않음.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from core.domain.errors import ValidationError
from core.types import PaymentMethod
from core.utils.money import ZERO, to_decimal
from core.utils.timezone import ensure_utc, now_utc


@dataclass(frozen=True)
class Attendance:
    """고객 응대 1건

    판매로 이어진 경우 resulted_in_sale=True (Sale 기록 시 자동 생성).
    """

    attendance_id: str
    occurred_at: datetime
    seller_ref: str
    seller_name: str
    resulted_in_sale: bool

    @staticmethod
    def create(
        seller_ref: str,
        seller_name: str,
        resulted_in_sale: bool = False,
        occurred_at: datetime | None = None,
    ) -> "Attendance":
        return Attendance(
            attendance_id=str(uuid4()),
            occurred_at=ensure_utc(occurred_at) if occurred_at else now_utc(),
            seller_ref=seller_ref,
            seller_name=seller_name,
            resulted_in_sale=resulted_in_sale,
        )

    def validate(self) -> None:
        if not self.seller_ref or not self.seller_ref.strip():
            raise ValidationError("seller_ref is required", field="seller_ref")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.attendance_id,
            "occurred_at": self.occurred_at.isoformat(),
            "seller_ref": self.seller_ref,
            "seller_name": self.seller_name,
            "resulted_in_sale": self.resulted_in_sale,
        }


@dataclass(frozen=True)
class AuditLogEntry:
    """감사 로그 항목 (예: USER_DELETED)"""

    entry_id: str
    action: str
    description: str
    performed_by: str
    timestamp: datetime

    @staticmethod
    def create(
        action: str,
        description: str,
        performed_by: str,
        timestamp: datetime | None = None,
    ) -> "AuditLogEntry":
        return AuditLogEntry(
            entry_id=str(uuid4()),
            action=action,
            description=description,
            performed_by=performed_by,
            timestamp=ensure_utc(timestamp) if timestamp else now_utc(),
        )

    def validate(self) -> None:
        for name in ("entry_id", "action", "description", "performed_by"):
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise ValidationError(f"{name} is required", field=name)

    def matches(self, term: str) -> bool:
        """action/description/performed_by 부분 문자열 검색 (대소문자 무시)"""
        needle = term.lower()
        return (
            needle in self.action.lower()
            or needle in self.description.lower()
            or needle in self.performed_by.lower()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "action": self.action,
            "description": self.description,
            "performed_by": self.performed_by,
            "timestamp": self.timestamp.isoformat(),
        }


def empty_payment_breakdown() -> dict[PaymentMethod, Decimal]:
    """모든 결제 수단을 0으로 채운 집계표"""
    return {method: ZERO for method in PaymentMethod}


@dataclass(frozen=True)
class DailyClosure:
    """일일 마감 스냅샷

    생성 시점의 집계값을 고정 저장. 재계산하지 않으며,
    정정이 필요하면 새 마감을 추가한다 (기존 마감은 삭제하지 않음).
    """

    closure_id: str
    business_day: date
    closed_at: datetime
    closed_by: str
    total_sales: Decimal = ZERO
    total_gifts_at_cost: Decimal = ZERO
    sales_count: int = 0
    gifts_count: int = 0
    attendance_count: int = 0
    net_adjustments: Decimal = ZERO
    payment_breakdown: dict[PaymentMethod, Decimal] = field(default_factory=empty_payment_breakdown)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.closure_id,
            "business_day": self.business_day.isoformat(),
            "closed_at": self.closed_at.isoformat(),
            "closed_by": self.closed_by,
            "total_sales": str(self.total_sales),
            "total_gifts_at_cost": str(self.total_gifts_at_cost),
            "sales_count": self.sales_count,
            "gifts_count": self.gifts_count,
            "attendance_count": self.attendance_count,
            "net_adjustments": str(self.net_adjustments),
            "payment_breakdown": {
                method.value: str(amount) for method, amount in self.payment_breakdown.items()
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "DailyClosure":
        breakdown = empty_payment_breakdown()
        for method, amount in data.get("payment_breakdown", {}).items():
            breakdown[PaymentMethod(method)] = to_decimal(amount)

        return DailyClosure(
            closure_id=data["id"],
            business_day=date.fromisoformat(data["business_day"]),
            closed_at=ensure_utc(datetime.fromisoformat(data["closed_at"])),
            closed_by=data["closed_by"],
            total_sales=to_decimal(data["total_sales"]),
            total_gifts_at_cost=to_decimal(data["total_gifts_at_cost"]),
            sales_count=int(data["sales_count"]),
            gifts_count=int(data["gifts_count"]),
            attendance_count=int(data["attendance_count"]),
            net_adjustments=to_decimal(data["net_adjustments"]),
            payment_breakdown=breakdown,
        )
