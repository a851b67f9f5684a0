"""
Ledger Event 도메인 모델

돈이 움직이는 모든 사건은 종류별 불변 이벤트로 기록됨 (append-only).
정정은 수정이 아니라 보상 이벤트를 새로 추가하는 방식으로만 가능.

LedgerEvent = Sale | Adjustment | Gift | Expense | Purchase
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Union
from uuid import uuid4

from core.domain.errors import ValidationError
from core.types import (
    AdjustmentKind,
    ExpenseCategory,
    ExpenseStatus,
    LedgerEventKind,
    PaymentMethod,
)
from core.utils.money import ZERO, to_decimal
from core.utils.timezone import ensure_utc, now_utc


def _require_text(value: str | None, field_name: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)


def _parse_enum(enum_cls: type, value: Any, field_name: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as e:
        valid = [m.value for m in enum_cls]
        raise ValidationError(
            f"Invalid {field_name}: {value!r}. Valid values: {valid}",
            field=field_name,
        ) from e


# =============================================================================
# 품목 라인
# =============================================================================


@dataclass(frozen=True)
class SaleItem:
    """판매 품목 라인"""

    product_ref: str
    quantity: int
    unit_price_at_sale: Decimal
    product_name: str = ""
    note: str | None = None  # 가격 변경 사유 등

    @property
    def extension(self) -> Decimal:
        """라인 금액 (수량 x 판매 단가)"""
        return self.unit_price_at_sale * self.quantity

    def validate(self) -> None:
        _require_text(self.product_ref, "items.product_ref")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValidationError("quantity must be a positive integer", field="items.quantity")
        if self.unit_price_at_sale < ZERO:
            raise ValidationError(
                "unit_price_at_sale must be >= 0", field="items.unit_price_at_sale"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_ref": self.product_ref,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price_at_sale": str(self.unit_price_at_sale),
            "note": self.note,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SaleItem":
        return SaleItem(
            product_ref=data["product_ref"],
            product_name=data.get("product_name", ""),
            quantity=data["quantity"],
            unit_price_at_sale=to_decimal(data["unit_price_at_sale"], "unit_price_at_sale"),
            note=data.get("note"),
        )


@dataclass(frozen=True)
class CartLine:
    """선물(협찬) 출고 품목 라인 - 원가 기준"""

    product_ref: str
    quantity: int
    unit_cost: Decimal
    product_name: str = ""

    @property
    def extension(self) -> Decimal:
        return self.unit_cost * self.quantity

    def validate(self) -> None:
        _require_text(self.product_ref, "items.product_ref")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValidationError("quantity must be a positive integer", field="items.quantity")
        if self.unit_cost < ZERO:
            raise ValidationError("unit_cost must be >= 0", field="items.unit_cost")

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_ref": self.product_ref,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_cost": str(self.unit_cost),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "CartLine":
        return CartLine(
            product_ref=data["product_ref"],
            product_name=data.get("product_name", ""),
            quantity=data["quantity"],
            unit_cost=to_decimal(data["unit_cost"], "unit_cost"),
        )


# =============================================================================
# 이벤트 공통
# =============================================================================


@dataclass(frozen=True)
class LedgerEventBase:
    """모든 Ledger 이벤트의 공통 필드

    Attributes:
        event_id: 종류 내 고유 ID (UUID)
        occurred_at: 발생 시각 (UTC)
        performed_by: 수행자 식별자
    """

    kind: ClassVar[LedgerEventKind]

    event_id: str
    occurred_at: datetime
    performed_by: str

    def validate(self) -> None:
        """공통 필드 검증 (하위 클래스에서 확장)"""
        _require_text(self.event_id, "event_id")
        _require_text(self.performed_by, "performed_by")
        if not isinstance(self.occurred_at, datetime):
            raise ValidationError("occurred_at must be a datetime", field="occurred_at")

    def payload(self) -> dict[str, Any]:
        """종류별 상세 필드 (payload_json으로 저장)"""
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용)"""
        return {
            "kind": self.kind.value,
            "id": self.event_id,
            "occurred_at": self.occurred_at.isoformat(),
            "performed_by": self.performed_by,
            **self.payload(),
        }


# =============================================================================
# 이벤트 종류
# =============================================================================


@dataclass(frozen=True)
class Sale(LedgerEventBase):
    """판매

    performed_by는 판매자 ID. total은 라인 금액 합계와 정확히 일치해야 함.
    """

    kind: ClassVar[LedgerEventKind] = LedgerEventKind.SALE

    seller_name: str = ""
    items: tuple[SaleItem, ...] = field(default_factory=tuple)
    total: Decimal = ZERO
    payment_method: PaymentMethod = PaymentMethod.OTHER
    payment_details: str | None = None  # 예: "Maquininha NuBank"

    @staticmethod
    def create(
        seller_id: str,
        seller_name: str,
        items: list[SaleItem],
        payment_method: PaymentMethod | str,
        total: Decimal | None = None,
        payment_details: str | None = None,
        occurred_at: datetime | None = None,
    ) -> "Sale":
        """새 판매 생성

        Args:
            seller_id: 판매자 ID (performed_by)
            seller_name: 판매자 이름
            items: 품목 라인
            payment_method: 결제 수단
            total: 합계 (None이면 라인 합계로 계산)
            payment_details: 결제 상세 메모
            occurred_at: 발생 시각 (None이면 현재)
        """
        items_tuple = tuple(items)
        if total is None:
            total = sum((i.extension for i in items_tuple), ZERO)
        return Sale(
            event_id=str(uuid4()),
            occurred_at=ensure_utc(occurred_at) if occurred_at else now_utc(),
            performed_by=seller_id,
            seller_name=seller_name,
            items=items_tuple,
            total=total,
            payment_method=_parse_enum(PaymentMethod, payment_method, "payment_method"),
            payment_details=payment_details,
        )

    @property
    def lines_total(self) -> Decimal:
        return sum((i.extension for i in self.items), ZERO)

    def validate(self) -> None:
        super().validate()
        if not self.items:
            raise ValidationError("Sale requires at least one item", field="items")
        for item in self.items:
            item.validate()
        if self.total < ZERO:
            raise ValidationError("total must be >= 0", field="total")
        if self.total != self.lines_total:
            raise ValidationError(
                f"Sale total {self.total} does not match line total {self.lines_total}",
                field="total",
            )
        _parse_enum(PaymentMethod, self.payment_method, "payment_method")

    def payload(self) -> dict[str, Any]:
        return {
            "seller_name": self.seller_name,
            "items": [i.to_dict() for i in self.items],
            "total": str(self.total),
            "payment_method": PaymentMethod(self.payment_method).value,
            "payment_details": self.payment_details,
        }

    @staticmethod
    def from_record(
        event_id: str, occurred_at: datetime, performed_by: str, payload: dict[str, Any]
    ) -> "Sale":
        return Sale(
            event_id=event_id,
            occurred_at=occurred_at,
            performed_by=performed_by,
            seller_name=payload.get("seller_name", ""),
            items=tuple(SaleItem.from_dict(i) for i in payload.get("items", [])),
            total=to_decimal(payload["total"], "total"),
            payment_method=PaymentMethod(payload["payment_method"]),
            payment_details=payload.get("payment_details"),
        )


@dataclass(frozen=True)
class Adjustment(LedgerEventBase):
    """현금 시재 조정 (SURPLUS: 초과, SHORTAGE: 부족)"""

    kind: ClassVar[LedgerEventKind] = LedgerEventKind.ADJUSTMENT

    adjustment_kind: AdjustmentKind = AdjustmentKind.SURPLUS
    amount: Decimal = ZERO
    justification: str = ""

    @staticmethod
    def create(
        performed_by: str,
        adjustment_kind: AdjustmentKind | str,
        amount: Decimal,
        justification: str,
        occurred_at: datetime | None = None,
    ) -> "Adjustment":
        return Adjustment(
            event_id=str(uuid4()),
            occurred_at=ensure_utc(occurred_at) if occurred_at else now_utc(),
            performed_by=performed_by,
            adjustment_kind=_parse_enum(AdjustmentKind, adjustment_kind, "adjustment_kind"),
            amount=amount,
            justification=justification,
        )

    @property
    def signed_amount(self) -> Decimal:
        """SURPLUS는 +, SHORTAGE는 -"""
        if self.adjustment_kind == AdjustmentKind.SURPLUS:
            return self.amount
        return -self.amount

    def validate(self) -> None:
        super().validate()
        _parse_enum(AdjustmentKind, self.adjustment_kind, "adjustment_kind")
        if self.amount <= ZERO:
            raise ValidationError("amount must be > 0", field="amount")
        _require_text(self.justification, "justification")

    def payload(self) -> dict[str, Any]:
        return {
            "adjustment_kind": AdjustmentKind(self.adjustment_kind).value,
            "amount": str(self.amount),
            "justification": self.justification,
        }

    @staticmethod
    def from_record(
        event_id: str, occurred_at: datetime, performed_by: str, payload: dict[str, Any]
    ) -> "Adjustment":
        return Adjustment(
            event_id=event_id,
            occurred_at=occurred_at,
            performed_by=performed_by,
            adjustment_kind=AdjustmentKind(payload["adjustment_kind"]),
            amount=to_decimal(payload["amount"]),
            justification=payload["justification"],
        )


@dataclass(frozen=True)
class Gift(LedgerEventBase):
    """협찬/선물 출고 (인플루언서 등) - 원가 기준 금액"""

    kind: ClassVar[LedgerEventKind] = LedgerEventKind.GIFT

    items: tuple[CartLine, ...] = field(default_factory=tuple)
    total_value_at_cost: Decimal = ZERO
    recipient_name: str = ""
    authorized_by: str = ""

    @staticmethod
    def create(
        performed_by: str,
        items: list[CartLine],
        recipient_name: str,
        authorized_by: str,
        total_value_at_cost: Decimal | None = None,
        occurred_at: datetime | None = None,
    ) -> "Gift":
        items_tuple = tuple(items)
        if total_value_at_cost is None:
            total_value_at_cost = sum((i.extension for i in items_tuple), ZERO)
        return Gift(
            event_id=str(uuid4()),
            occurred_at=ensure_utc(occurred_at) if occurred_at else now_utc(),
            performed_by=performed_by,
            items=items_tuple,
            total_value_at_cost=total_value_at_cost,
            recipient_name=recipient_name,
            authorized_by=authorized_by,
        )

    def validate(self) -> None:
        super().validate()
        if not self.items:
            raise ValidationError("Gift requires at least one item", field="items")
        for item in self.items:
            item.validate()
        if self.total_value_at_cost < ZERO:
            raise ValidationError("total_value_at_cost must be >= 0", field="total_value_at_cost")
        lines_total = sum((i.extension for i in self.items), ZERO)
        if self.total_value_at_cost != lines_total:
            raise ValidationError(
                f"Gift total {self.total_value_at_cost} does not match line total {lines_total}",
                field="total_value_at_cost",
            )
        _require_text(self.recipient_name, "recipient_name")
        _require_text(self.authorized_by, "authorized_by")

    def payload(self) -> dict[str, Any]:
        return {
            "items": [i.to_dict() for i in self.items],
            "total_value_at_cost": str(self.total_value_at_cost),
            "recipient_name": self.recipient_name,
            "authorized_by": self.authorized_by,
        }

    @staticmethod
    def from_record(
        event_id: str, occurred_at: datetime, performed_by: str, payload: dict[str, Any]
    ) -> "Gift":
        return Gift(
            event_id=event_id,
            occurred_at=occurred_at,
            performed_by=performed_by,
            items=tuple(CartLine.from_dict(i) for i in payload.get("items", [])),
            total_value_at_cost=to_decimal(payload["total_value_at_cost"]),
            recipient_name=payload["recipient_name"],
            authorized_by=payload["authorized_by"],
        )


@dataclass(frozen=True)
class Expense(LedgerEventBase):
    """외부 서비스 비용 (영상, 유지보수, 마케팅 등)

    PENDING 비용은 실현 손익(DRE)에서 제외됨.
    """

    kind: ClassVar[LedgerEventKind] = LedgerEventKind.EXPENSE

    category: ExpenseCategory = ExpenseCategory.OTHER
    provider_name: str = ""
    description: str = ""
    amount: Decimal = ZERO
    status: ExpenseStatus = ExpenseStatus.PAID

    @staticmethod
    def create(
        performed_by: str,
        category: ExpenseCategory | str,
        provider_name: str,
        description: str,
        amount: Decimal,
        status: ExpenseStatus | str = ExpenseStatus.PAID,
        occurred_at: datetime | None = None,
    ) -> "Expense":
        return Expense(
            event_id=str(uuid4()),
            occurred_at=ensure_utc(occurred_at) if occurred_at else now_utc(),
            performed_by=performed_by,
            category=_parse_enum(ExpenseCategory, category, "category"),
            provider_name=provider_name,
            description=description,
            amount=amount,
            status=_parse_enum(ExpenseStatus, status, "status"),
        )

    def validate(self) -> None:
        super().validate()
        _parse_enum(ExpenseCategory, self.category, "category")
        _parse_enum(ExpenseStatus, self.status, "status")
        _require_text(self.provider_name, "provider_name")
        if self.amount <= ZERO:
            raise ValidationError("amount must be > 0", field="amount")

    def payload(self) -> dict[str, Any]:
        return {
            "category": ExpenseCategory(self.category).value,
            "provider_name": self.provider_name,
            "description": self.description,
            "amount": str(self.amount),
            "status": ExpenseStatus(self.status).value,
        }

    @staticmethod
    def from_record(
        event_id: str, occurred_at: datetime, performed_by: str, payload: dict[str, Any]
    ) -> "Expense":
        return Expense(
            event_id=event_id,
            occurred_at=occurred_at,
            performed_by=performed_by,
            category=ExpenseCategory(payload["category"]),
            provider_name=payload["provider_name"],
            description=payload.get("description", ""),
            amount=to_decimal(payload["amount"]),
            status=ExpenseStatus(payload["status"]),
        )


@dataclass(frozen=True)
class Purchase(LedgerEventBase):
    """공급사 매입 (NF-e 임포트 결과)

    occurred_at은 임포트 시각, invoice_date는 NF-e 발행일.
    """

    kind: ClassVar[LedgerEventKind] = LedgerEventKind.PURCHASE

    supplier_name: str = ""
    tax_id: str = ""  # CNPJ
    total_value: Decimal = ZERO
    invoice_number: str = ""
    invoice_key: str = ""  # NF-e 접근 키 (44자리)
    invoice_date: datetime | None = None

    @staticmethod
    def create(
        performed_by: str,
        supplier_name: str,
        tax_id: str,
        total_value: Decimal,
        invoice_number: str,
        invoice_key: str,
        invoice_date: datetime | None = None,
        occurred_at: datetime | None = None,
    ) -> "Purchase":
        return Purchase(
            event_id=str(uuid4()),
            occurred_at=ensure_utc(occurred_at) if occurred_at else now_utc(),
            performed_by=performed_by,
            supplier_name=supplier_name,
            tax_id=tax_id,
            total_value=total_value,
            invoice_number=invoice_number,
            invoice_key=invoice_key,
            invoice_date=ensure_utc(invoice_date) if invoice_date else None,
        )

    def validate(self) -> None:
        super().validate()
        _require_text(self.supplier_name, "supplier_name")
        if self.total_value < ZERO:
            raise ValidationError("total_value must be >= 0", field="total_value")

    def payload(self) -> dict[str, Any]:
        return {
            "supplier_name": self.supplier_name,
            "tax_id": self.tax_id,
            "total_value": str(self.total_value),
            "invoice_number": self.invoice_number,
            "invoice_key": self.invoice_key,
            "invoice_date": self.invoice_date.isoformat() if self.invoice_date else None,
        }

    @staticmethod
    def from_record(
        event_id: str, occurred_at: datetime, performed_by: str, payload: dict[str, Any]
    ) -> "Purchase":
        invoice_date = payload.get("invoice_date")
        return Purchase(
            event_id=event_id,
            occurred_at=occurred_at,
            performed_by=performed_by,
            supplier_name=payload["supplier_name"],
            tax_id=payload.get("tax_id", ""),
            total_value=to_decimal(payload["total_value"]),
            invoice_number=payload.get("invoice_number", ""),
            invoice_key=payload.get("invoice_key", ""),
            invoice_date=ensure_utc(datetime.fromisoformat(invoice_date)) if invoice_date else None,
        )


LedgerEvent = Union[Sale, Adjustment, Gift, Expense, Purchase]

# 종류 → 이벤트 클래스
EVENT_CLASSES: dict[LedgerEventKind, type] = {
    LedgerEventKind.SALE: Sale,
    LedgerEventKind.ADJUSTMENT: Adjustment,
    LedgerEventKind.GIFT: Gift,
    LedgerEventKind.EXPENSE: Expense,
    LedgerEventKind.PURCHASE: Purchase,
}
