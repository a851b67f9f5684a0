"""
회계 설정 모델

세율/MDR 비율. 프로세스 전역, 조회 시점 기준으로 적용됨 (기간별 이력 없음).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.constants import AccountingPolicy
from core.domain.errors import ValidationError
from core.types import PaymentMethod
from core.utils.money import to_decimal

_RATE_FIELDS = ("tax_rate", "mdr_pix", "mdr_card", "mdr_cash")


@dataclass(frozen=True)
class AccountingSettings:
    """세금 및 카드/PIX 수수료 비율 (모두 0~1)"""

    tax_rate: Decimal = AccountingPolicy.DEFAULT_TAX_RATE
    mdr_pix: Decimal = AccountingPolicy.DEFAULT_MDR_PIX
    mdr_card: Decimal = AccountingPolicy.DEFAULT_MDR_CARD
    mdr_cash: Decimal = AccountingPolicy.DEFAULT_MDR_CASH

    def validate(self) -> None:
        for name in _RATE_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                raise ValidationError(f"{name} must be a Decimal", field=name)
            if value < 0 or value > 1:
                raise ValidationError(f"{name} must be within [0, 1]: {value}", field=name)

    def mdr_rate(self, method: PaymentMethod) -> Decimal:
        """결제 수단별 MDR 비율

        PIX → mdr_pix, CARD → mdr_card, 그 외 → mdr_cash
        """
        if method == PaymentMethod.PIX:
            return self.mdr_pix
        if method == PaymentMethod.CARD:
            return self.mdr_card
        return self.mdr_cash

    def to_dict(self) -> dict[str, str]:
        return {name: str(getattr(self, name)) for name in _RATE_FIELDS}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AccountingSettings":
        """딕셔너리에서 생성 (누락 필드는 기본값)

        Raises:
            ValidationError: 숫자가 아니거나 범위를 벗어난 값
        """
        defaults = AccountingSettings()
        values = {
            name: to_decimal(data[name], name) if name in data else getattr(defaults, name)
            for name in _RATE_FIELDS
        }
        settings = AccountingSettings(**values)
        settings.validate()
        return settings
