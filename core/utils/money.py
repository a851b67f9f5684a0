"""
금액 유틸리티

모든 금액은 Decimal로 다루고 DB에는 문자열로 저장.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from core.domain.errors import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """값을 Decimal로 변환

    float는 str()을 거쳐 변환하여 이진 오차를 들여오지 않는다.

    Raises:
        ValidationError: 숫자로 해석할 수 없는 값
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number", field=field)
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValidationError(f"{field} must be a number: {value!r}", field=field) from e

    if not result.is_finite():
        raise ValidationError(f"{field} must be finite", field=field)
    return result


def round_cents(value: Decimal) -> Decimal:
    """센트 단위 반올림 (표시/엑셀 출력용)"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
