"""
어댑터 공통 데이터 모델

외부 협력자(상품 카탈로그, 사용자/인증) 응답을 표준화한 모델.
모든 금액은 Decimal 타입 사용.
"""

from dataclasses import dataclass
from decimal import Decimal

from core.types import UserRole


@dataclass(frozen=True)
class CatalogProduct:
    """카탈로그 상품 정보

    Attributes:
        product_ref: 상품 식별자 (SKU)
        name: 상품명
        price: 현재 판매가
        cost: 원가
        stock: 현재 재고 수량
    """

    product_ref: str
    name: str
    price: Decimal
    cost: Decimal = Decimal("0")
    stock: int = 0

    @property
    def stock_value(self) -> Decimal:
        """재고 평가액 (재고 x 원가)"""
        return self.cost * self.stock


@dataclass(frozen=True)
class UserRecord:
    """사용자 정보

    Attributes:
        user_id: 사용자 ID
        name: 표시 이름
        role: 역할
    """

    user_id: str
    name: str
    role: UserRole

    @property
    def is_seller(self) -> bool:
        return self.role == UserRole.SELLER
