"""
어댑터 레이어

외부 서비스(DB, 상품 카탈로그, 사용자 관리, NF-e 등)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    ICatalog,
    IIdentityProvider,
)
from adapters.models import (
    CatalogProduct,
    UserRecord,
)

__all__ = [
    # Interfaces
    "ICatalog",
    "IIdentityProvider",
    # Models
    "CatalogProduct",
    "UserRecord",
]
