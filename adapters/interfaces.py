"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.

상품 카탈로그와 사용자 관리는 이 시스템 바깥의 협력자이며,
Ledger/리포트 계층은 아래 인터페이스로만 접근한다.
"""

from typing import Protocol, runtime_checkable

from adapters.models import CatalogProduct, UserRecord


@runtime_checkable
class ICatalog(Protocol):
    """상품 카탈로그 인터페이스

    판매 시 상품 존재 확인, 월 마감 엑셀의 재고 시트에 사용.
    """

    async def get_product(self, product_ref: str) -> CatalogProduct | None:
        """상품 조회

        Args:
            product_ref: 상품 식별자

        Returns:
            상품 정보 또는 None (없음)
        """
        ...

    async def list_products(self) -> list[CatalogProduct]:
        """전체 상품 목록 조회"""
        ...


@runtime_checkable
class IIdentityProvider(Protocol):
    """사용자/인증 인터페이스

    세션 관리는 외부에서 담당. 여기서는 사용자 조회와 삭제만 사용.
    """

    async def get_user(self, user_id: str) -> UserRecord | None:
        """사용자 조회

        Returns:
            사용자 정보 또는 None (없음)
        """
        ...

    async def list_users(self) -> list[UserRecord]:
        """전체 사용자 목록"""
        ...

    async def list_sellers(self) -> list[UserRecord]:
        """판매자(SELLER 역할) 목록"""
        ...

    async def remove_user(self, user_id: str) -> None:
        """사용자 삭제

        Raises:
            KeyError: 존재하지 않는 사용자
        """
        ...
