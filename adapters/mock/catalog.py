"""
Mock 상품 카탈로그

테스트/교육 모드용 인메모리 카탈로그.
ICatalog Protocol 준수.
"""

from adapters.models import CatalogProduct


class MockCatalog:
    """Mock 상품 카탈로그

    ICatalog Protocol 구현.

    사용 예시:
    ```python
    catalog = MockCatalog([
        CatalogProduct("SKU-1", "Vestido Floral", Decimal("100"), Decimal("50"), 3),
    ])
    product = await catalog.get_product("SKU-1")
    ```
    """

    def __init__(self, products: list[CatalogProduct] | None = None):
        self._products: dict[str, CatalogProduct] = {}
        for product in products or []:
            self.add_product(product)

    def add_product(self, product: CatalogProduct) -> None:
        """상품 추가 (테스트 준비용)"""
        self._products[product.product_ref] = product

    async def get_product(self, product_ref: str) -> CatalogProduct | None:
        return self._products.get(product_ref)

    async def list_products(self) -> list[CatalogProduct]:
        return list(self._products.values())
