from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import BaseModel, ValidationError

from comanda.application.ports.cache import CacheStore
from comanda.application.ports.repositories import ProductRepository
from comanda.domain.common.ids import CompanyId, ProductId
from comanda.domain.order.reconciliation import ProductLookup
from comanda.domain.product.entities import Product

logger = logging.getLogger(__name__)


class CachedProduct(BaseModel):
    productId: str
    companyId: str
    name: str
    price: Decimal
    category: str
    description: str
    isActive: bool


def product_cache_key(company_id: CompanyId, product_id: ProductId) -> str:
    return f"product:{company_id}:{product_id}"


class CatalogProductLookup:
    """Read-through product lookup; cache trouble never blocks an order."""

    def __init__(
        self,
        repository: ProductRepository,
        cache: CacheStore,
        ttl_seconds: int = 60,
    ) -> None:
        self._repository = repository
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def for_company(self, company_id: CompanyId) -> ProductLookup:
        def lookup(product_id: ProductId) -> Product | None:
            return self.get(company_id, product_id)

        return lookup

    def get(self, company_id: CompanyId, product_id: ProductId) -> Product | None:
        key = product_cache_key(company_id, product_id)
        payload = self._cache_get(key)
        if payload:
            try:
                return _from_cached(CachedProduct.model_validate_json(payload))
            except ValidationError:
                logger.warning("product_cache_payload_invalid", extra={"cache_key": key})

        product = self._repository.get(product_id=product_id, company_id=company_id)
        if product is not None:
            self._cache_set(key, _to_cached(product).model_dump_json())
        return product

    def invalidate(self, company_id: CompanyId, product_ids: list[ProductId]) -> int:
        """Drop cached entries after catalog writes; errors reach the caller."""
        keys = [product_cache_key(company_id, product_id) for product_id in product_ids]
        return self._cache.delete(*keys)

    def _cache_get(self, key: str) -> str | None:
        try:
            return self._cache.get(key)
        except Exception:
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.set(key, value, ttl_seconds=self._ttl_seconds)
        except Exception:
            return


def _to_cached(product: Product) -> CachedProduct:
    return CachedProduct(
        productId=str(product.product_id),
        companyId=str(product.company_id),
        name=product.name,
        price=product.price,
        category=product.category,
        description=product.description,
        isActive=product.is_active,
    )


def _from_cached(cached: CachedProduct) -> Product:
    return Product(
        product_id=ProductId(cached.productId),
        company_id=CompanyId(cached.companyId),
        name=cached.name,
        price=cached.price,
        category=cached.category,
        description=cached.description,
        is_active=cached.isActive,
    )
