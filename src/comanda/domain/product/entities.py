from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from comanda.domain.common.ids import CompanyId, ProductId


@dataclass(frozen=True)
class ProductSnapshot:
    name: str
    price: Decimal
    category: str
    description: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    company_id: CompanyId
    name: str
    price: Decimal
    category: str
    description: str
    is_active: bool = True

    def snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(
            name=self.name,
            price=self.price,
            category=self.category,
            description=self.description,
        )
