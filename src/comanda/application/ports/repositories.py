from __future__ import annotations

from typing import Protocol

from comanda.domain.common.ids import CompanyId, OrderId, ProductId, TableId
from comanda.domain.order.entities import Order, OrderStatus, OrderType
from comanda.domain.product.entities import Product
from comanda.domain.table.entities import Table


class ProductRepository(Protocol):
    def get(self, product_id: ProductId, company_id: CompanyId) -> Product | None: ...


class CompanyRepository(Protocol):
    def get_name(self, company_id: CompanyId) -> str | None: ...


class TableRepository(Protocol):
    def get(self, table_id: TableId, company_id: CompanyId) -> Table | None: ...

    def save(self, table: Table) -> None: ...

    def release_all(self, company_id: CompanyId | None) -> int: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId, company_id: CompanyId) -> Order | None: ...

    def update(self, order: Order) -> None: ...

    def delete(self, order_id: OrderId, company_id: CompanyId) -> bool: ...

    def list_for_company(
        self,
        company_id: CompanyId,
        status: OrderStatus | None,
        order_type: OrderType | None,
    ) -> list[Order]: ...
