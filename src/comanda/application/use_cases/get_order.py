from __future__ import annotations

from comanda.application.dto.responses import OrderListResponse, OrderResponse
from comanda.application.mappers.order_mapper import to_order_response
from comanda.application.ports.repositories import (
    CompanyRepository,
    OrderRepository,
    TableRepository,
)
from comanda.domain.common.ids import CompanyId, OrderId
from comanda.domain.order.entities import Order, OrderStatus, OrderType
from comanda.domain.table.entities import Table


class OrderNotFoundError(Exception):
    pass


class InvalidOrderFilterError(Exception):
    pass


class OrderEnricher:
    def __init__(
        self,
        table_repository: TableRepository,
        company_repository: CompanyRepository,
    ) -> None:
        self._table_repository = table_repository
        self._company_repository = company_repository

    def to_response(self, order: Order, table: Table | None = None) -> OrderResponse:
        if table is None and order.table_id is not None:
            table = self._table_repository.get(
                table_id=order.table_id,
                company_id=order.company_id,
            )
        company_name = self._company_repository.get_name(order.company_id)
        return to_order_response(order, table=table, company_name=company_name)


class GetOrder:
    def __init__(self, order_repository: OrderRepository, enricher: OrderEnricher) -> None:
        self._order_repository = order_repository
        self._enricher = enricher

    def execute(self, company_id: CompanyId, order_id: OrderId) -> OrderResponse:
        order = self._order_repository.get(order_id=order_id, company_id=company_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return self._enricher.to_response(order)


class ListOrders:
    def __init__(self, order_repository: OrderRepository, enricher: OrderEnricher) -> None:
        self._order_repository = order_repository
        self._enricher = enricher

    def execute(
        self,
        company_id: CompanyId,
        status: str | None = None,
        order_type: str | None = None,
    ) -> OrderListResponse:
        status_filter = _parse_filter(OrderStatus, status, "status")
        type_filter = _parse_filter(OrderType, order_type, "orderType")
        orders = self._order_repository.list_for_company(
            company_id=company_id,
            status=status_filter,
            order_type=type_filter,
        )
        return OrderListResponse(
            orders=[self._enricher.to_response(order) for order in orders],
            count=len(orders),
        )


def _parse_filter(enum_cls, raw_value: str | None, name: str):
    if raw_value is None or raw_value == "":
        return None
    try:
        return enum_cls(raw_value)
    except ValueError as exc:
        raise InvalidOrderFilterError(f"invalid {name} filter: {raw_value}") from exc
