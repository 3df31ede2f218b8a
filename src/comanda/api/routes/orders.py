from __future__ import annotations

import os

from fastapi import APIRouter, Depends, Query, status

from comanda.api.dependencies import get_principal
from comanda.application.dto.requests import (
    AdvanceUnitRequest,
    CreateOrderRequest,
    UpdateOrderRequest,
)
from comanda.application.dto.responses import (
    OrderClosedResponse,
    OrderCreatedResponse,
    OrderDeletedResponse,
    OrderListResponse,
    OrderResponse,
)
from comanda.application.use_cases.advance_unit import AdvanceUnitStatus
from comanda.application.use_cases.close_order import CloseOrder
from comanda.application.use_cases.context import Principal
from comanda.application.use_cases.create_order import CreateOrder
from comanda.application.use_cases.get_order import GetOrder, ListOrders, OrderEnricher
from comanda.application.use_cases.product_lookup import CatalogProductLookup
from comanda.application.use_cases.update_order import UpdateOrder
from comanda.domain.common.ids import OrderId, ProductId
from comanda.infrastructure.cache.cache_store import RedisCacheStore
from comanda.infrastructure.db.repositories.catalog_repo import (
    SqlAlchemyCompanyRepository,
    SqlAlchemyProductRepository,
)
from comanda.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from comanda.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository

router = APIRouter()


def _product_cache_ttl_seconds() -> int:
    return int(os.getenv("PRODUCT_CACHE_TTL_SECONDS", "60"))


def _enricher() -> OrderEnricher:
    return OrderEnricher(
        table_repository=SqlAlchemyTableRepository(),
        company_repository=SqlAlchemyCompanyRepository(),
    )


def _product_lookup() -> CatalogProductLookup:
    return CatalogProductLookup(
        repository=SqlAlchemyProductRepository(),
        cache=RedisCacheStore(),
        ttl_seconds=_product_cache_ttl_seconds(),
    )


def _create_order_use_case() -> CreateOrder:
    return CreateOrder(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        product_lookup=_product_lookup(),
        enricher=_enricher(),
    )


def _update_order_use_case() -> UpdateOrder:
    return UpdateOrder(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        product_lookup=_product_lookup(),
        enricher=_enricher(),
    )


def _close_order_use_case() -> CloseOrder:
    return CloseOrder(
        order_repository=SqlAlchemyOrderRepository(),
        table_repository=SqlAlchemyTableRepository(),
        enricher=_enricher(),
    )


def _get_order_use_case() -> GetOrder:
    return GetOrder(order_repository=SqlAlchemyOrderRepository(), enricher=_enricher())


def _list_orders_use_case() -> ListOrders:
    return ListOrders(order_repository=SqlAlchemyOrderRepository(), enricher=_enricher())


def _advance_unit_use_case() -> AdvanceUnitStatus:
    return AdvanceUnitStatus(order_repository=SqlAlchemyOrderRepository(), enricher=_enricher())


@router.post(
    "/orders",
    response_model=OrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    request_dto: CreateOrderRequest,
    principal: Principal = Depends(get_principal),
) -> OrderCreatedResponse:
    return _create_order_use_case().execute(principal=principal, request_dto=request_dto)


@router.get("/orders", response_model=OrderListResponse)
def list_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    order_type: str | None = Query(default=None, alias="orderType"),
    principal: Principal = Depends(get_principal),
) -> OrderListResponse:
    return _list_orders_use_case().execute(
        company_id=principal.company_id,
        status=status_filter,
        order_type=order_type,
    )


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, principal: Principal = Depends(get_principal)) -> OrderResponse:
    return _get_order_use_case().execute(
        company_id=principal.company_id,
        order_id=OrderId(order_id),
    )


@router.put("/orders/{order_id}", response_model=OrderResponse | OrderDeletedResponse)
def update_order(
    order_id: str,
    request_dto: UpdateOrderRequest,
    principal: Principal = Depends(get_principal),
) -> OrderResponse | OrderDeletedResponse:
    return _update_order_use_case().execute(
        principal=principal,
        order_id=OrderId(order_id),
        request_dto=request_dto,
    )


@router.patch("/orders/{order_id}/close", response_model=OrderClosedResponse)
def close_order(
    order_id: str,
    principal: Principal = Depends(get_principal),
) -> OrderClosedResponse:
    return _close_order_use_case().execute(
        company_id=principal.company_id,
        order_id=OrderId(order_id),
    )


@router.patch(
    "/orders/{order_id}/lines/{product_id}/units/{position}",
    response_model=OrderResponse,
)
def advance_unit(
    order_id: str,
    product_id: str,
    position: int,
    request_dto: AdvanceUnitRequest,
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    return _advance_unit_use_case().execute(
        company_id=principal.company_id,
        order_id=OrderId(order_id),
        product_id=ProductId(product_id),
        position=position,
        request_dto=request_dto,
    )
