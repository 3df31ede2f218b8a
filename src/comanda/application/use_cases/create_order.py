from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from comanda.application.dto.requests import (
    CreateOrderRequest,
    OrderFulfillmentRequest,
    OrderLineRequest,
)
from comanda.application.dto.responses import OrderCreatedResponse
from comanda.application.metrics.order_lifecycle import (
    record_order_created,
    record_reconciliation_rejected,
)
from comanda.application.ports.repositories import OrderRepository, TableRepository
from comanda.application.use_cases.context import Principal
from comanda.application.use_cases.get_order import OrderEnricher
from comanda.application.use_cases.product_lookup import CatalogProductLookup
from comanda.application.use_cases.table_occupancy import TableOccupancyCoordinator
from comanda.domain.common.ids import CustomerId, OrderId, ProductId, TableId
from comanda.domain.order.entities import (
    DeliveryService,
    Fulfillment,
    OrderType,
    PickupService,
    TableService,
    create_received_order,
)
from comanda.domain.order.reconciliation import (
    LineReconciliationError,
    ProductUnavailableError,
    RequestedLine,
    reconcile_lines,
)
from comanda.domain.table.occupancy import plan_for_creation

logger = logging.getLogger(__name__)


class InvalidOrderError(Exception):
    pass


class EmptyOrderError(Exception):
    pass


class ProductNotFoundError(Exception):
    pass


class OrderValidationError(Exception):
    def __init__(self, message: str, errors: list[dict[str, str]]) -> None:
        super().__init__(message)
        self.errors = errors
        self.details = {"errors": errors}


def build_fulfillment(
    request_dto: OrderFulfillmentRequest,
    current: Fulfillment | None = None,
) -> Fulfillment:
    """Turn the flat request fields into exactly one fulfillment variant.

    Fields that belong to other order types are dropped. On updates, fields
    the caller leaves out are taken from the current fulfillment when the
    order type does not change.
    """
    order_type = request_dto.order_type
    if order_type is None:
        if current is None:
            raise InvalidOrderError("orderType is required")
        order_type = current.order_type
    same_type = current if current is not None and current.order_type == order_type else None

    if order_type == OrderType.TABLE:
        table_id = request_dto.table_id or (same_type.table_id if same_type else None)
        if not table_id:
            raise InvalidOrderError("tableId is required for table orders")
        people_count = request_dto.people_count
        if people_count is None and same_type is not None:
            people_count = same_type.people_count
        return TableService(table_id=TableId(table_id), people_count=people_count)

    if order_type == OrderType.DELIVERY:
        customer_id = request_dto.customer_id or (same_type.customer_id if same_type else None)
        if not customer_id:
            raise InvalidOrderError("customerId is required for delivery orders")
        address = request_dto.delivery_address
        if address is None and same_type is not None:
            address = same_type.delivery_address
        return DeliveryService(customer_id=CustomerId(customer_id), delivery_address=address)

    customer_id = request_dto.customer_id
    pickup_name = request_dto.pickup_name
    if same_type is not None:
        customer_id = customer_id or same_type.customer_id
        pickup_name = pickup_name if pickup_name is not None else same_type.pickup_name
    return PickupService(
        customer_id=CustomerId(customer_id) if customer_id else None,
        pickup_name=pickup_name,
    )


def to_requested_lines(lines: list[OrderLineRequest]) -> list[RequestedLine]:
    return [
        RequestedLine(
            product_id=ProductId(line.product_id),
            requested_quantity=line.requested_quantity,
            message=line.message,
            unit_statuses=(
                [unit.status for unit in line.unit_statuses]
                if line.unit_statuses is not None
                else None
            ),
        )
        for line in lines
    ]


def validation_error_from(exc: LineReconciliationError) -> OrderValidationError:
    record_reconciliation_rejected(exc.violations)
    return OrderValidationError(
        "order lines failed validation",
        errors=[
            {
                "productId": str(violation.product_id),
                "productName": violation.product_name,
                "reason": violation.reason.value,
                "message": violation.message,
            }
            for violation in exc.violations
        ],
    )


class CreateOrder:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        product_lookup: CatalogProductLookup,
        enricher: OrderEnricher,
    ) -> None:
        self._order_repository = order_repository
        self._occupancy = TableOccupancyCoordinator(table_repository)
        self._product_lookup = product_lookup
        self._enricher = enricher

    def execute(self, principal: Principal, request_dto: CreateOrderRequest) -> OrderCreatedResponse:
        fulfillment = build_fulfillment(request_dto)
        if not request_dto.lines:
            raise EmptyOrderError("order must contain at least one product")

        try:
            reconciliation = reconcile_lines(
                current=[],
                requested=to_requested_lines(request_dto.lines),
                lookup_product=self._product_lookup.for_company(principal.company_id),
            )
        except LineReconciliationError as exc:
            raise validation_error_from(exc) from exc
        except ProductUnavailableError as exc:
            raise ProductNotFoundError(str(exc)) from exc

        plan = plan_for_creation(fulfillment)
        target_table = self._occupancy.check(plan, principal.company_id)

        now = datetime.now(timezone.utc)
        order = create_received_order(
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            company_id=principal.company_id,
            fulfillment=fulfillment,
            lines=reconciliation.lines,
            created_by=principal.user_id,
            now=now,
        )
        self._order_repository.add(order)
        table = self._occupancy.apply(
            plan,
            company_id=principal.company_id,
            order_id=order.order_id,
            occupied_by=principal.user_id,
            now=now,
            target=target_table,
        )

        record_order_created(order)
        logger.info(
            "order_created",
            extra={
                "order_id": str(order.order_id),
                "company_id": str(order.company_id),
                "order_type": order.order_type.value,
            },
        )
        return OrderCreatedResponse(
            message="Order created successfully",
            orderId=str(order.order_id),
            order=self._enricher.to_response(order, table=table),
        )
