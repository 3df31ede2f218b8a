from __future__ import annotations

import logging
from datetime import datetime, timezone

from comanda.application.dto.requests import UpdateOrderRequest
from comanda.application.dto.responses import OrderDeletedResponse, OrderResponse
from comanda.application.metrics.order_lifecycle import (
    record_order_auto_deleted,
    record_order_updated,
)
from comanda.application.ports.repositories import OrderRepository, TableRepository
from comanda.application.use_cases.context import Principal
from comanda.application.use_cases.create_order import (
    ProductNotFoundError,
    build_fulfillment,
    to_requested_lines,
    validation_error_from,
)
from comanda.application.use_cases.get_order import OrderEnricher, OrderNotFoundError
from comanda.application.use_cases.product_lookup import CatalogProductLookup
from comanda.application.use_cases.table_occupancy import TableOccupancyCoordinator
from comanda.domain.common.ids import OrderId
from comanda.domain.order.entities import Order, OrderStatus, OrderTransitionError
from comanda.domain.order.lifecycle import apply_update, ensure_status_transition
from comanda.domain.order.reconciliation import (
    LineReconciliationError,
    ProductUnavailableError,
    reconcile_lines,
)
from comanda.domain.table.occupancy import plan_for_teardown, plan_for_update

logger = logging.getLogger(__name__)


class InvalidOrderTransitionError(Exception):
    pass


class UpdateOrder:
    """Reconcile an order against the full desired line list.

    An empty ``lines`` list deletes the order and frees its table. Otherwise
    every check runs before the order is written, and table moves follow the
    order write.
    """

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

    def execute(
        self,
        principal: Principal,
        order_id: OrderId,
        request_dto: UpdateOrderRequest,
    ) -> OrderResponse | OrderDeletedResponse:
        order = self._order_repository.get(order_id=order_id, company_id=principal.company_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        try:
            status = ensure_status_transition(order.status, request_dto.status)
        except OrderTransitionError as exc:
            raise InvalidOrderTransitionError(str(exc)) from exc

        if not request_dto.lines:
            return self._delete(order)

        try:
            reconciliation = reconcile_lines(
                current=order.lines,
                requested=to_requested_lines(request_dto.lines),
                lookup_product=self._product_lookup.for_company(principal.company_id),
            )
        except LineReconciliationError as exc:
            logger.info(
                "order_update_rejected",
                extra={"order_id": str(order_id), "reason": "line_violations"},
            )
            raise validation_error_from(exc) from exc
        except ProductUnavailableError as exc:
            raise ProductNotFoundError(str(exc)) from exc

        fulfillment = build_fulfillment(request_dto, current=order.fulfillment)
        plan = plan_for_update(order.fulfillment, fulfillment)
        if order.status == OrderStatus.CLOSED and not plan.is_noop:
            # Closing released the table; a closed order never takes or frees one again.
            raise InvalidOrderTransitionError(
                f"order {order_id} is closed; its table assignment cannot change"
            )
        target_table = self._occupancy.check(plan, principal.company_id)

        now = datetime.now(timezone.utc)
        updated = apply_update(
            order,
            reconciliation=reconciliation,
            fulfillment=fulfillment,
            status=status,
            edited_by=principal.user_id,
            now=now,
        )
        self._order_repository.update(updated)
        if not plan.is_noop:
            self._occupancy.apply(
                plan,
                company_id=principal.company_id,
                order_id=updated.order_id,
                occupied_by=principal.user_id,
                now=now,
                target=target_table,
            )

        record_order_updated(str(principal.company_id), reconciliation.changes)
        logger.info(
            "order_updated",
            extra={
                "order_id": str(updated.order_id),
                "company_id": str(updated.company_id),
                "line_count": len(updated.lines),
            },
        )
        return self._enricher.to_response(updated)

    def _delete(self, order: Order) -> OrderDeletedResponse:
        self._order_repository.delete(order_id=order.order_id, company_id=order.company_id)
        plan = plan_for_teardown(order.fulfillment)
        if plan.release_table_id is not None:
            self._occupancy.release(plan.release_table_id, order.company_id)

        record_order_auto_deleted(str(order.company_id))
        logger.info(
            "order_auto_deleted",
            extra={"order_id": str(order.order_id), "company_id": str(order.company_id)},
        )
        return OrderDeletedResponse(
            message="Order deleted because it has no products",
            orderId=str(order.order_id),
        )
