from __future__ import annotations

import logging
from datetime import datetime, timezone

from comanda.application.dto.responses import OrderClosedResponse
from comanda.application.metrics.order_lifecycle import record_order_closed
from comanda.application.ports.repositories import OrderRepository, TableRepository
from comanda.application.use_cases.get_order import OrderEnricher, OrderNotFoundError
from comanda.application.use_cases.table_occupancy import TableOccupancyCoordinator
from comanda.domain.common.ids import CompanyId, OrderId
from comanda.domain.order.lifecycle import close_order
from comanda.domain.table.occupancy import plan_for_teardown

logger = logging.getLogger(__name__)


class CloseOrder:
    def __init__(
        self,
        order_repository: OrderRepository,
        table_repository: TableRepository,
        enricher: OrderEnricher,
    ) -> None:
        self._order_repository = order_repository
        self._occupancy = TableOccupancyCoordinator(table_repository)
        self._enricher = enricher

    def execute(self, company_id: CompanyId, order_id: OrderId) -> OrderClosedResponse:
        order = self._order_repository.get(order_id=order_id, company_id=company_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")

        closed = close_order(order, now=datetime.now(timezone.utc))
        self._order_repository.update(closed)

        table = None
        plan = plan_for_teardown(closed.fulfillment)
        if plan.release_table_id is not None:
            table = self._occupancy.release(plan.release_table_id, company_id)

        record_order_closed(str(company_id))
        logger.info(
            "order_closed",
            extra={
                "order_id": str(closed.order_id),
                "company_id": str(company_id),
                "table_id": str(plan.release_table_id) if plan.release_table_id else None,
            },
        )
        return OrderClosedResponse(
            message="Order closed successfully",
            order=self._enricher.to_response(closed, table=table),
            tableStatus=table.status.value if table is not None else None,
        )
