from __future__ import annotations

import logging
from datetime import datetime

from comanda.application.metrics.order_lifecycle import record_table_transition
from comanda.application.ports.repositories import TableRepository
from comanda.domain.common.ids import CompanyId, OrderId, TableId, UserId
from comanda.domain.table.entities import Table
from comanda.domain.table.occupancy import OccupancyPlan

logger = logging.getLogger(__name__)


class TableNotFoundError(Exception):
    pass


class TableOccupancyCoordinator:
    """Runs an ``OccupancyPlan`` against the table store.

    ``check`` performs every validation and must be called before the order
    is written; ``apply`` only writes. The order write and the table writes
    are separate, so a failure in between can leave a table pointing at an
    order that no longer holds it.
    """

    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def check(self, plan: OccupancyPlan, company_id: CompanyId) -> Table | None:
        if plan.occupy_table_id is None:
            return None
        table = self._table_repository.get(table_id=plan.occupy_table_id, company_id=company_id)
        if table is None:
            raise TableNotFoundError(
                f"table not found for company_id={company_id}, table_id={plan.occupy_table_id}"
            )
        table.ensure_can_seat(plan.people_count)
        return table

    def apply(
        self,
        plan: OccupancyPlan,
        company_id: CompanyId,
        order_id: OrderId,
        occupied_by: UserId | None,
        now: datetime,
        target: Table | None,
    ) -> Table | None:
        released: Table | None = None
        if plan.release_table_id is not None:
            released = self.release(plan.release_table_id, company_id)
        if target is None:
            return released

        occupied = target.occupy(order_id=order_id, occupied_by=occupied_by, now=now)
        self._table_repository.save(occupied)
        record_table_transition(company_id=str(company_id), transition="occupy")
        logger.info(
            "table_occupied",
            extra={"table_id": str(occupied.table_id), "order_id": str(order_id)},
        )
        return occupied

    def release(self, table_id: TableId, company_id: CompanyId) -> Table | None:
        table = self._table_repository.get(table_id=table_id, company_id=company_id)
        if table is None:
            logger.warning(
                "table_release_skipped",
                extra={"table_id": str(table_id), "reason": "table not found"},
            )
            return None

        released = table.release()
        self._table_repository.save(released)
        record_table_transition(company_id=str(company_id), transition="release")
        logger.info(
            "table_released",
            extra={"table_id": str(table_id), "previous_order_id": table.current_order},
        )
        return released
