"""Decide which tables an order mutation frees and which it takes.

Planning is separate from execution so every check can run before the
first write.
"""

from __future__ import annotations

from dataclasses import dataclass

from comanda.domain.common.ids import TableId
from comanda.domain.order.entities import Fulfillment, TableService, table_id_of


@dataclass(frozen=True)
class OccupancyPlan:
    release_table_id: TableId | None = None
    occupy_table_id: TableId | None = None
    people_count: int | None = None

    @property
    def is_noop(self) -> bool:
        return self.release_table_id is None and self.occupy_table_id is None


def plan_for_creation(fulfillment: Fulfillment) -> OccupancyPlan:
    if not isinstance(fulfillment, TableService):
        return OccupancyPlan()
    return OccupancyPlan(
        occupy_table_id=fulfillment.table_id,
        people_count=fulfillment.people_count,
    )


def plan_for_update(previous: Fulfillment, target: Fulfillment) -> OccupancyPlan:
    previous_table = table_id_of(previous)
    target_table = table_id_of(target)
    if previous_table == target_table:
        return OccupancyPlan()

    people_count = target.people_count if isinstance(target, TableService) else None
    return OccupancyPlan(
        release_table_id=previous_table,
        occupy_table_id=target_table,
        people_count=people_count,
    )


def plan_for_teardown(fulfillment: Fulfillment) -> OccupancyPlan:
    return OccupancyPlan(release_table_id=table_id_of(fulfillment))
