from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from comanda.domain.common.ids import CustomerId, TableId
from comanda.domain.order.entities import DeliveryService, PickupService, TableService
from comanda.domain.table.occupancy import (
    OccupancyPlan,
    plan_for_creation,
    plan_for_teardown,
    plan_for_update,
)

TABLE_1 = TableService(table_id=TableId("tbl_001"), people_count=2)
TABLE_2 = TableService(table_id=TableId("tbl_002"), people_count=4)
DELIVERY = DeliveryService(customer_id=CustomerId("cus_001"), delivery_address="Calle 10 #4-21")


def test_creation_occupies_only_for_table_service() -> None:
    assert plan_for_creation(TABLE_1) == OccupancyPlan(
        occupy_table_id=TableId("tbl_001"), people_count=2
    )
    assert plan_for_creation(DELIVERY).is_noop
    assert plan_for_creation(PickupService()).is_noop


def test_same_table_is_a_noop() -> None:
    assert plan_for_update(TABLE_1, TableService(table_id=TableId("tbl_001"), people_count=3)).is_noop
    assert plan_for_update(DELIVERY, PickupService()).is_noop


def test_moving_tables_releases_and_occupies() -> None:
    plan = plan_for_update(TABLE_1, TABLE_2)

    assert plan.release_table_id == "tbl_001"
    assert plan.occupy_table_id == "tbl_002"
    assert plan.people_count == 4


def test_leaving_and_joining_table_service() -> None:
    leaving = plan_for_update(TABLE_1, DELIVERY)
    joining = plan_for_update(DELIVERY, TABLE_2)

    assert leaving == OccupancyPlan(release_table_id=TableId("tbl_001"))
    assert joining == OccupancyPlan(occupy_table_id=TableId("tbl_002"), people_count=4)


def test_teardown_releases_the_current_table() -> None:
    assert plan_for_teardown(TABLE_1).release_table_id == "tbl_001"
    assert plan_for_teardown(DELIVERY).is_noop
