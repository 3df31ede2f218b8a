from __future__ import annotations

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from comanda.domain.common.ids import CompanyId, CustomerId, OrderId, ProductId, TableId
from comanda.domain.order.entities import (
    DeliveryService,
    Order,
    OrderLine,
    OrderStatus,
    OrderType,
    PickupService,
    TableService,
    UnitStatus,
    UnitStatusEntry,
    create_received_order,
)
from comanda.domain.product.entities import ProductSnapshot

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SNAPSHOT = ProductSnapshot(name="Ajiaco", price=Decimal("15000"), category="mains", description="")


def _line(quantity: int = 2, product_id: str = "prd_001") -> OrderLine:
    return OrderLine(
        product_id=ProductId(product_id),
        product_snapshot=SNAPSHOT,
        requested_quantity=quantity,
        message="",
        unit_statuses=[
            UnitStatusEntry(position=position, status=UnitStatus.PENDING)
            for position in range(1, quantity + 1)
        ],
    )


def test_order_line_quantity_must_be_gte_one() -> None:
    with pytest.raises(ValueError):
        OrderLine(
            product_id=ProductId("prd_001"),
            product_snapshot=SNAPSHOT,
            requested_quantity=0,
            message="",
            unit_statuses=[],
        )


def test_order_line_needs_one_unit_per_requested_quantity() -> None:
    with pytest.raises(ValueError):
        OrderLine(
            product_id=ProductId("prd_001"),
            product_snapshot=SNAPSHOT,
            requested_quantity=2,
            message="",
            unit_statuses=[UnitStatusEntry(position=1, status=UnitStatus.PENDING)],
        )


def test_order_line_positions_must_be_contiguous() -> None:
    with pytest.raises(ValueError):
        OrderLine(
            product_id=ProductId("prd_001"),
            product_snapshot=SNAPSHOT,
            requested_quantity=2,
            message="",
            unit_statuses=[
                UnitStatusEntry(position=1, status=UnitStatus.PENDING),
                UnitStatusEntry(position=3, status=UnitStatus.PENDING),
            ],
        )


def test_order_total_must_match_lines() -> None:
    with pytest.raises(ValueError):
        Order(
            order_id=OrderId("ord_001"),
            company_id=CompanyId("cmp_001"),
            fulfillment=TableService(table_id=TableId("tbl_001")),
            status=OrderStatus.RECEIVED,
            lines=[_line()],
            item_count=1,
            total=Decimal("1.00"),
            created_at=NOW,
        )


def test_order_cannot_be_empty() -> None:
    with pytest.raises(ValueError):
        create_received_order(
            order_id=OrderId("ord_001"),
            company_id=CompanyId("cmp_001"),
            fulfillment=PickupService(),
            lines=[],
            created_by=None,
            now=NOW,
        )


def test_order_lines_must_reference_distinct_products() -> None:
    with pytest.raises(ValueError):
        create_received_order(
            order_id=OrderId("ord_001"),
            company_id=CompanyId("cmp_001"),
            fulfillment=PickupService(),
            lines=[_line(), _line(quantity=1)],
            created_by=None,
            now=NOW,
        )


def test_closed_order_requires_closed_at() -> None:
    with pytest.raises(ValueError):
        Order(
            order_id=OrderId("ord_001"),
            company_id=CompanyId("cmp_001"),
            fulfillment=PickupService(),
            status=OrderStatus.CLOSED,
            lines=[_line()],
            item_count=1,
            total=Decimal("30000.00"),
            created_at=NOW,
        )


def test_create_received_order_computes_totals() -> None:
    order = create_received_order(
        order_id=OrderId("ord_001"),
        company_id=CompanyId("cmp_001"),
        fulfillment=DeliveryService(customer_id=CustomerId("cus_001"), delivery_address="Calle 1"),
        lines=[_line(quantity=2), _line(quantity=1, product_id="prd_002")],
        created_by=None,
        now=NOW,
    )

    assert order.status == OrderStatus.RECEIVED
    assert order.total == Decimal("45000.00")
    assert order.item_count == 2
    assert order.order_type == OrderType.DELIVERY
    assert order.table_id is None
    assert order.line_for(ProductId("prd_002")) is not None


def test_table_service_exposes_table_id() -> None:
    order = create_received_order(
        order_id=OrderId("ord_001"),
        company_id=CompanyId("cmp_001"),
        fulfillment=TableService(table_id=TableId("tbl_007"), people_count=3),
        lines=[_line()],
        created_by=None,
        now=NOW,
    )

    assert order.order_type == OrderType.TABLE
    assert order.table_id == TableId("tbl_007")


def test_people_count_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TableService(table_id=TableId("tbl_001"), people_count=0)
