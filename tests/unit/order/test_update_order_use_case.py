from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from comanda.application.dto.requests import CreateOrderRequest, UpdateOrderRequest
from comanda.application.dto.responses import OrderDeletedResponse, OrderResponse
from comanda.application.use_cases.close_order import CloseOrder
from comanda.application.use_cases.context import Principal
from comanda.application.use_cases.create_order import (
    CreateOrder,
    OrderValidationError,
    ProductNotFoundError,
)
from comanda.application.use_cases.get_order import OrderNotFoundError
from comanda.application.use_cases.update_order import InvalidOrderTransitionError, UpdateOrder
from comanda.domain.common.ids import CustomerId, OrderId, TableId
from comanda.domain.order.entities import (
    DeliveryService,
    OrderStatus,
    UnitStatus,
)
from comanda.domain.table.entities import (
    TableCapacityExceededError,
    TableNotAvailableError,
    TableStatus,
)
from order_fakes import (
    OTHER_COMPANY_ID,
    USER_ID,
    FakeOrderRepository,
    FakeTableRepository,
    build_line,
    build_order,
    build_product,
    build_table,
    enricher,
    principal,
    product_lookup,
)

P = UnitStatus.PENDING
IP = UnitStatus.IN_PREPARATION
S = UnitStatus.SERVED

LOMO = build_product("prd_001", "15000", name="Lomo Saltado")
LIMONADA = build_product("prd_002", "8000", name="Limonada")
PRODUCTS = [LOMO, LIMONADA]
ORDER_ID = OrderId("ord_001")


def _occupied(table_id: str = "tbl_001", number: int = 1):
    return build_table(
        table_id=table_id,
        number=number,
        status=TableStatus.OCCUPIED,
        current_order=str(ORDER_ID),
    )


def _use_case(orders, tables) -> tuple[UpdateOrder, FakeOrderRepository, FakeTableRepository]:
    order_repository = FakeOrderRepository(orders)
    table_repository = FakeTableRepository(tables)
    use_case = UpdateOrder(
        order_repository=order_repository,
        table_repository=table_repository,
        product_lookup=product_lookup(PRODUCTS),
        enricher=enricher(table_repository),
    )
    return use_case, order_repository, table_repository


def _request(lines, **fields) -> UpdateOrderRequest:
    return UpdateOrderRequest.model_validate({"lines": lines, **fields})


def test_empty_line_list_deletes_order_and_releases_table() -> None:
    order_repository = FakeOrderRepository()
    table_repository = FakeTableRepository([build_table()])
    create = CreateOrder(
        order_repository=order_repository,
        table_repository=table_repository,
        product_lookup=product_lookup(PRODUCTS),
        enricher=enricher(table_repository),
    )
    update = UpdateOrder(
        order_repository=order_repository,
        table_repository=table_repository,
        product_lookup=product_lookup(PRODUCTS),
        enricher=enricher(table_repository),
    )

    created = create.execute(
        principal(),
        CreateOrderRequest.model_validate(
            {
                "orderType": "table",
                "tableId": "tbl_001",
                "lines": [{"productId": "prd_001", "requestedQuantity": 2}],
            }
        ),
    )
    assert table_repository.tables[TableId("tbl_001")].status == TableStatus.OCCUPIED

    response = update.execute(principal(), OrderId(created.orderId), _request([]))

    assert isinstance(response, OrderDeletedResponse)
    assert response.deleted is True
    assert response.orderId == created.orderId
    assert order_repository.orders == {}
    table = table_repository.tables[TableId("tbl_001")]
    assert table.status == TableStatus.AVAILABLE
    assert table.current_order is None


def test_update_grows_and_adds_lines() -> None:
    order = build_order([build_line(LOMO, [S, P])])
    use_case, order_repository, _ = _use_case([order], [_occupied()])

    response = use_case.execute(
        principal(),
        ORDER_ID,
        _request(
            [
                {"productId": "prd_001", "requestedQuantity": 4},
                {"productId": "prd_002", "requestedQuantity": 1, "message": "sin hielo"},
            ]
        ),
    )

    assert isinstance(response, OrderResponse)
    assert [unit.status for unit in response.lines[0].unitStatuses] == [
        "served",
        "pending",
        "pending",
        "pending",
    ]
    assert response.total == 68000.0
    assert response.itemCount == 2
    assert response.updatedAt is not None
    change_types = [change.type for change in response.editHistory[0].changes]
    assert change_types == ["QUANTITY_INCREASED", "PRODUCT_ADDED"]
    stored = order_repository.orders[ORDER_ID]
    assert all(len(line.unit_statuses) == line.requested_quantity for line in stored.lines)


def test_update_rejects_violations_without_writing() -> None:
    order = build_order([build_line(LOMO, [P, IP]), build_line(LIMONADA, [S, IP, P])])
    use_case, order_repository, table_repository = _use_case([order], [_occupied()])

    with pytest.raises(OrderValidationError) as exc_info:
        use_case.execute(
            principal(),
            ORDER_ID,
            _request([{"productId": "prd_002", "requestedQuantity": 1}]),
        )

    errors = exc_info.value.details["errors"]
    assert {error["productName"] for error in errors} == {"Lomo Saltado", "Limonada"}
    assert {error["reason"] for error in errors} == {
        "NON_PENDING_UNITS",
        "INSUFFICIENT_PENDING_UNITS",
    }
    assert order_repository.writes == 0
    assert order_repository.orders[ORDER_ID] == order
    assert table_repository.saved == []


def test_update_unknown_order() -> None:
    use_case, _, _ = _use_case([], [])

    with pytest.raises(OrderNotFoundError):
        use_case.execute(principal(), ORDER_ID, _request([]))


def test_update_unknown_product_after_validation() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, order_repository, _ = _use_case([order], [_occupied()])

    with pytest.raises(ProductNotFoundError):
        use_case.execute(
            principal(),
            ORDER_ID,
            _request(
                [
                    {"productId": "prd_001", "requestedQuantity": 1},
                    {"productId": "prd_404", "requestedQuantity": 1},
                ]
            ),
        )

    assert order_repository.writes == 0


def test_moving_to_another_table_releases_the_previous_one() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, _, table_repository = _use_case(
        [order],
        [_occupied(), build_table(table_id="tbl_002", number=2)],
    )

    response = use_case.execute(
        principal(),
        ORDER_ID,
        _request([{"productId": "prd_001", "requestedQuantity": 1}], tableId="tbl_002"),
    )

    assert response.tableId == "tbl_002"
    assert response.table is not None
    assert response.table.status == "occupied"
    assert table_repository.tables[TableId("tbl_001")].status == TableStatus.AVAILABLE
    moved_to = table_repository.tables[TableId("tbl_002")]
    assert moved_to.status == TableStatus.OCCUPIED
    assert moved_to.current_order == ORDER_ID
    assert response.editHistory[0].changes[0].type == "TABLE_CHANGED"


def test_moving_to_an_occupied_table_fails_before_any_write() -> None:
    order = build_order([build_line(LOMO, [P])])
    busy = build_table(
        table_id="tbl_002",
        number=2,
        status=TableStatus.OCCUPIED,
        current_order="ord_other",
    )
    use_case, order_repository, table_repository = _use_case([order], [_occupied(), busy])

    with pytest.raises(TableNotAvailableError):
        use_case.execute(
            principal(),
            ORDER_ID,
            _request([{"productId": "prd_001", "requestedQuantity": 1}], tableId="tbl_002"),
        )

    assert order_repository.writes == 0
    assert table_repository.tables[TableId("tbl_001")].status == TableStatus.OCCUPIED


def test_switching_to_delivery_releases_the_table() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, order_repository, table_repository = _use_case([order], [_occupied()])

    response = use_case.execute(
        principal(),
        ORDER_ID,
        _request(
            [{"productId": "prd_001", "requestedQuantity": 1}],
            orderType="delivery",
            customerId="cus_001",
        ),
    )

    assert response.orderType == "delivery"
    assert response.tableId is None
    assert response.table is None
    assert table_repository.tables[TableId("tbl_001")].status == TableStatus.AVAILABLE
    assert order_repository.orders[ORDER_ID].fulfillment == DeliveryService(
        customer_id=CustomerId("cus_001")
    )


def test_omitted_fulfillment_fields_keep_current_values() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, _, table_repository = _use_case([order], [_occupied()])

    response = use_case.execute(
        principal(),
        ORDER_ID,
        _request([{"productId": "prd_001", "requestedQuantity": 2}]),
    )

    assert response.orderType == "table"
    assert response.tableId == "tbl_001"
    assert response.peopleCount == 2
    assert table_repository.saved == []


def test_update_can_move_status_forward() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, order_repository, _ = _use_case([order], [_occupied()])

    use_case.execute(
        principal(),
        ORDER_ID,
        _request([{"productId": "prd_001", "requestedQuantity": 1}], status="in_progress"),
    )

    assert order_repository.orders[ORDER_ID].status == OrderStatus.IN_PROGRESS


def test_update_cannot_close_orders() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, order_repository, _ = _use_case([order], [_occupied()])

    with pytest.raises(InvalidOrderTransitionError):
        use_case.execute(
            principal(),
            ORDER_ID,
            _request([{"productId": "prd_001", "requestedQuantity": 1}], status="closed"),
        )

    assert order_repository.writes == 0


def test_orders_of_other_companies_are_invisible() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, _, _ = _use_case([order], [_occupied()])
    with pytest.raises(OrderNotFoundError):
        use_case.execute(
            Principal(company_id=OTHER_COMPANY_ID, user_id=USER_ID),
            ORDER_ID,
            _request([]),
        )


def _delivery_order():
    return build_order(
        [build_line(LOMO, [P])],
        fulfillment=DeliveryService(customer_id=CustomerId("cus_001")),
    )


def test_switching_to_table_service_occupies_the_table() -> None:
    use_case, _, table_repository = _use_case(
        [_delivery_order()],
        [build_table(table_id="tbl_002", number=2, capacity=4)],
    )

    response = use_case.execute(
        principal(),
        ORDER_ID,
        _request(
            [{"productId": "prd_001", "requestedQuantity": 1}],
            orderType="table",
            tableId="tbl_002",
            peopleCount=3,
        ),
    )

    assert response.orderType == "table"
    assert response.customerId is None
    assert response.table is not None
    assert response.table.status == "occupied"
    occupied = table_repository.tables[TableId("tbl_002")]
    assert occupied.status == TableStatus.OCCUPIED
    assert occupied.current_order == ORDER_ID
    assert occupied.occupied_by == USER_ID
    assert [change.type for change in response.editHistory[0].changes] == ["ORDER_TYPE_CHANGED"]


@pytest.mark.parametrize(
    ("table", "people_count", "error"),
    [
        (build_table(table_id="tbl_002", number=2, capacity=2), 5, TableCapacityExceededError),
        (
            build_table(table_id="tbl_002", number=2, status=TableStatus.CLEANING),
            2,
            TableNotAvailableError,
        ),
    ],
)
def test_switching_to_table_service_checks_the_table_first(table, people_count, error) -> None:
    use_case, order_repository, table_repository = _use_case([_delivery_order()], [table])

    with pytest.raises(error):
        use_case.execute(
            principal(),
            ORDER_ID,
            _request(
                [{"productId": "prd_001", "requestedQuantity": 1}],
                orderType="table",
                tableId="tbl_002",
                peopleCount=people_count,
            ),
        )

    assert order_repository.writes == 0
    assert table_repository.saved == []


def test_closed_order_cannot_take_a_table() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, order_repository, table_repository = _use_case(
        [order],
        [_occupied(), build_table(table_id="tbl_002", number=2)],
    )
    CloseOrder(
        order_repository=order_repository,
        table_repository=table_repository,
        enricher=enricher(table_repository),
    ).execute(order.company_id, ORDER_ID)
    writes_after_close = order_repository.writes

    with pytest.raises(InvalidOrderTransitionError):
        use_case.execute(
            principal(),
            ORDER_ID,
            _request([{"productId": "prd_001", "requestedQuantity": 1}], tableId="tbl_002"),
        )

    assert order_repository.writes == writes_after_close
    assert table_repository.tables[TableId("tbl_001")].status == TableStatus.AVAILABLE
    assert table_repository.tables[TableId("tbl_002")].status == TableStatus.AVAILABLE
    assert order_repository.orders[ORDER_ID].fulfillment.table_id == "tbl_001"


def test_closed_order_keeps_accepting_line_edits_at_the_same_table() -> None:
    order = build_order([build_line(LOMO, [P])])
    use_case, order_repository, table_repository = _use_case([order], [_occupied()])
    CloseOrder(
        order_repository=order_repository,
        table_repository=table_repository,
        enricher=enricher(table_repository),
    ).execute(order.company_id, ORDER_ID)

    response = use_case.execute(
        principal(),
        ORDER_ID,
        _request([{"productId": "prd_001", "requestedQuantity": 2}]),
    )

    assert response.status == "closed"
    assert response.itemCount == 1
    assert table_repository.tables[TableId("tbl_001")].status == TableStatus.AVAILABLE
