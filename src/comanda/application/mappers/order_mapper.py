from __future__ import annotations

from comanda.application.dto.responses import (
    CompanyInfoResponse,
    EditChangeResponse,
    EditHistoryEntryResponse,
    OrderLineResponse,
    OrderResponse,
    OrderTableInfoResponse,
    ProductSnapshotResponse,
    UnitStatusResponse,
)
from comanda.domain.order.entities import (
    DeliveryService,
    Order,
    OrderLine,
    PickupService,
    TableService,
)
from comanda.domain.table.entities import Table


def to_order_line_response(line: OrderLine) -> OrderLineResponse:
    snapshot = line.product_snapshot
    return OrderLineResponse(
        productId=str(line.product_id),
        productSnapshot=ProductSnapshotResponse(
            name=snapshot.name,
            price=float(snapshot.price),
            category=snapshot.category,
            description=snapshot.description,
        ),
        requestedQuantity=line.requested_quantity,
        message=line.message,
        unitStatuses=[
            UnitStatusResponse(position=unit.position, status=unit.status.value)
            for unit in line.unit_statuses
        ],
    )


def to_order_response(
    order: Order,
    table: Table | None = None,
    company_name: str | None = None,
) -> OrderResponse:
    fulfillment = order.fulfillment
    response = OrderResponse(
        orderId=str(order.order_id),
        companyId=str(order.company_id),
        orderType=order.order_type.value,
        lines=[to_order_line_response(line) for line in order.lines],
        itemCount=order.item_count,
        total=float(order.total),
        status=order.status.value,
        createdAt=order.created_at,
        createdBy=order.created_by,
        updatedAt=order.updated_at,
        closedAt=order.closed_at,
        editHistory=[
            EditHistoryEntryResponse(
                editedAt=entry.edited_at,
                editedBy=entry.edited_by,
                changes=[
                    EditChangeResponse(
                        type=change.change_type.value,
                        details=change.details,
                        productId=change.product_id,
                        productName=change.product_name,
                    )
                    for change in entry.changes
                ],
            )
            for entry in order.edit_history
        ],
    )

    if isinstance(fulfillment, TableService):
        response.tableId = str(fulfillment.table_id)
        response.peopleCount = fulfillment.people_count
    elif isinstance(fulfillment, DeliveryService):
        response.customerId = str(fulfillment.customer_id)
        response.deliveryAddress = fulfillment.delivery_address
    elif isinstance(fulfillment, PickupService):
        response.customerId = fulfillment.customer_id
        response.pickupName = fulfillment.pickup_name

    if table is not None:
        response.table = OrderTableInfoResponse(
            tableId=str(table.table_id),
            number=table.number,
            capacity=table.capacity,
            status=table.status.value,
        )
    if company_name is not None:
        response.company = CompanyInfoResponse(companyId=str(order.company_id), name=company_name)
    return response
