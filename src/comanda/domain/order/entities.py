from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar

from comanda.domain.common.ids import CompanyId, CustomerId, OrderId, ProductId, TableId, UserId
from comanda.domain.order.totals import compute_totals
from comanda.domain.product.entities import ProductSnapshot


class OrderStatus(str, Enum):
    RECEIVED = "received"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"

    @property
    def rank(self) -> int:
        return _ORDER_STATUS_RANK[self]


_ORDER_STATUS_RANK = {
    OrderStatus.RECEIVED: 0,
    OrderStatus.IN_PROGRESS: 1,
    OrderStatus.CLOSED: 2,
}


class OrderType(str, Enum):
    TABLE = "table"
    DELIVERY = "delivery"
    PICKUP = "pickup"


class UnitStatus(str, Enum):
    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    READY_TO_SERVE = "ready_to_serve"
    SERVED = "served"

    @property
    def rank(self) -> int:
        return _UNIT_STATUS_RANK[self]


_UNIT_STATUS_RANK = {
    UnitStatus.PENDING: 0,
    UnitStatus.IN_PREPARATION: 1,
    UnitStatus.READY_TO_SERVE: 2,
    UnitStatus.SERVED: 3,
}


@dataclass(frozen=True)
class UnitStatusEntry:
    position: int
    status: UnitStatus

    def __post_init__(self) -> None:
        if self.position < 1:
            raise ValueError("position must be >= 1")


@dataclass(frozen=True)
class OrderLine:
    product_id: ProductId
    product_snapshot: ProductSnapshot
    requested_quantity: int
    message: str
    unit_statuses: list[UnitStatusEntry]

    def __post_init__(self) -> None:
        if self.requested_quantity < 1:
            raise ValueError("requested_quantity must be >= 1")
        if len(self.unit_statuses) != self.requested_quantity:
            raise ValueError("unit_statuses length must equal requested_quantity")
        positions = [unit.position for unit in self.unit_statuses]
        if positions != list(range(1, self.requested_quantity + 1)):
            raise ValueError("unit positions must be contiguous from 1")

    def count_with_status(self, status: UnitStatus) -> int:
        return sum(1 for unit in self.unit_statuses if unit.status == status)


@dataclass(frozen=True)
class TableService:
    order_type: ClassVar[OrderType] = OrderType.TABLE

    table_id: TableId
    people_count: int | None = None

    def __post_init__(self) -> None:
        if self.people_count is not None and self.people_count < 1:
            raise ValueError("people_count must be >= 1")


@dataclass(frozen=True)
class DeliveryService:
    order_type: ClassVar[OrderType] = OrderType.DELIVERY

    customer_id: CustomerId
    delivery_address: str | None = None


@dataclass(frozen=True)
class PickupService:
    order_type: ClassVar[OrderType] = OrderType.PICKUP

    customer_id: CustomerId | None = None
    pickup_name: str | None = None


Fulfillment = TableService | DeliveryService | PickupService


def table_id_of(fulfillment: Fulfillment) -> TableId | None:
    if isinstance(fulfillment, TableService):
        return fulfillment.table_id
    return None


class EditChangeType(str, Enum):
    PRODUCT_ADDED = "PRODUCT_ADDED"
    PRODUCT_REMOVED = "PRODUCT_REMOVED"
    QUANTITY_INCREASED = "QUANTITY_INCREASED"
    QUANTITY_DECREASED = "QUANTITY_DECREASED"
    MESSAGE_CHANGED = "MESSAGE_CHANGED"
    ORDER_TYPE_CHANGED = "ORDER_TYPE_CHANGED"
    TABLE_CHANGED = "TABLE_CHANGED"
    STATUS_CHANGED = "STATUS_CHANGED"


@dataclass(frozen=True)
class EditChange:
    change_type: EditChangeType
    details: str
    product_id: ProductId | None = None
    product_name: str | None = None


@dataclass(frozen=True)
class EditHistoryEntry:
    edited_at: datetime
    edited_by: UserId | None
    changes: list[EditChange]


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    company_id: CompanyId
    fulfillment: Fulfillment
    status: OrderStatus
    lines: list[OrderLine]
    item_count: int
    total: Decimal
    created_at: datetime
    created_by: UserId | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    edit_history: list[EditHistoryEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("order must contain at least one line")
        product_ids = [line.product_id for line in self.lines]
        if len(set(product_ids)) != len(product_ids):
            raise ValueError("order lines must reference distinct products")
        totals = compute_totals(self.lines)
        if self.item_count != totals.item_count:
            raise ValueError("item_count must equal the number of lines")
        if self.total != totals.total:
            raise ValueError("order total must equal sum of line totals")
        if self.status == OrderStatus.CLOSED and self.closed_at is None:
            raise ValueError("closed_at must be set when order status is closed")

    @property
    def order_type(self) -> OrderType:
        return self.fulfillment.order_type

    @property
    def table_id(self) -> TableId | None:
        return table_id_of(self.fulfillment)

    def line_for(self, product_id: ProductId) -> OrderLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None


def create_received_order(
    order_id: OrderId,
    company_id: CompanyId,
    fulfillment: Fulfillment,
    lines: list[OrderLine],
    created_by: UserId | None,
    now: datetime,
) -> Order:
    if not lines:
        raise ValueError("order must contain at least one line")

    totals = compute_totals(lines)
    return Order(
        order_id=order_id,
        company_id=company_id,
        fulfillment=fulfillment,
        status=OrderStatus.RECEIVED,
        lines=lines,
        item_count=totals.item_count,
        total=totals.total,
        created_at=now,
        created_by=created_by,
    )


class OrderTransitionError(Exception):
    pass
