from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import Engine, delete, select, update
from sqlalchemy.orm import Session

from comanda.application.ports.repositories import OrderRepository
from comanda.domain.common.ids import CompanyId, CustomerId, OrderId, ProductId, TableId, UserId
from comanda.domain.order.entities import (
    DeliveryService,
    EditChange,
    EditChangeType,
    EditHistoryEntry,
    Fulfillment,
    Order,
    OrderLine,
    OrderStatus,
    OrderType,
    PickupService,
    TableService,
    UnitStatus,
    UnitStatusEntry,
)
from comanda.domain.product.entities import ProductSnapshot
from comanda.infrastructure.db.models.order import OrderModel
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order) -> None:
        with Session(self._engine) as session:
            session.add(OrderModel(**_to_row(order)))
            session.commit()

    def get(self, order_id: OrderId, company_id: CompanyId) -> Order | None:
        statement = (
            select(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.company_id == str(company_id),
            )
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()

        if model is None:
            return None
        return _to_domain(model)

    def update(self, order: Order) -> None:
        row = _to_row(order)
        row.pop("id")
        row.pop("company_id")
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order.order_id),
                OrderModel.company_id == str(order.company_id),
            )
            .values(**row)
        )
        with Session(self._engine) as session:
            session.execute(statement)
            session.commit()

    def delete(self, order_id: OrderId, company_id: CompanyId) -> bool:
        statement = delete(OrderModel).where(
            OrderModel.id == str(order_id),
            OrderModel.company_id == str(company_id),
        )
        with Session(self._engine) as session:
            result = session.execute(statement)
            deleted = result.rowcount == 1
            session.commit()
        return deleted

    def list_for_company(
        self,
        company_id: CompanyId,
        status: OrderStatus | None,
        order_type: OrderType | None,
    ) -> list[Order]:
        statement = select(OrderModel).where(OrderModel.company_id == str(company_id))
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        if order_type is not None:
            statement = statement.where(OrderModel.order_type == order_type.value)
        statement = statement.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())

        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [_to_domain(model) for model in models]


def _to_row(order: Order) -> dict[str, Any]:
    fulfillment = order.fulfillment
    return {
        "id": str(order.order_id),
        "company_id": str(order.company_id),
        "order_type": order.order_type.value,
        "table_id": fulfillment.table_id if isinstance(fulfillment, TableService) else None,
        "people_count": (
            fulfillment.people_count if isinstance(fulfillment, TableService) else None
        ),
        "customer_id": (
            fulfillment.customer_id
            if isinstance(fulfillment, (DeliveryService, PickupService))
            else None
        ),
        "delivery_address": (
            fulfillment.delivery_address if isinstance(fulfillment, DeliveryService) else None
        ),
        "pickup_name": fulfillment.pickup_name if isinstance(fulfillment, PickupService) else None,
        "lines": [_line_to_json(line) for line in order.lines],
        "item_count": order.item_count,
        "total": order.total,
        "status": order.status.value,
        "created_at": order.created_at,
        "created_by": order.created_by,
        "updated_at": order.updated_at,
        "closed_at": order.closed_at,
        "edit_history": [_history_to_json(entry) for entry in order.edit_history],
    }


def _line_to_json(line: OrderLine) -> dict[str, Any]:
    snapshot = line.product_snapshot
    return {
        "productId": str(line.product_id),
        "productSnapshot": {
            "name": snapshot.name,
            "price": str(snapshot.price),
            "category": snapshot.category,
            "description": snapshot.description,
        },
        "requestedQuantity": line.requested_quantity,
        "message": line.message,
        "unitStatuses": [
            {"position": unit.position, "status": unit.status.value}
            for unit in line.unit_statuses
        ],
    }


def _history_to_json(entry: EditHistoryEntry) -> dict[str, Any]:
    return {
        "editedAt": entry.edited_at.isoformat(),
        "editedBy": entry.edited_by,
        "changes": [
            {
                "type": change.change_type.value,
                "details": change.details,
                "productId": change.product_id,
                "productName": change.product_name,
            }
            for change in entry.changes
        ],
    }


def _to_domain(model: OrderModel) -> Order:
    return Order(
        order_id=OrderId(model.id),
        company_id=CompanyId(model.company_id),
        fulfillment=_fulfillment_from_model(model),
        status=OrderStatus(model.status),
        lines=[_line_from_json(raw) for raw in model.lines],
        item_count=model.item_count,
        total=Decimal(model.total),
        created_at=_aware(model.created_at),
        created_by=UserId(model.created_by) if model.created_by else None,
        updated_at=_aware(model.updated_at) if model.updated_at else None,
        closed_at=_aware(model.closed_at) if model.closed_at else None,
        edit_history=[_history_from_json(raw) for raw in model.edit_history or []],
    )


def _fulfillment_from_model(model: OrderModel) -> Fulfillment:
    order_type = OrderType(model.order_type)
    if order_type == OrderType.TABLE:
        return TableService(table_id=TableId(model.table_id), people_count=model.people_count)
    if order_type == OrderType.DELIVERY:
        return DeliveryService(
            customer_id=CustomerId(model.customer_id),
            delivery_address=model.delivery_address,
        )
    return PickupService(
        customer_id=CustomerId(model.customer_id) if model.customer_id else None,
        pickup_name=model.pickup_name,
    )


def _line_from_json(raw: dict[str, Any]) -> OrderLine:
    snapshot = raw["productSnapshot"]
    return OrderLine(
        product_id=ProductId(raw["productId"]),
        product_snapshot=ProductSnapshot(
            name=snapshot["name"],
            price=Decimal(snapshot["price"]),
            category=snapshot.get("category", ""),
            description=snapshot.get("description", ""),
        ),
        requested_quantity=raw["requestedQuantity"],
        message=raw.get("message", ""),
        unit_statuses=[
            UnitStatusEntry(position=unit["position"], status=UnitStatus(unit["status"]))
            for unit in raw["unitStatuses"]
        ],
    )


def _history_from_json(raw: dict[str, Any]) -> EditHistoryEntry:
    return EditHistoryEntry(
        edited_at=_aware(datetime.fromisoformat(raw["editedAt"])),
        edited_by=UserId(raw["editedBy"]) if raw.get("editedBy") else None,
        changes=[
            EditChange(
                change_type=EditChangeType(change["type"]),
                details=change["details"],
                product_id=ProductId(change["productId"]) if change.get("productId") else None,
                product_name=change.get("productName"),
            )
            for change in raw["changes"]
        ],
    )


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
