from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from comanda.domain.order.entities import OrderStatus, OrderType, UnitStatus


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class UnitStatusRequest(CamelBaseModel):
    position: int | None = None
    status: UnitStatus


class OrderLineRequest(CamelBaseModel):
    product_id: str = Field(min_length=1)
    requested_quantity: int = Field(ge=1)
    message: str = ""
    unit_statuses: list[UnitStatusRequest] | None = None


class OrderFulfillmentRequest(CamelBaseModel):
    order_type: OrderType | None = None
    table_id: str | None = None
    people_count: int | None = Field(default=None, ge=1)
    customer_id: str | None = None
    delivery_address: str | None = None
    pickup_name: str | None = None


class CreateOrderRequest(OrderFulfillmentRequest):
    lines: list[OrderLineRequest] = Field(default_factory=list)


class UpdateOrderRequest(OrderFulfillmentRequest):
    lines: list[OrderLineRequest]
    status: OrderStatus | None = None


class AdvanceUnitRequest(CamelBaseModel):
    status: UnitStatus
