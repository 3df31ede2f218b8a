from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ProductSnapshotResponse(BaseModel):
    name: str
    price: float
    category: str
    description: str


class UnitStatusResponse(BaseModel):
    position: int
    status: str


class OrderLineResponse(BaseModel):
    productId: str
    productSnapshot: ProductSnapshotResponse
    requestedQuantity: int
    message: str
    unitStatuses: list[UnitStatusResponse] = Field(default_factory=list)


class EditChangeResponse(BaseModel):
    type: str
    details: str
    productId: str | None = None
    productName: str | None = None


class EditHistoryEntryResponse(BaseModel):
    editedAt: datetime
    editedBy: str | None = None
    changes: list[EditChangeResponse] = Field(default_factory=list)


class OrderTableInfoResponse(BaseModel):
    tableId: str
    number: int
    capacity: int
    status: str


class CompanyInfoResponse(BaseModel):
    companyId: str
    name: str


class OrderResponse(BaseModel):
    orderId: str
    companyId: str
    orderType: str
    tableId: str | None = None
    peopleCount: int | None = None
    customerId: str | None = None
    deliveryAddress: str | None = None
    pickupName: str | None = None
    lines: list[OrderLineResponse] = Field(default_factory=list)
    itemCount: int
    total: float
    status: str
    createdAt: datetime
    createdBy: str | None = None
    updatedAt: datetime | None = None
    closedAt: datetime | None = None
    editHistory: list[EditHistoryEntryResponse] = Field(default_factory=list)
    table: OrderTableInfoResponse | None = None
    company: CompanyInfoResponse | None = None


class OrderCreatedResponse(BaseModel):
    message: str
    orderId: str
    order: OrderResponse


class OrderDeletedResponse(BaseModel):
    message: str
    deleted: bool = True
    orderId: str


class OrderClosedResponse(BaseModel):
    message: str
    order: OrderResponse
    tableStatus: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
    count: int


class TableResponse(BaseModel):
    tableId: str
    companyId: str
    number: int
    capacity: int
    status: str
    currentOrder: str | None = None
    occupiedAt: datetime | None = None
    occupiedBy: str | None = None
