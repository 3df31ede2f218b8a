from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from comanda.domain.common.ids import CompanyId, OrderId, TableId, UserId


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    CLEANING = "cleaning"
    OUT_OF_SERVICE = "out_of_service"


@dataclass(frozen=True)
class Table:
    table_id: TableId
    company_id: CompanyId
    number: int
    capacity: int
    status: TableStatus
    current_order: OrderId | None = None
    occupied_at: datetime | None = None
    occupied_by: UserId | None = None

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    def ensure_can_seat(self, people_count: int | None) -> None:
        if self.status != TableStatus.AVAILABLE:
            raise TableNotAvailableError(
                f"table {self.number} is not available (status={self.status.value})"
            )
        if people_count is not None and self.capacity < people_count:
            raise TableCapacityExceededError(
                f"table {self.number} seats {self.capacity}, {people_count} requested"
            )

    def occupy(self, order_id: OrderId, occupied_by: UserId | None, now: datetime) -> Table:
        return replace(
            self,
            status=TableStatus.OCCUPIED,
            current_order=order_id,
            occupied_at=now,
            occupied_by=occupied_by,
        )

    def release(self) -> Table:
        return replace(
            self,
            status=TableStatus.AVAILABLE,
            current_order=None,
            occupied_at=None,
            occupied_by=None,
        )


class TableNotAvailableError(Exception):
    pass


class TableCapacityExceededError(Exception):
    pass
