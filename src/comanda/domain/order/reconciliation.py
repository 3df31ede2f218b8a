"""Merge a persisted line list with a requested one.

``reconcile_lines`` is pure: it either returns the complete new line list or
raises before anything could have been written. Lines are matched by product
id; in-flight kitchen work (any unit that is no longer pending) is never
discarded.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from comanda.domain.common.ids import ProductId
from comanda.domain.order.entities import OrderLine, UnitStatus
from comanda.domain.order.ledger import (
    InsufficientPendingUnitsError,
    count_non_pending,
    grow_units,
    shrink_units,
    units_from_statuses,
)
from comanda.domain.product.entities import Product

ProductLookup = Callable[[ProductId], Product | None]


class LineDecision(str, Enum):
    UNCHANGED = "unchanged"
    GROWN = "grown"
    SHRUNK = "shrunk"
    NEW = "new"
    REMOVED = "removed"


class ViolationReason(str, Enum):
    NON_PENDING_UNITS = "NON_PENDING_UNITS"
    INSUFFICIENT_PENDING_UNITS = "INSUFFICIENT_PENDING_UNITS"
    DUPLICATE_PRODUCT = "DUPLICATE_PRODUCT"


@dataclass(frozen=True)
class RequestedLine:
    product_id: ProductId
    requested_quantity: int
    message: str = ""
    unit_statuses: list[UnitStatus] | None = None

    def __post_init__(self) -> None:
        if self.requested_quantity < 1:
            raise ValueError("requested_quantity must be >= 1")


@dataclass(frozen=True)
class LineChange:
    product_id: ProductId
    product_name: str
    decision: LineDecision
    previous_quantity: int
    requested_quantity: int
    message_changed: bool = False


@dataclass(frozen=True)
class LineViolation:
    product_id: ProductId
    product_name: str
    reason: ViolationReason
    message: str


@dataclass(frozen=True)
class ReconciliationResult:
    lines: list[OrderLine]
    changes: list[LineChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines


class LineReconciliationError(Exception):
    def __init__(self, violations: list[LineViolation]) -> None:
        super().__init__("; ".join(violation.message for violation in violations))
        self.violations = violations


class ProductUnavailableError(Exception):
    def __init__(self, product_id: ProductId) -> None:
        super().__init__(f"product {product_id} not found or inactive")
        self.product_id = product_id


def reconcile_lines(
    current: Sequence[OrderLine],
    requested: Sequence[RequestedLine],
    lookup_product: ProductLookup,
) -> ReconciliationResult:
    if not requested:
        return ReconciliationResult(lines=[])

    current_by_product = {line.product_id: line for line in current}
    violations = _duplicate_violations(requested, current_by_product)
    requested_ids = {request.product_id for request in requested}

    changes: list[LineChange] = []
    for line in current:
        if line.product_id in requested_ids:
            continue
        non_pending = count_non_pending(line.unit_statuses)
        if non_pending:
            violations.append(
                LineViolation(
                    product_id=line.product_id,
                    product_name=line.product_snapshot.name,
                    reason=ViolationReason.NON_PENDING_UNITS,
                    message=(
                        f"cannot remove {line.product_snapshot.name}: "
                        f"{non_pending} units are not pending"
                    ),
                )
            )
            continue
        changes.append(
            LineChange(
                product_id=line.product_id,
                product_name=line.product_snapshot.name,
                decision=LineDecision.REMOVED,
                previous_quantity=line.requested_quantity,
                requested_quantity=0,
            )
        )

    merged: list[OrderLine | RequestedLine] = []
    for request in requested:
        existing = current_by_product.get(request.product_id)
        if existing is None:
            merged.append(request)
            continue
        try:
            line, decision = _merge_existing(existing, request)
        except InsufficientPendingUnitsError as exc:
            violations.append(
                LineViolation(
                    product_id=existing.product_id,
                    product_name=existing.product_snapshot.name,
                    reason=ViolationReason.INSUFFICIENT_PENDING_UNITS,
                    message=(
                        f"cannot reduce {existing.product_snapshot.name} to "
                        f"{request.requested_quantity}: {exc}"
                    ),
                )
            )
            continue
        merged.append(line)
        changes.append(
            LineChange(
                product_id=line.product_id,
                product_name=line.product_snapshot.name,
                decision=decision,
                previous_quantity=existing.requested_quantity,
                requested_quantity=line.requested_quantity,
                message_changed=existing.message != line.message,
            )
        )

    if violations:
        raise LineReconciliationError(violations)

    lines: list[OrderLine] = []
    for item in merged:
        if isinstance(item, OrderLine):
            lines.append(item)
            continue
        line = _new_line(item, lookup_product)
        lines.append(line)
        changes.append(
            LineChange(
                product_id=line.product_id,
                product_name=line.product_snapshot.name,
                decision=LineDecision.NEW,
                previous_quantity=0,
                requested_quantity=line.requested_quantity,
            )
        )
    return ReconciliationResult(lines=lines, changes=changes)


def _duplicate_violations(
    requested: Sequence[RequestedLine],
    current_by_product: dict[ProductId, OrderLine],
) -> list[LineViolation]:
    seen: set[ProductId] = set()
    violations: list[LineViolation] = []
    for request in requested:
        if request.product_id not in seen:
            seen.add(request.product_id)
            continue
        existing = current_by_product.get(request.product_id)
        name = existing.product_snapshot.name if existing else str(request.product_id)
        violations.append(
            LineViolation(
                product_id=request.product_id,
                product_name=name,
                reason=ViolationReason.DUPLICATE_PRODUCT,
                message=f"product {request.product_id} is listed more than once",
            )
        )
    return violations


def _merge_existing(existing: OrderLine, request: RequestedLine) -> tuple[OrderLine, LineDecision]:
    old_quantity = existing.requested_quantity
    new_quantity = request.requested_quantity
    if new_quantity == old_quantity:
        units = existing.unit_statuses
        decision = LineDecision.UNCHANGED
    elif new_quantity > old_quantity:
        units = grow_units(existing.unit_statuses, new_quantity)
        decision = LineDecision.GROWN
    else:
        units = shrink_units(existing.unit_statuses, new_quantity)
        decision = LineDecision.SHRUNK

    line = OrderLine(
        product_id=existing.product_id,
        product_snapshot=existing.product_snapshot,
        requested_quantity=new_quantity,
        message=request.message,
        unit_statuses=units,
    )
    return line, decision


def _new_line(request: RequestedLine, lookup_product: ProductLookup) -> OrderLine:
    product = lookup_product(request.product_id)
    if product is None or not product.is_active:
        raise ProductUnavailableError(request.product_id)
    return OrderLine(
        product_id=product.product_id,
        product_snapshot=product.snapshot(),
        requested_quantity=request.requested_quantity,
        message=request.message,
        unit_statuses=units_from_statuses(request.unit_statuses, request.requested_quantity),
    )
