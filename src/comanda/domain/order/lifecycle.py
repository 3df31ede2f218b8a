from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from comanda.domain.common.ids import ProductId, UserId
from comanda.domain.order.entities import (
    EditChange,
    EditChangeType,
    EditHistoryEntry,
    Fulfillment,
    Order,
    OrderLine,
    OrderStatus,
    OrderTransitionError,
    UnitStatus,
    table_id_of,
)
from comanda.domain.order.ledger import advance_unit, force_for_close
from comanda.domain.order.reconciliation import LineChange, LineDecision, ReconciliationResult
from comanda.domain.order.totals import compute_totals

_LINE_CHANGE_TYPES = {
    LineDecision.NEW: EditChangeType.PRODUCT_ADDED,
    LineDecision.REMOVED: EditChangeType.PRODUCT_REMOVED,
    LineDecision.GROWN: EditChangeType.QUANTITY_INCREASED,
    LineDecision.SHRUNK: EditChangeType.QUANTITY_DECREASED,
}


def ensure_status_transition(current: OrderStatus, requested: OrderStatus | None) -> OrderStatus:
    """Validate a caller-supplied status for an update.

    Only ``received`` and ``in_progress`` can be requested; ``closed`` is
    reached through ``close_order``. Status never moves backward.
    """
    if requested is None or requested == current:
        return current
    if requested == OrderStatus.CLOSED:
        raise OrderTransitionError("orders are closed through the close action")
    if requested.rank < current.rank:
        raise OrderTransitionError(
            f"cannot move order from status={current.value} to status={requested.value}"
        )
    return requested


def apply_update(
    order: Order,
    reconciliation: ReconciliationResult,
    fulfillment: Fulfillment,
    status: OrderStatus,
    edited_by: UserId | None,
    now: datetime,
) -> Order:
    if reconciliation.is_empty:
        raise ValueError("an empty reconciliation deletes the order instead of updating it")

    totals = compute_totals(reconciliation.lines)
    changes = _line_edit_changes(reconciliation.changes)
    changes.extend(_fulfillment_edit_changes(order.fulfillment, fulfillment))
    if status != order.status:
        changes.append(
            EditChange(
                change_type=EditChangeType.STATUS_CHANGED,
                details=f"{order.status.value} -> {status.value}",
            )
        )

    history = list(order.edit_history)
    if changes:
        history.append(EditHistoryEntry(edited_at=now, edited_by=edited_by, changes=changes))

    return replace(
        order,
        fulfillment=fulfillment,
        status=status,
        lines=reconciliation.lines,
        item_count=totals.item_count,
        total=totals.total,
        updated_at=now,
        edit_history=history,
    )


def close_order(order: Order, now: datetime) -> Order:
    """Close the order, forcing every unit that was not served to ready_to_serve.

    Closing an already closed order re-applies the same rule and refreshes
    ``closed_at``; it is not rejected.
    """
    lines = [
        replace(line, unit_statuses=force_for_close(line.unit_statuses)) for line in order.lines
    ]
    return replace(
        order,
        lines=lines,
        status=OrderStatus.CLOSED,
        closed_at=now,
        updated_at=now,
    )


def advance_line_unit(
    order: Order,
    product_id: ProductId,
    position: int,
    new_status: UnitStatus,
    now: datetime,
) -> Order:
    if order.status == OrderStatus.CLOSED:
        raise OrderTransitionError(f"order {order.order_id} is closed")

    lines: list[OrderLine] = []
    found = False
    for line in order.lines:
        if line.product_id == product_id:
            found = True
            line = replace(
                line,
                unit_statuses=advance_unit(line.unit_statuses, position, new_status),
            )
        lines.append(line)
    if not found:
        raise LineNotFoundError(f"order {order.order_id} has no line for product {product_id}")
    return replace(order, lines=lines, updated_at=now)


class LineNotFoundError(Exception):
    pass


def _line_edit_changes(line_changes: list[LineChange]) -> list[EditChange]:
    changes: list[EditChange] = []
    for change in line_changes:
        change_type = _LINE_CHANGE_TYPES.get(change.decision)
        if change_type is not None:
            changes.append(
                EditChange(
                    change_type=change_type,
                    product_id=change.product_id,
                    product_name=change.product_name,
                    details=f"{change.previous_quantity} -> {change.requested_quantity}",
                )
            )
        if change.message_changed:
            changes.append(
                EditChange(
                    change_type=EditChangeType.MESSAGE_CHANGED,
                    product_id=change.product_id,
                    product_name=change.product_name,
                    details="message updated",
                )
            )
    return changes


def _fulfillment_edit_changes(previous: Fulfillment, target: Fulfillment) -> list[EditChange]:
    changes: list[EditChange] = []
    if previous.order_type != target.order_type:
        changes.append(
            EditChange(
                change_type=EditChangeType.ORDER_TYPE_CHANGED,
                details=f"{previous.order_type.value} -> {target.order_type.value}",
            )
        )
    previous_table = table_id_of(previous)
    target_table = table_id_of(target)
    if previous_table is not None and target_table is not None and previous_table != target_table:
        changes.append(
            EditChange(
                change_type=EditChangeType.TABLE_CHANGED,
                details=f"{previous_table} -> {target_table}",
            )
        )
    return changes
