from __future__ import annotations

from prometheus_client import Counter

from comanda.domain.order.entities import Order
from comanda.domain.order.reconciliation import LineChange, LineViolation

ORDERS_CREATED_TOTAL = Counter(
    "comanda_orders_created_total",
    "Total number of orders created.",
    ["company_id", "order_type"],
)

ORDERS_UPDATED_TOTAL = Counter(
    "comanda_orders_updated_total",
    "Total number of reconciled order updates.",
    ["company_id"],
)

ORDERS_AUTO_DELETED_TOTAL = Counter(
    "comanda_orders_auto_deleted_total",
    "Total number of orders deleted because their line list became empty.",
    ["company_id"],
)

ORDERS_CLOSED_TOTAL = Counter(
    "comanda_orders_closed_total",
    "Total number of close actions applied to orders.",
    ["company_id"],
)

LINE_DECISIONS_TOTAL = Counter(
    "comanda_order_line_decisions_total",
    "Reconciled order lines by decision.",
    ["decision"],
)

RECONCILIATION_REJECTIONS_TOTAL = Counter(
    "comanda_reconciliation_rejections_total",
    "Order line violations that rejected an update.",
    ["reason"],
)

TABLE_OCCUPANCY_TRANSITIONS_TOTAL = Counter(
    "comanda_table_occupancy_transitions_total",
    "Table occupy/release transitions driven by orders.",
    ["company_id", "transition"],
)


def record_order_created(order: Order) -> None:
    ORDERS_CREATED_TOTAL.labels(
        company_id=str(order.company_id),
        order_type=order.order_type.value,
    ).inc()


def record_order_updated(company_id: str, changes: list[LineChange]) -> None:
    ORDERS_UPDATED_TOTAL.labels(company_id=company_id).inc()
    for change in changes:
        LINE_DECISIONS_TOTAL.labels(decision=change.decision.value).inc()


def record_order_auto_deleted(company_id: str) -> None:
    ORDERS_AUTO_DELETED_TOTAL.labels(company_id=company_id).inc()


def record_order_closed(company_id: str) -> None:
    ORDERS_CLOSED_TOTAL.labels(company_id=company_id).inc()


def record_reconciliation_rejected(violations: list[LineViolation]) -> None:
    for violation in violations:
        RECONCILIATION_REJECTIONS_TOTAL.labels(reason=violation.reason.value).inc()


def record_table_transition(company_id: str, transition: str) -> None:
    TABLE_OCCUPANCY_TRANSITIONS_TOTAL.labels(company_id=company_id, transition=transition).inc()
