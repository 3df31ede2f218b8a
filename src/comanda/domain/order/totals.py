from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from comanda.domain.common.money import round_money

if TYPE_CHECKING:
    from comanda.domain.order.entities import OrderLine


@dataclass(frozen=True)
class OrderTotals:
    total: Decimal
    item_count: int


def line_total(line: OrderLine) -> Decimal:
    return line.product_snapshot.price * line.requested_quantity


def compute_totals(lines: Sequence[OrderLine]) -> OrderTotals:
    """Derive the order total and item count from the lines' price snapshots.

    The sum is taken at full precision and rounded once, so rounding never
    accumulates across lines. ``item_count`` counts lines, not units.
    """
    raw_total = sum((line_total(line) for line in lines), Decimal("0"))
    return OrderTotals(total=round_money(raw_total), item_count=len(lines))
