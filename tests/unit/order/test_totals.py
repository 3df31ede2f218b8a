from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from comanda.domain.common.ids import ProductId
from comanda.domain.common.money import round_money
from comanda.domain.order.entities import OrderLine, UnitStatus, UnitStatusEntry
from comanda.domain.order.totals import compute_totals, line_total
from comanda.domain.product.entities import ProductSnapshot


def _line(product_id: str, price: str, quantity: int) -> OrderLine:
    return OrderLine(
        product_id=ProductId(product_id),
        product_snapshot=ProductSnapshot(
            name=product_id,
            price=Decimal(price),
            category="",
            description="",
        ),
        requested_quantity=quantity,
        message="",
        unit_statuses=[
            UnitStatusEntry(position=position, status=UnitStatus.PENDING)
            for position in range(1, quantity + 1)
        ],
    )


def test_total_is_sum_of_price_times_quantity() -> None:
    totals = compute_totals([_line("prd_001", "15000", 2), _line("prd_002", "8000", 3)])

    assert totals.total == Decimal("54000")
    assert totals.item_count == 2


def test_item_count_counts_lines_not_units() -> None:
    totals = compute_totals([_line("prd_001", "1", 5)])

    assert totals.item_count == 1


def test_total_rounds_once_after_summing() -> None:
    # Rounded per line this would be 0.00 + 0.00.
    totals = compute_totals([_line("prd_001", "0.005", 1), _line("prd_002", "0.005", 1)])

    assert totals.total == Decimal("0.01")
    assert line_total(_line("prd_003", "0.335", 3)) == Decimal("1.005")


def test_round_money_rounds_half_away_from_zero() -> None:
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_money(Decimal("-2.345")) == Decimal("-2.35")
    assert round_money(2.675) == Decimal("2.68")


def test_empty_line_list_totals_zero() -> None:
    totals = compute_totals([])

    assert totals.total == Decimal("0.00")
    assert totals.item_count == 0
