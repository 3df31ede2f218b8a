"""Per-unit fulfillment ledger kept inside every order line.

A ledger is a plain list of ``UnitStatusEntry`` whose positions always run
1..n with no gaps. Every operation here returns a new list; inputs are never
mutated.
"""

from __future__ import annotations

from collections.abc import Sequence

from comanda.domain.order.entities import UnitStatus, UnitStatusEntry


class InsufficientPendingUnitsError(Exception):
    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            f"only {available} pending units available to remove, {required} required"
        )
        self.available = available
        self.required = required


class UnitNotFoundError(Exception):
    pass


class InvalidUnitTransitionError(Exception):
    pass


def pending_units(quantity: int) -> list[UnitStatusEntry]:
    return [
        UnitStatusEntry(position=position, status=UnitStatus.PENDING)
        for position in range(1, quantity + 1)
    ]


def renumber(units: Sequence[UnitStatusEntry]) -> list[UnitStatusEntry]:
    return [
        UnitStatusEntry(position=position, status=unit.status)
        for position, unit in enumerate(units, start=1)
    ]


def count_non_pending(units: Sequence[UnitStatusEntry]) -> int:
    return sum(1 for unit in units if unit.status != UnitStatus.PENDING)


def units_from_statuses(
    statuses: Sequence[UnitStatus] | None,
    quantity: int,
) -> list[UnitStatusEntry]:
    """Ledger for a brand-new line.

    Caller-supplied statuses are kept only when there is exactly one per unit;
    anything else is discarded and the line starts fully pending.
    """
    if statuses is not None and len(statuses) == quantity:
        return [
            UnitStatusEntry(position=position, status=status)
            for position, status in enumerate(statuses, start=1)
        ]
    return pending_units(quantity)


def grow_units(units: Sequence[UnitStatusEntry], new_quantity: int) -> list[UnitStatusEntry]:
    if new_quantity < len(units):
        raise ValueError("new_quantity must be >= current quantity")
    grown = list(units)
    grown.extend(
        UnitStatusEntry(position=position, status=UnitStatus.PENDING)
        for position in range(len(units) + 1, new_quantity + 1)
    )
    return grown


def shrink_units(units: Sequence[UnitStatusEntry], new_quantity: int) -> list[UnitStatusEntry]:
    """Drop ``len(units) - new_quantity`` pending units, taken from the tail.

    Non-pending units are never dropped. Survivors keep their original relative
    order and are renumbered from 1.
    """
    to_remove = len(units) - new_quantity
    if to_remove < 0:
        raise ValueError("new_quantity must be <= current quantity")
    if to_remove == 0:
        return list(units)

    pending = [unit for unit in units if unit.status == UnitStatus.PENDING]
    if len(pending) < to_remove:
        raise InsufficientPendingUnitsError(available=len(pending), required=to_remove)

    removed = {unit.position for unit in pending[len(pending) - to_remove :]}
    kept = sorted(
        (unit for unit in units if unit.position not in removed),
        key=lambda unit: unit.position,
    )
    return renumber(kept)


def force_for_close(units: Sequence[UnitStatusEntry]) -> list[UnitStatusEntry]:
    return [
        unit
        if unit.status == UnitStatus.SERVED
        else UnitStatusEntry(position=unit.position, status=UnitStatus.READY_TO_SERVE)
        for unit in units
    ]


def advance_unit(
    units: Sequence[UnitStatusEntry],
    position: int,
    new_status: UnitStatus,
) -> list[UnitStatusEntry]:
    updated: list[UnitStatusEntry] = []
    found = False
    for unit in units:
        if unit.position != position:
            updated.append(unit)
            continue
        found = True
        if new_status.rank <= unit.status.rank:
            raise InvalidUnitTransitionError(
                f"cannot move unit {position} from {unit.status.value} to {new_status.value}"
            )
        updated.append(UnitStatusEntry(position=position, status=new_status))
    if not found:
        raise UnitNotFoundError(f"unit position {position} does not exist")
    return updated
