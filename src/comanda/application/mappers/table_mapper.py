from __future__ import annotations

from comanda.application.dto.responses import TableResponse
from comanda.domain.table.entities import Table


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        companyId=str(table.company_id),
        number=table.number,
        capacity=table.capacity,
        status=table.status.value,
        currentOrder=table.current_order,
        occupiedAt=table.occupied_at,
        occupiedBy=table.occupied_by,
    )
