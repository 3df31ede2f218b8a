from __future__ import annotations

from comanda.application.dto.responses import TableResponse
from comanda.application.mappers.table_mapper import to_table_response
from comanda.application.ports.repositories import TableRepository
from comanda.application.use_cases.table_occupancy import TableNotFoundError
from comanda.domain.common.ids import CompanyId, TableId


class GetTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, company_id: CompanyId, table_id: TableId) -> TableResponse:
        table = self._table_repository.get(table_id=table_id, company_id=company_id)
        if table is None:
            raise TableNotFoundError(
                f"table not found for company_id={company_id}, table_id={table_id}"
            )
        return to_table_response(table)
