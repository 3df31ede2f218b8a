from __future__ import annotations

from fastapi import APIRouter, Depends

from comanda.api.dependencies import get_principal
from comanda.application.dto.responses import TableResponse
from comanda.application.use_cases.context import Principal
from comanda.application.use_cases.get_table import GetTable
from comanda.domain.common.ids import TableId
from comanda.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository

router = APIRouter()


def _get_table_use_case() -> GetTable:
    return GetTable(table_repository=SqlAlchemyTableRepository())


@router.get("/tables/{table_id}", response_model=TableResponse)
def get_table(table_id: str, principal: Principal = Depends(get_principal)) -> TableResponse:
    return _get_table_use_case().execute(
        company_id=principal.company_id,
        table_id=TableId(table_id),
    )
