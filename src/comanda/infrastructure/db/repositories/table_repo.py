from __future__ import annotations

from datetime import timezone

from sqlalchemy import Engine, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from comanda.application.ports.repositories import TableRepository
from comanda.domain.common.ids import CompanyId, OrderId, TableId, UserId
from comanda.domain.table.entities import Table, TableStatus
from comanda.infrastructure.db.models.table import TableModel
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, table_id: TableId, company_id: CompanyId) -> Table | None:
        statement = select(TableModel).where(
            TableModel.id == str(table_id),
            TableModel.company_id == str(company_id),
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()

        if model is None:
            return None
        return self._to_domain(model)

    def save(self, table: Table) -> None:
        values = {
            "company_id": str(table.company_id),
            "number": table.number,
            "capacity": table.capacity,
            "status": table.status.value,
            "current_order": table.current_order,
            "occupied_at": table.occupied_at,
            "occupied_by": table.occupied_by,
        }
        statement = (
            insert(TableModel)
            .values(id=str(table.table_id), **values)
            .on_conflict_do_update(index_elements=[TableModel.id], set_=values)
        )
        with Session(self._engine) as session:
            session.execute(statement)
            session.commit()

    def release_all(self, company_id: CompanyId | None) -> int:
        statement = (
            update(TableModel)
            .where(TableModel.status == TableStatus.OCCUPIED.value)
            .values(
                status=TableStatus.AVAILABLE.value,
                current_order=None,
                occupied_at=None,
                occupied_by=None,
            )
        )
        if company_id is not None:
            statement = statement.where(TableModel.company_id == str(company_id))
        with Session(self._engine) as session:
            result = session.execute(statement)
            released = int(result.rowcount or 0)
            session.commit()
        return released

    def _to_domain(self, model: TableModel) -> Table:
        occupied_at = model.occupied_at
        if occupied_at and occupied_at.tzinfo is None:
            occupied_at = occupied_at.replace(tzinfo=timezone.utc)
        return Table(
            table_id=TableId(model.id),
            company_id=CompanyId(model.company_id),
            number=model.number,
            capacity=model.capacity,
            status=TableStatus(model.status),
            current_order=OrderId(model.current_order) if model.current_order else None,
            occupied_at=occupied_at,
            occupied_by=UserId(model.occupied_by) if model.occupied_by else None,
        )
