from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from comanda.infrastructure.db.models.catalog import Base


class TableModel(Base):
    __tablename__ = "tables"
    __table_args__ = (UniqueConstraint("company_id", "number", name="uq_tables_company_number"),)

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    company_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="available")
    current_order: Mapped[str | None] = mapped_column(String(50), nullable=True)
    occupied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    occupied_by: Mapped[str | None] = mapped_column(String(50), nullable=True)
