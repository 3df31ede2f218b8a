from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from comanda.infrastructure.db.models.catalog import Base


class OrderModel(Base):
    """One row per order; lines and edit history stay embedded as JSONB."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    company_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )
    order_type: Mapped[str] = mapped_column(String(20), nullable=False)
    table_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    people_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    customer_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    delivery_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    pickup_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lines: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, nullable=False)
    item_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    created_by: Mapped[str | None] = mapped_column(String(50), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    edit_history: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=False,
        server_default="[]",
    )

    __table_args__ = (
        Index("ix_orders_company_created_at_desc", "company_id", "created_at"),
        Index("ix_orders_company_status", "company_id", "status"),
        Index("ix_orders_company_table", "company_id", "table_id"),
    )
