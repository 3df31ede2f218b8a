"""create companies, products, tables and orders

Revision ID: 202610190900
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "202610190900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("category", sa.String(length=100), server_default="", nullable=False),
        sa.Column("description", sa.String(length=1000), server_default="", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="true", nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_company_id", "products", ["company_id"], unique=False)

    op.create_table(
        "tables",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="available", nullable=False),
        sa.Column("current_order", sa.String(length=50), nullable=True),
        sa.Column("occupied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("occupied_by", sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "number", name="uq_tables_company_number"),
    )
    op.create_index("ix_tables_company_id", "tables", ["company_id"], unique=False)

    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("company_id", sa.String(length=50), nullable=False),
        sa.Column("order_type", sa.String(length=20), nullable=False),
        sa.Column("table_id", sa.String(length=50), nullable=True),
        sa.Column("people_count", sa.Integer(), nullable=True),
        sa.Column("customer_id", sa.String(length=50), nullable=True),
        sa.Column("delivery_address", sa.String(length=500), nullable=True),
        sa.Column("pickup_name", sa.String(length=255), nullable=True),
        sa.Column("lines", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("item_count", sa.Integer(), nullable=False),
        sa.Column("total", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("created_by", sa.String(length=50), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "edit_history",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="[]",
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_orders_company_created_at_desc",
        "orders",
        [sa.text("company_id"), sa.text("created_at DESC")],
        unique=False,
    )
    op.create_index("ix_orders_company_status", "orders", ["company_id", "status"], unique=False)
    op.create_index("ix_orders_company_table", "orders", ["company_id", "table_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_orders_company_table", table_name="orders")
    op.drop_index("ix_orders_company_status", table_name="orders")
    op.drop_index("ix_orders_company_created_at_desc", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_tables_company_id", table_name="tables")
    op.drop_table("tables")
    op.drop_index("ix_products_company_id", table_name="products")
    op.drop_table("products")
    op.drop_table("companies")
