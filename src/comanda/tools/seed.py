from __future__ import annotations

from decimal import Decimal

import redis
from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from comanda.application.use_cases.product_lookup import CatalogProductLookup
from comanda.domain.common.ids import CompanyId, ProductId
from comanda.infrastructure.cache.cache_store import RedisCacheStore
from comanda.infrastructure.db.models.catalog import CompanyModel, ProductModel
from comanda.infrastructure.db.models.table import TableModel
from comanda.infrastructure.db.repositories.catalog_repo import SqlAlchemyProductRepository
from comanda.infrastructure.db.session import get_engine

COMPANY_ID = "cmp_001"
COMPANY_NAME = "La Esquina Bistro"

PRODUCTS = [
    {
        "id": "prd_001",
        "name": "Lomo Saltado",
        "price": Decimal("18000"),
        "category": "mains",
        "description": "Beef strips, onion, tomato, fries",
        "is_active": True,
    },
    {
        "id": "prd_002",
        "name": "Limonada de Coco",
        "price": Decimal("9000"),
        "category": "drinks",
        "description": "Coconut lemonade",
        "is_active": True,
    },
    {
        "id": "prd_003",
        "name": "Ajiaco",
        "price": Decimal("21500.50"),
        "category": "mains",
        "description": "Chicken and potato soup",
        "is_active": True,
    },
    {
        "id": "prd_004",
        "name": "Tres Leches",
        "price": Decimal("8500"),
        "category": "desserts",
        "description": "Sponge cake soaked in three milks",
        "is_active": False,
    },
]

TABLES = [
    {"id": "tbl_001", "number": 1, "capacity": 2},
    {"id": "tbl_002", "number": 2, "capacity": 4},
    {"id": "tbl_003", "number": 3, "capacity": 6},
]


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"companies", "products", "tables", "orders"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    with Session(engine) as session:
        session.execute(
            insert(CompanyModel)
            .values(id=COMPANY_ID, name=COMPANY_NAME)
            .on_conflict_do_update(
                index_elements=[CompanyModel.id],
                set_={"name": COMPANY_NAME},
            )
        )

        for product in PRODUCTS:
            values = {"company_id": COMPANY_ID, **product}
            session.execute(
                insert(ProductModel)
                .values(**values)
                .on_conflict_do_update(
                    index_elements=[ProductModel.id],
                    set_={key: value for key, value in values.items() if key != "id"},
                )
            )

        # Re-seeding also frees every seeded table.
        for table in TABLES:
            values = {
                "company_id": COMPANY_ID,
                "status": "available",
                "current_order": None,
                "occupied_at": None,
                "occupied_by": None,
                **table,
            }
            session.execute(
                insert(TableModel)
                .values(**values)
                .on_conflict_do_update(
                    index_elements=[TableModel.id],
                    set_={key: value for key, value in values.items() if key != "id"},
                )
            )

        session.commit()

    _invalidate_cached_products()
    print("seed complete")


def _invalidate_cached_products() -> None:
    lookup = CatalogProductLookup(
        repository=SqlAlchemyProductRepository(),
        cache=RedisCacheStore(),
    )
    try:
        lookup.invalidate(
            CompanyId(COMPANY_ID),
            [ProductId(product["id"]) for product in PRODUCTS],
        )
    except (redis.RedisError, RuntimeError) as exc:
        print(f"product cache not cleared: {exc}")


if __name__ == "__main__":
    main()
