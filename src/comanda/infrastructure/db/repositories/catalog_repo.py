from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from comanda.application.ports.repositories import CompanyRepository, ProductRepository
from comanda.domain.common.ids import CompanyId, ProductId
from comanda.domain.product.entities import Product
from comanda.infrastructure.db.models.catalog import CompanyModel, ProductModel
from comanda.infrastructure.db.session import get_engine


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, product_id: ProductId, company_id: CompanyId) -> Product | None:
        statement = select(ProductModel).where(
            ProductModel.id == str(product_id),
            ProductModel.company_id == str(company_id),
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()

        if model is None:
            return None
        return Product(
            product_id=ProductId(model.id),
            company_id=CompanyId(model.company_id),
            name=model.name,
            price=Decimal(model.price),
            category=model.category,
            description=model.description,
            is_active=model.is_active,
        )


class SqlAlchemyCompanyRepository(CompanyRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get_name(self, company_id: CompanyId) -> str | None:
        statement = select(CompanyModel.name).where(CompanyModel.id == str(company_id)).limit(1)
        with Session(self._engine) as session:
            return session.execute(statement).scalar_one_or_none()
