"""SQLAlchemy-backed catalog over the products table."""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError

from orderdesk.catalog.protocol import availability_for
from orderdesk.db import Database
from orderdesk.db.models.catalog import Product
from orderdesk.models.catalog import Availability, CatalogProduct
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.catalog.sql")


def _to_record(row: Product) -> CatalogProduct:
    return CatalogProduct(
        id=row.id,
        sku=row.sku,
        name=row.name,
        description=row.description,
        category=row.category,
        unit_price=row.unit_price,
        unit=row.unit or "pcs",
        stock_quantity=row.stock_quantity,
        min_order_quantity=row.min_order_quantity,
        lead_time_days=row.lead_time_days,
        is_active=row.is_active,
    )


class SqlCatalog:
    """Catalog reading live product rows. Store errors degrade to empty results."""

    def __init__(self, database: Database):
        self._db = database

    def find_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        try:
            with self._db.session() as session:
                row = session.scalars(
                    select(Product).where(Product.sku == sku).where(Product.is_active.is_(True))
                ).first()
                return _to_record(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.warning("catalog.find_by_sku_failed", sku=sku, error=str(e))
            return None

    def search_by_text(self, text: str) -> list[CatalogProduct]:
        term = f"%{text}%"
        q = (
            select(Product)
            .where(Product.is_active.is_(True))
            .where(
                or_(
                    Product.name.ilike(term),
                    Product.sku.ilike(term),
                    Product.category.ilike(term),
                    Product.description.ilike(term),
                )
            )
            .order_by(Product.id)
        )
        try:
            with self._db.session() as session:
                return [_to_record(r) for r in session.scalars(q).all()]
        except SQLAlchemyError as e:
            logger.warning("catalog.search_failed", text=text, error=str(e))
            return []

    def list_active(self) -> list[CatalogProduct]:
        try:
            with self._db.session() as session:
                rows = session.scalars(
                    select(Product).where(Product.is_active.is_(True)).order_by(Product.id)
                ).all()
                return [_to_record(r) for r in rows]
        except SQLAlchemyError as e:
            logger.warning("catalog.list_active_failed", error=str(e))
            return []

    def check_availability(self, sku: str, quantity: int) -> Availability:
        return availability_for(self.find_by_sku(sku), quantity)
