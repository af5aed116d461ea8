"""Seed the products table from data/products.csv when it is first created."""

from pathlib import Path

from sqlalchemy.orm import Session

from orderdesk.catalog.memory import product_from_row
from orderdesk.db.models.catalog import Product
from orderdesk.utils.csv_loader import load_products
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.db.seed_data")


def seed_products(session: Session, csv_path: Path | None = None) -> int:
    """Insert every CSV row with a SKU. Returns the number of products added."""
    added = 0
    for row in load_products(csv_path):
        record = product_from_row(row)
        if not record.sku:
            continue
        session.add(
            Product(
                sku=record.sku,
                name=record.name,
                description=record.description,
                category=record.category,
                unit_price=record.unit_price,
                unit=record.unit,
                stock_quantity=record.stock_quantity,
                min_order_quantity=record.min_order_quantity,
                lead_time_days=record.lead_time_days,
                is_active=record.is_active,
            )
        )
        added += 1
    session.flush()
    logger.info("seed_data.products", count=added)
    return added
