"""In-memory catalog backed by a product list or products.csv (offline runs and tests)."""

from pathlib import Path
from typing import Any, Iterable, Optional

from orderdesk.catalog.protocol import availability_for
from orderdesk.models.catalog import Availability, CatalogProduct
from orderdesk.utils.csv_loader import load_products
from orderdesk.utils.money import to_decimal


def _parse_int(val: Any, default: int) -> int:
    try:
        return int(val) if val is not None and str(val).strip() else default
    except (TypeError, ValueError):
        return default


def _parse_bool(val: Any, default: bool = True) -> bool:
    if isinstance(val, bool):
        return val
    if val is None or not str(val).strip():
        return default
    return str(val).strip().lower() in ("true", "1", "yes")


def product_from_row(row: dict[str, Any], product_id: Optional[int] = None) -> CatalogProduct:
    """Build a CatalogProduct from a products.csv row."""
    return CatalogProduct(
        id=product_id,
        sku=(row.get("sku") or "").strip(),
        name=(row.get("name") or "").strip(),
        description=(row.get("description") or "").strip() or None,
        category=(row.get("category") or "").strip(),
        unit_price=to_decimal(row.get("unit_price")),
        unit=(row.get("unit") or "").strip() or "pcs",
        stock_quantity=_parse_int(row.get("stock_quantity"), 0),
        min_order_quantity=_parse_int(row.get("min_order_quantity"), 1),
        lead_time_days=_parse_int(row.get("lead_time_days"), 3),
        is_active=_parse_bool(row.get("is_active")),
    )


class InMemoryCatalog:
    """Catalog over a fixed product list. Search order is insertion order."""

    def __init__(self, products: Iterable[CatalogProduct]):
        self._products = list(products)

    @classmethod
    def from_csv(cls, csv_path: Path | None = None) -> "InMemoryCatalog":
        rows = load_products(csv_path)
        products = [
            product_from_row(r, product_id=i)
            for i, r in enumerate(rows, 1)
            if (r.get("sku") or "").strip()
        ]
        return cls(products)

    def find_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        for p in self._products:
            if p.is_active and p.sku == sku:
                return p
        return None

    def search_by_text(self, text: str) -> list[CatalogProduct]:
        needle = (text or "").lower()
        return [
            p
            for p in self._products
            if p.is_active
            and any(needle in (field or "").lower() for field in (p.name, p.sku, p.category, p.description))
        ]

    def list_active(self) -> list[CatalogProduct]:
        return [p for p in self._products if p.is_active]

    def check_availability(self, sku: str, quantity: int) -> Availability:
        return availability_for(self.find_by_sku(sku), quantity)
