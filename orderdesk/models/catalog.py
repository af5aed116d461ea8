"""Catalog records consumed by the parser, the reconciler and smart search."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from orderdesk.models.base import ValueModel


class CatalogProduct(ValueModel):
    """Product as seen through the catalog collaborator."""

    id: Optional[int] = None
    sku: str
    name: str
    description: Optional[str] = None
    category: str
    unit_price: Decimal
    unit: str = "pcs"
    stock_quantity: int = 0
    min_order_quantity: int = 1
    lead_time_days: int = 3
    is_active: bool = True

    @property
    def identity(self) -> str:
        """Stable key for deduplication: DB id when known, else SKU."""
        return f"id:{self.id}" if self.id is not None else f"sku:{self.sku}"


class Availability(BaseModel):
    """Live stock check result for one SKU and requested quantity."""

    available: bool
    available_quantity: int
    lead_time_days: int
