"""Catalog collaborator interface consumed by the parser, reconciler and smart search."""

from typing import Optional, Protocol

from orderdesk.models.catalog import Availability, CatalogProduct


class Catalog(Protocol):
    """Read-only view of the live product catalog."""

    def find_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        """Exact lookup of an active product by SKU."""
        ...

    def search_by_text(self, text: str) -> list[CatalogProduct]:
        """Active products whose name, SKU, category or description contains `text`."""
        ...

    def list_active(self) -> list[CatalogProduct]:
        """All active products."""
        ...

    def check_availability(self, sku: str, quantity: int) -> Availability:
        """Stock check for `quantity` units of `sku`."""
        ...


def availability_for(product: Optional[CatalogProduct], quantity: int) -> Availability:
    """Availability of `quantity` units given a product lookup result (None = unknown SKU)."""
    if product is None:
        return Availability(available=False, available_quantity=0, lead_time_days=0)
    return Availability(
        available=product.stock_quantity >= quantity,
        available_quantity=product.stock_quantity,
        lead_time_days=product.lead_time_days,
    )
