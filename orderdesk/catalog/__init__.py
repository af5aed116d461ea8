"""Catalog collaborator: protocol plus in-memory and SQL implementations."""

from orderdesk.catalog.memory import InMemoryCatalog, product_from_row
from orderdesk.catalog.protocol import Catalog, availability_for
from orderdesk.catalog.sql import SqlCatalog

__all__ = [
    "Catalog",
    "InMemoryCatalog",
    "SqlCatalog",
    "availability_for",
    "product_from_row",
]
