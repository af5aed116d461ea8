"""Re-export all ORM models so Base.metadata has all tables."""

from orderdesk.db.models.catalog import Dealer, Product
from orderdesk.db.models.orders import Inquiry, Order, OrderItem

__all__ = [
    "Dealer",
    "Product",
    "Inquiry",
    "Order",
    "OrderItem",
]
