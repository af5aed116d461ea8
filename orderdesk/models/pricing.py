"""Quote models produced by the pricing reconciler."""

from decimal import Decimal
from typing import Optional

from pydantic import field_serializer

from orderdesk.models.base import ValueModel
from orderdesk.utils.money import format_money

NOT_FOUND_SKU = "NOT_FOUND"


class PricingItem(ValueModel):
    """Priced, availability-annotated line. Unresolved lines carry sku NOT_FOUND and zeroed fields."""

    product_name: str
    product_sku: str
    requested_quantity: int
    available_quantity: int
    is_available: bool
    unit_price: Decimal
    unit: str
    line_total: Decimal
    lead_time_days: int
    min_order_quantity: int
    notes: Optional[str] = None

    @field_serializer("unit_price", "line_total", when_used="json")
    def serialize_money(self, value: Decimal) -> str:
        return format_money(value)

    @property
    def is_resolved(self) -> bool:
        return self.product_sku != NOT_FOUND_SKU


class PricingResponse(ValueModel):
    items: list[PricingItem]
    subtotal: Decimal
    estimated_tax: Decimal
    total: Decimal
    earliest_delivery_date: str
    all_items_available: bool
    message: str

    @field_serializer("subtotal", "estimated_tax", "total", when_used="json")
    def serialize_money(self, value: Decimal) -> str:
        return format_money(value)
