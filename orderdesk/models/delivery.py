"""Delivery-order (DO) models handed to the document renderer."""

from decimal import Decimal
from typing import Optional

from pydantic import ConfigDict, Field, field_serializer

from orderdesk.models.base import ValueModel
from orderdesk.utils.money import format_money


class DeliveryOrderLine(ValueModel):
    """Caller-supplied order line. Any supplied totals are ignored and recomputed."""

    model_config = ConfigDict(extra="ignore")

    sku: str
    product_name: str
    quantity: int = Field(gt=0)
    unit: str = "pcs"
    unit_price: Decimal


class DeliveryOrderItem(ValueModel):
    sku: str
    product_name: str
    quantity: int
    unit: str
    unit_price: Decimal
    line_total: Decimal

    @field_serializer("unit_price", "line_total", when_used="json")
    def serialize_money(self, value: Decimal) -> str:
        return format_money(value)


class DeliveryOrderData(ValueModel):
    order_number: str
    order_date: str
    dealer_name: str
    dealer_email: Optional[str] = None
    dealer_phone: Optional[str] = None
    delivery_address: Optional[str] = None
    requested_delivery_date: Optional[str] = None
    items: list[DeliveryOrderItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    notes: Optional[str] = None

    @field_serializer("subtotal", "tax", "total", when_used="json")
    def serialize_money(self, value: Decimal) -> str:
        return format_money(value)
