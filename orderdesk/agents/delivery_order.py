"""Delivery-order data builder. Pure: totals are always recomputed from the lines."""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from orderdesk.models.delivery import DeliveryOrderData, DeliveryOrderItem, DeliveryOrderLine
from orderdesk.models.pricing import PricingResponse
from orderdesk.utils.money import tax_for

LineInput = Union[DeliveryOrderLine, dict[str, Any]]


def _as_line(line: LineInput) -> DeliveryOrderLine:
    if isinstance(line, DeliveryOrderLine):
        return line
    return DeliveryOrderLine.model_validate(line)


def build_delivery_order(
    order_number: str,
    dealer_name: str,
    lines: Iterable[LineInput],
    dealer_email: Optional[str] = None,
    dealer_phone: Optional[str] = None,
    delivery_address: Optional[str] = None,
    requested_delivery_date: Optional[str] = None,
    notes: Optional[str] = None,
    today: Optional[date] = None,
) -> DeliveryOrderData:
    """Build the DO record for rendering.

    Any totals present on the input lines are ignored. ``order_date`` is the build
    date, so regenerating a DO stamps the current day.
    """
    items = [
        DeliveryOrderItem(
            sku=line.sku,
            product_name=line.product_name,
            quantity=line.quantity,
            unit=line.unit,
            unit_price=line.unit_price,
            line_total=line.unit_price * line.quantity,
        )
        for line in map(_as_line, lines)
    ]
    subtotal = sum((item.line_total for item in items), Decimal("0"))
    tax = tax_for(subtotal)
    return DeliveryOrderData(
        order_number=order_number,
        order_date=(today or date.today()).isoformat(),
        dealer_name=dealer_name,
        dealer_email=dealer_email,
        dealer_phone=dealer_phone,
        delivery_address=delivery_address,
        requested_delivery_date=requested_delivery_date,
        items=items,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        notes=notes,
    )


def order_lines_from_pricing(pricing: PricingResponse) -> list[DeliveryOrderLine]:
    """Orderable lines of a quote: resolved and available items at the quoted price."""
    return [
        DeliveryOrderLine(
            sku=item.product_sku,
            product_name=item.product_name,
            quantity=item.requested_quantity,
            unit=item.unit,
            unit_price=item.unit_price,
        )
        for item in pricing.items
        if item.is_resolved and item.is_available
    ]
