"""Request bodies and response shaping for the HTTP API."""

from typing import Any, Optional

from pydantic import Field, field_validator

from orderdesk.db.models.orders import Inquiry, Order
from orderdesk.models.base import ValueModel
from orderdesk.models.delivery import DeliveryOrderLine
from orderdesk.utils.money import format_money


class InquiryCreate(ValueModel):
    raw_inquiry: str
    dealer_name: Optional[str] = None
    dealer_email: Optional[str] = None
    dealer_phone: Optional[str] = None

    @field_validator("raw_inquiry")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("rawInquiry must not be empty")
        return value


class OrderCreate(ValueModel):
    dealer_name: Optional[str] = None
    dealer_email: Optional[str] = None
    dealer_phone: Optional[str] = None
    delivery_address: Optional[str] = None
    requested_delivery_date: Optional[str] = None
    notes: Optional[str] = None


class DirectOrderCreate(OrderCreate):
    """Order from explicit lines; lineTotal/subtotal/tax/total sent by the caller are ignored."""

    items: list[DeliveryOrderLine] = Field(min_length=1)


class StatusUpdate(ValueModel):
    status: str


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def inquiry_payload(row: Inquiry) -> dict[str, Any]:
    return {
        "id": row.id,
        "status": row.status,
        "rawInquiry": row.raw_inquiry,
        "dealerName": row.dealer_name,
        "dealerEmail": row.dealer_email,
        "dealerPhone": row.dealer_phone,
        "parseSource": row.parse_source,
        "parsedData": row.parsed_data,
        "pricingResponse": row.pricing_response,
        "createdAt": _iso(row.created_at),
    }


def order_payload(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "inquiryId": order.inquiry_id,
        "status": order.status,
        "dealerName": order.dealer_name,
        "dealerEmail": order.dealer_email,
        "dealerPhone": order.dealer_phone,
        "deliveryAddress": order.delivery_address,
        "requestedDeliveryDate": _iso(order.requested_delivery_date),
        "subtotal": format_money(order.subtotal),
        "tax": format_money(order.tax),
        "total": format_money(order.total),
        "items": [
            {
                "sku": item.sku,
                "productName": item.product_name,
                "quantity": item.quantity,
                "unit": item.unit,
                "unitPrice": format_money(item.unit_price),
                "lineTotal": format_money(item.line_total),
            }
            for item in order.items
        ],
        "notes": order.notes,
        "createdAt": _iso(order.created_at),
    }
