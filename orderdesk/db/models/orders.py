"""ORM models for the inquiry -> order lifecycle: Inquiry, Order, OrderItem."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderdesk.db.base import Base, TimestampMixin

INQUIRY_STATUSES = ("pending", "parsed", "quoted", "converted", "rejected")
ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled")


class Inquiry(Base, TimestampMixin):
    """Raw dealer inquiry plus the parsed and priced blobs (camelCase JSON)."""

    __tablename__ = "inquiries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    dealer_id: Mapped[Optional[int]] = mapped_column(ForeignKey("dealers.id"), nullable=True)
    dealer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    dealer_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    dealer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    raw_inquiry: Mapped[str] = mapped_column(Text, nullable=False)
    parsed_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    parse_source: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    pricing_response: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending", index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Order(Base, TimestampMixin):
    """Confirmed order. Totals are snapshotted at creation time."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    inquiry_id: Mapped[Optional[int]] = mapped_column(ForeignKey("inquiries.id"), nullable=True)
    dealer_id: Mapped[Optional[int]] = mapped_column(ForeignKey("dealers.id"), nullable=True)
    dealer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    dealer_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    dealer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    delivery_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    requested_delivery_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending", index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    do_generated_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", order_by="OrderItem.id", cascade="all, delete-orphan"
    )


class OrderItem(Base, TimestampMixin):
    """Order line with the unit price captured when the order was created."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    product_id: Mapped[Optional[int]] = mapped_column(ForeignKey("products.id"), nullable=True)
    sku: Mapped[str] = mapped_column(String(50), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default="pcs")
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    line_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="items")
