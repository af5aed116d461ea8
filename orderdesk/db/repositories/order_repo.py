"""Order repository: order numbers, order + item creation, DO stamping."""

import random
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from orderdesk.db import Database
from orderdesk.db.models.catalog import Product
from orderdesk.db.models.orders import ORDER_STATUSES, Order, OrderItem
from orderdesk.models.delivery import DeliveryOrderLine
from orderdesk.utils.money import quantize_money, tax_for


def generate_order_number(today: date | None = None, rng: random.Random | None = None) -> str:
    """DO{YYYYMMDD}-{NNNN} with a random zero-padded 4-digit suffix."""
    today = today or date.today()
    suffix = (rng or random).randrange(10000)
    return f"DO{today:%Y%m%d}-{suffix:04d}"


def create_order(
    db: Database,
    order_number: str,
    dealer_name: str,
    lines: list[DeliveryOrderLine],
    inquiry_id: Optional[int] = None,
    dealer_id: Optional[int] = None,
    dealer_email: Optional[str] = None,
    dealer_phone: Optional[str] = None,
    delivery_address: Optional[str] = None,
    requested_delivery_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> Order:
    """Insert an order with its items. Prices and totals are stored as 2-decimal fixed point."""
    subtotal = sum((line.unit_price * line.quantity for line in lines), Decimal("0"))
    tax = tax_for(subtotal)
    with db.session() as session:
        skus = [line.sku for line in lines]
        product_ids = dict(
            session.execute(select(Product.sku, Product.id).where(Product.sku.in_(skus))).all()
        )
        order = Order(
            order_number=order_number,
            inquiry_id=inquiry_id,
            dealer_id=dealer_id,
            dealer_name=dealer_name,
            dealer_email=dealer_email,
            dealer_phone=dealer_phone,
            delivery_address=delivery_address,
            requested_delivery_date=requested_delivery_date,
            subtotal=quantize_money(subtotal),
            tax=tax,
            total=quantize_money(subtotal + tax),
            status="pending",
            notes=notes,
        )
        order.items = [
            OrderItem(
                product_id=product_ids.get(line.sku),
                sku=line.sku,
                product_name=line.product_name,
                quantity=line.quantity,
                unit=line.unit,
                unit_price=quantize_money(line.unit_price),
                line_total=quantize_money(line.unit_price * line.quantity),
            )
            for line in lines
        ]
        session.add(order)
        session.flush()
        return _load_detached(session, order.id)


def _load_detached(session, order_id: int) -> Optional[Order]:
    order = session.scalars(
        select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
    ).first()
    if order is not None:
        session.expunge(order)
    return order


def get(db: Database, order_id: int) -> Optional[Order]:
    """Return the order with items loaded, or None."""
    with db.session() as session:
        return _load_detached(session, order_id)


def get_by_number(db: Database, order_number: str) -> Optional[Order]:
    with db.session() as session:
        order_id = session.scalars(select(Order.id).where(Order.order_number == order_number)).first()
        if order_id is None:
            return None
        return _load_detached(session, order_id)


def mark_do_generated(db: Database, order_id: int, at: datetime | None = None) -> bool:
    with db.session() as session:
        order = session.get(Order, order_id)
        if order is None:
            return False
        order.do_generated_at = at or datetime.now(timezone.utc)
        return True


def update_status(db: Database, order_id: int, status: str) -> bool:
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status {status!r}. Known: {list(ORDER_STATUSES)}")
    with db.session() as session:
        order = session.get(Order, order_id)
        if order is None:
            return False
        order.status = status
        return True
