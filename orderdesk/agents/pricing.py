"""Pricing and availability reconciler: parsed inquiry -> priced, availability-annotated quote."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional

from orderdesk.catalog.protocol import Catalog
from orderdesk.models.catalog import CatalogProduct
from orderdesk.models.inquiry import ParsedInquiry, ParsedInquiryItem
from orderdesk.models.pricing import NOT_FOUND_SKU, PricingItem, PricingResponse
from orderdesk.utils.logger import get_logger, log_agent_step
from orderdesk.utils.money import format_money, tax_for
from orderdesk.utils.observability import set_span_input_output, span_attributes_for_step
from orderdesk.utils.tracing import get_tracer

logger = get_logger("orderdesk.agents.pricing")

# Added on top of the longest lead time
DELIVERY_BUFFER_DAYS = 1

NO_ITEMS_MESSAGE = (
    "No products were identified in your inquiry. "
    "Please specify the products and quantities you need."
)
NOT_FOUND_NOTE = "Product not found in catalog. Please contact sales for assistance."


def earliest_delivery_date(today: date, max_lead_time_days: int) -> date:
    return today + timedelta(days=max(max_lead_time_days, 1) + DELIVERY_BUFFER_DAYS)


def build_message(items: list[PricingItem], total: Decimal, earliest: date) -> str:
    """Summary for the dealer: nothing found, everything available, or which lines are not."""
    if not items:
        return NO_ITEMS_MESSAGE
    unavailable = [i for i in items if not i.is_available]
    if not unavailable:
        return (
            f"Great news! All {len(items)} item(s) are available. "
            f"Your order total is ${format_money(total)} with earliest delivery on {earliest.isoformat()}."
        )
    names = ", ".join(i.product_name for i in unavailable)
    return (
        f"{len(items) - len(unavailable)} of {len(items)} items are available. "
        f"Some items have availability issues: {names}. Please review the details below."
    )


class PricingReconciler:
    """Resolves parsed items against the live catalog. Prices are never cached."""

    def __init__(self, catalog: Catalog, clock: Callable[[], date] = date.today):
        self.catalog = catalog
        self.clock = clock

    def resolve(self, item: ParsedInquiryItem) -> Optional[CatalogProduct]:
        """Exact SKU lookup first, then the first text-search hit on the product name."""
        if item.product_sku:
            product = self.catalog.find_by_sku(item.product_sku)
            if product is not None:
                return product
        matches = self.catalog.search_by_text(item.product_name) if item.product_name else []
        return matches[0] if matches else None

    def _unresolved(self, item: ParsedInquiryItem) -> PricingItem:
        return PricingItem(
            product_name=item.product_name,
            product_sku=NOT_FOUND_SKU,
            requested_quantity=item.quantity,
            available_quantity=0,
            is_available=False,
            unit_price=Decimal("0"),
            unit=item.unit or "pcs",
            line_total=Decimal("0"),
            lead_time_days=0,
            min_order_quantity=0,
            notes=NOT_FOUND_NOTE,
        )

    def price_item(self, item: ParsedInquiryItem) -> PricingItem:
        product = self.resolve(item)
        if product is None:
            logger.info("pricing.item_not_found", product_name=item.product_name, sku=item.product_sku)
            return self._unresolved(item)

        availability = self.catalog.check_availability(product.sku, item.quantity)
        notes = None
        if item.quantity < product.min_order_quantity:
            # Advisory only; the line is still priced and may be available
            notes = f"Minimum order quantity is {product.min_order_quantity}"
        return PricingItem(
            product_name=product.name,
            product_sku=product.sku,
            requested_quantity=item.quantity,
            available_quantity=availability.available_quantity,
            is_available=availability.available,
            unit_price=product.unit_price,
            unit=product.unit,
            line_total=product.unit_price * item.quantity,
            lead_time_days=availability.lead_time_days,
            min_order_quantity=product.min_order_quantity,
            notes=notes,
        )

    def price_inquiry(self, parsed: ParsedInquiry) -> PricingResponse:
        """Quote every parsed item at current catalog prices. Unknown products become NOT_FOUND lines."""
        tracer = get_tracer()
        attrs = span_attributes_for_step("CHAIN", input_summary={"items": len(parsed.items)})
        with tracer.start_as_current_span("pricing.price_inquiry", attributes=attrs) as span:
            items = [self.price_item(item) for item in parsed.items]

            subtotal = sum((i.line_total for i in items if i.is_resolved), Decimal("0"))
            tax = tax_for(subtotal)
            total = subtotal + tax
            max_lead = max((i.lead_time_days for i in items if i.is_resolved), default=0)
            earliest = earliest_delivery_date(self.clock(), max_lead)

            response = PricingResponse(
                items=items,
                subtotal=subtotal,
                estimated_tax=tax,
                total=total,
                earliest_delivery_date=earliest.isoformat(),
                all_items_available=all(i.is_available for i in items),
                message=build_message(items, total, earliest),
            )
            set_span_input_output(
                span,
                output_summary={
                    "total": format_money(total),
                    "all_items_available": response.all_items_available,
                    "not_found": sum(1 for i in items if not i.is_resolved),
                },
            )
            log_agent_step(
                "PricingReconciler",
                "Priced inquiry",
                {"items": len(items), "total": format_money(total), "all_available": response.all_items_available},
            )
            return response
