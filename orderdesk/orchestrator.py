"""Orchestrate the inquiry lifecycle: submit -> parse -> quote -> order -> delivery order."""

import asyncio
from datetime import date
from time import perf_counter
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError

from orderdesk.agents.delivery_order import build_delivery_order, order_lines_from_pricing
from orderdesk.agents.inquiry_parser import InquiryParser
from orderdesk.agents.llm import InquiryLLM, build_llm
from orderdesk.agents.pricing import PricingReconciler
from orderdesk.agents.smart_search import smart_search
from orderdesk.catalog.protocol import Catalog
from orderdesk.catalog.sql import SqlCatalog
from orderdesk.config import DATABASE_URL, LLM_ENABLED, OPENAI_API_KEY
from orderdesk.db import Database
from orderdesk.db.models.orders import INQUIRY_STATUSES, Inquiry, Order
from orderdesk.db.repositories import dealer_repo, inquiry_repo, order_repo
from orderdesk.models.catalog import CatalogProduct
from orderdesk.models.delivery import DeliveryOrderData, DeliveryOrderLine
from orderdesk.models.inquiry import ParsedInquiry, ParseOutcome
from orderdesk.models.pricing import PricingResponse
from orderdesk.utils.logger import get_logger, log_agent_step

logger = get_logger("orderdesk.orchestrator")

ANONYMOUS_DEALER = "Anonymous Dealer"
ORDER_NUMBER_ATTEMPTS = 3


class InquiryNotFoundError(LookupError):
    pass


class OrderNotFoundError(LookupError):
    pass


class InquiryNotParsedError(ValueError):
    pass


class NothingToOrderError(ValueError):
    """No orderable line: the fresh quote has no resolved, available item, or no lines were given."""


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.debug("orchestrator.unparseable_date", value=value)
        return None


class OrderDesk:
    """Composition of catalog, parser, reconciler and persistence.

    Parsing and pricing never raise for content problems; lookups of unknown
    inquiries/orders raise the typed errors above.
    """

    def __init__(
        self,
        database: Database,
        catalog: Catalog,
        llm: InquiryLLM,
        clock: Callable[[], date] = date.today,
    ):
        self.db = database
        self.catalog = catalog
        self.clock = clock
        self.parser = InquiryParser(catalog, llm, clock=clock)
        self.reconciler = PricingReconciler(catalog, clock=clock)

    @classmethod
    def from_settings(
        cls,
        database_url: Optional[str] = None,
        llm: Optional[InquiryLLM] = None,
    ) -> "OrderDesk":
        """Build from environment settings with a SQL-backed catalog."""
        database = Database(database_url or DATABASE_URL)
        database.init()
        return cls(database, SqlCatalog(database), llm or build_llm(LLM_ENABLED, OPENAI_API_KEY))

    def close(self) -> None:
        self.db.dispose()

    # Inquiries

    def get_inquiry(self, inquiry_id: int) -> Inquiry:
        row = inquiry_repo.get(self.db, inquiry_id)
        if row is None:
            raise InquiryNotFoundError(f"Inquiry not found: {inquiry_id}")
        return row

    def parsed_inquiry(self, inquiry_id: int) -> tuple[Inquiry, ParsedInquiry]:
        row = self.get_inquiry(inquiry_id)
        if not row.parsed_data:
            raise InquiryNotParsedError(f"Inquiry {inquiry_id} has not been parsed")
        return row, ParsedInquiry.model_validate(row.parsed_data)

    async def submit_inquiry(
        self,
        raw_text: str,
        dealer_name: Optional[str] = None,
        dealer_email: Optional[str] = None,
        dealer_phone: Optional[str] = None,
    ) -> tuple[int, ParseOutcome]:
        """Store the inquiry, parse it and attach the parsed blob. Returns (inquiry_id, outcome)."""
        start = perf_counter()
        row = await asyncio.to_thread(
            inquiry_repo.create,
            self.db,
            raw_text,
            dealer_name=dealer_name,
            dealer_email=dealer_email,
            dealer_phone=dealer_phone,
        )
        log = logger.bind(inquiry_id=row.id)
        log.info("submit_inquiry.start", chars=len(raw_text))

        outcome = await self.parser.parse(raw_text)
        parsed = outcome.inquiry
        name = parsed.dealer_name or dealer_name
        email = parsed.dealer_email or dealer_email
        phone = parsed.dealer_phone or dealer_phone
        dealer_id = await asyncio.to_thread(dealer_repo.ensure_dealer, self.db, email, name=name, phone=phone)
        await asyncio.to_thread(
            inquiry_repo.attach_parse,
            self.db,
            row.id,
            parsed.to_blob(),
            outcome.kind,
            dealer_name=name,
            dealer_email=email,
            dealer_phone=phone,
            dealer_id=dealer_id,
        )
        log.info(
            "submit_inquiry.complete",
            source=outcome.kind,
            reason=getattr(outcome, "reason", None),
            items=len(parsed.items),
            duration_ms=round((perf_counter() - start) * 1000, 2),
        )
        return row.id, outcome

    def list_inquiries(self, status: Optional[str] = None, limit: int = 50) -> list[Inquiry]:
        """Most recent inquiries first, optionally only those in `status`."""
        if status and status not in INQUIRY_STATUSES:
            raise ValueError(f"Unknown inquiry status {status!r}. Known: {list(INQUIRY_STATUSES)}")
        return inquiry_repo.list_recent(self.db, status=status, limit=limit)

    def update_inquiry_status(self, inquiry_id: int, status: str) -> Inquiry:
        if not inquiry_repo.update_status(self.db, inquiry_id, status):
            raise InquiryNotFoundError(f"Inquiry not found: {inquiry_id}")
        logger.info("inquiry.status_updated", inquiry_id=inquiry_id, status=status)
        return self.get_inquiry(inquiry_id)

    def quote_inquiry(self, inquiry_id: int) -> PricingResponse:
        """Price the stored parse against the live catalog and store the result."""
        _, parsed = self.parsed_inquiry(inquiry_id)
        pricing = self.reconciler.price_inquiry(parsed)
        inquiry_repo.attach_pricing(self.db, inquiry_id, pricing.to_blob())
        return pricing

    # Orders

    def convert_to_order(
        self,
        inquiry_id: int,
        dealer_name: Optional[str] = None,
        dealer_email: Optional[str] = None,
        dealer_phone: Optional[str] = None,
        delivery_address: Optional[str] = None,
        requested_delivery_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """Re-quote the inquiry and turn its resolved, available lines into an order."""
        row, parsed = self.parsed_inquiry(inquiry_id)
        pricing = self.reconciler.price_inquiry(parsed)
        inquiry_repo.attach_pricing(self.db, inquiry_id, pricing.to_blob())
        lines = order_lines_from_pricing(pricing)
        if not lines:
            raise NothingToOrderError(f"Inquiry {inquiry_id} has no available items to order")

        email = dealer_email or row.dealer_email
        kwargs = dict(
            dealer_name=dealer_name or row.dealer_name or ANONYMOUS_DEALER,
            lines=lines,
            inquiry_id=inquiry_id,
            dealer_id=row.dealer_id or dealer_repo.ensure_dealer(self.db, email, name=dealer_name),
            dealer_email=email,
            dealer_phone=dealer_phone or row.dealer_phone,
            delivery_address=delivery_address or parsed.delivery_address,
            requested_delivery_date=_parse_date(requested_delivery_date or parsed.requested_delivery_date),
            notes=notes,
        )
        order = self._insert_order(**kwargs)
        inquiry_repo.update_status(self.db, inquiry_id, inquiry_repo.STATUS_CONVERTED)
        log_agent_step(
            "OrderDesk",
            "Inquiry converted to order",
            {"inquiry_id": inquiry_id, "order_number": order.order_number, "lines": len(lines)},
        )
        return order

    def create_direct_order(
        self,
        lines: list[DeliveryOrderLine],
        dealer_name: Optional[str] = None,
        dealer_email: Optional[str] = None,
        dealer_phone: Optional[str] = None,
        delivery_address: Optional[str] = None,
        requested_delivery_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """Order from explicit lines, without an inquiry. Totals are recomputed from quantity and unit price."""
        if not lines:
            raise NothingToOrderError("A direct order needs at least one line")
        order = self._insert_order(
            dealer_name=dealer_name or ANONYMOUS_DEALER,
            lines=list(lines),
            dealer_id=dealer_repo.ensure_dealer(self.db, dealer_email, name=dealer_name, phone=dealer_phone),
            dealer_email=dealer_email,
            dealer_phone=dealer_phone,
            delivery_address=delivery_address,
            requested_delivery_date=_parse_date(requested_delivery_date),
            notes=notes,
        )
        log_agent_step(
            "OrderDesk",
            "Direct order created",
            {"order_number": order.order_number, "lines": len(order.items)},
        )
        return order

    def _insert_order(self, **kwargs) -> Order:
        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            order_number = order_repo.generate_order_number(self.clock())
            try:
                return order_repo.create_order(self.db, order_number, **kwargs)
            except IntegrityError:
                if attempt == ORDER_NUMBER_ATTEMPTS:
                    raise
                logger.warning("create_order.order_number_taken", order_number=order_number)

    def get_order(self, order_id: int) -> Order:
        order = order_repo.get(self.db, order_id)
        if order is None:
            raise OrderNotFoundError(f"Order not found: {order_id}")
        return order

    def get_order_by_number(self, order_number: str) -> Order:
        """Order tracking lookup by its DO number."""
        order = order_repo.get_by_number(self.db, order_number.strip().upper())
        if order is None:
            raise OrderNotFoundError(f"Order not found: {order_number}")
        return order

    def update_order_status(self, order_id: int, status: str) -> Order:
        if not order_repo.update_status(self.db, order_id, status):
            raise OrderNotFoundError(f"Order not found: {order_id}")
        logger.info("order.status_updated", order_id=order_id, status=status)
        return self.get_order(order_id)

    def generate_delivery_order(self, order_id: int) -> DeliveryOrderData:
        """Build DO data from the stored order lines (snapshotted prices) and stamp the order."""
        order = self.get_order(order_id)
        lines = [
            DeliveryOrderLine(
                sku=item.sku,
                product_name=item.product_name,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.unit_price,
            )
            for item in order.items
        ]
        data = build_delivery_order(
            order.order_number,
            order.dealer_name or ANONYMOUS_DEALER,
            lines,
            dealer_email=order.dealer_email,
            dealer_phone=order.dealer_phone,
            delivery_address=order.delivery_address,
            requested_delivery_date=(
                order.requested_delivery_date.isoformat() if order.requested_delivery_date else None
            ),
            notes=order.notes,
            today=self.clock(),
        )
        order_repo.mark_do_generated(self.db, order_id)
        log_agent_step("OrderDesk", "Delivery order generated", {"order_number": order.order_number})
        return data

    # Catalog

    def search_products(self, query: str) -> list[CatalogProduct]:
        return smart_search(query, self.catalog)

    def list_products(self) -> list[CatalogProduct]:
        return self.catalog.list_active()
