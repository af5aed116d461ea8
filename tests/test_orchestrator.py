"""Tests for OrderDesk: inquiry -> quote -> order -> delivery order over an in-memory DB."""

import asyncio
import json
import sys
import threading
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from orderdesk.agents.llm import DisabledLLM
from orderdesk.catalog import SqlCatalog
from orderdesk.db import Database
from orderdesk.db.repositories import dealer_repo, inquiry_repo, order_repo
from orderdesk.models.delivery import DeliveryOrderLine
from orderdesk.models.inquiry import FallbackParse, PrimaryParse
from orderdesk.models.llm import TextReply
from orderdesk.orchestrator import (
    InquiryNotFoundError,
    InquiryNotParsedError,
    NothingToOrderError,
    OrderDesk,
    OrderNotFoundError,
)

TODAY = date(2026, 3, 2)


class StaticLLM:
    def __init__(self, payload: dict):
        self.payload = payload

    async def complete(self, messages):
        return TextReply(value=json.dumps(self.payload))


class TestOrderDesk(TestCase):
    def setUp(self):
        self.db = Database("sqlite:///:memory:")
        self.db.init()
        self.desk = OrderDesk(self.db, SqlCatalog(self.db), DisabledLLM(), clock=lambda: TODAY)

    def tearDown(self):
        self.desk.close()

    def _submit(self, text="I need 50 LED lights", **kwargs):
        return asyncio.run(self.desk.submit_inquiry(text, **kwargs))

    def test_submit_stores_parse(self):
        inquiry_id, outcome = self._submit(dealer_name="Acme", dealer_email="Buyer@Acme.test")
        self.assertIsInstance(outcome, FallbackParse)
        row = inquiry_repo.get(self.db, inquiry_id)
        self.assertEqual(row.status, "parsed")
        self.assertEqual(row.parse_source, "fallback")
        self.assertEqual(row.parsed_data["items"][0]["productSku"], "WH-ELEC-001")
        self.assertEqual(row.dealer_name, "Acme")
        self.assertIsNotNone(row.dealer_id)
        self.assertIsNotNone(dealer_repo.get_by_email(self.db, "buyer@acme.test"))

    def test_parsed_dealer_fields_win(self):
        llm = StaticLLM(
            {
                "dealerName": "Parsed Dealer",
                "items": [{"productName": "LED", "productSku": "WH-ELEC-001", "quantity": 10}],
                "confidence": 0.9,
            }
        )
        desk = OrderDesk(self.db, SqlCatalog(self.db), llm, clock=lambda: TODAY)
        inquiry_id, outcome = asyncio.run(desk.submit_inquiry("10 LED panels", dealer_name="Form Name"))
        self.assertIsInstance(outcome, PrimaryParse)
        row = inquiry_repo.get(self.db, inquiry_id)
        self.assertEqual(row.dealer_name, "Parsed Dealer")
        self.assertEqual(row.parse_source, "primary")

    def test_quote_stores_pricing(self):
        inquiry_id, _ = self._submit()
        pricing = self.desk.quote_inquiry(inquiry_id)
        self.assertEqual(pricing.total, Decimal("2430.00"))
        self.assertEqual(pricing.earliest_delivery_date, "2026-03-06")
        row = inquiry_repo.get(self.db, inquiry_id)
        self.assertEqual(row.status, "quoted")
        self.assertEqual(row.pricing_response["total"], "2430.00")

    def test_convert_and_generate_delivery_order(self):
        inquiry_id, _ = self._submit("Need 50 LED lights and 60 pallet jacks by next week", dealer_name="Acme")
        order = self.desk.convert_to_order(inquiry_id, delivery_address="1 Dock Rd")
        self.assertTrue(order.order_number.startswith("DO20260302-"))
        self.assertEqual([i.sku for i in order.items], ["WH-ELEC-001"])
        self.assertEqual(order.total, Decimal("2430.00"))
        self.assertEqual(order.dealer_name, "Acme")
        self.assertEqual(order.requested_delivery_date, date(2026, 3, 9))
        self.assertEqual(inquiry_repo.get(self.db, inquiry_id).status, "converted")

        do = self.desk.generate_delivery_order(order.id)
        self.assertEqual(do.order_number, order.order_number)
        self.assertEqual(do.order_date, "2026-03-02")
        self.assertEqual(do.delivery_address, "1 Dock Rd")
        self.assertEqual(do.requested_delivery_date, "2026-03-09")
        self.assertEqual((do.subtotal, do.tax, do.total), (Decimal("2250.00"), Decimal("180.00"), Decimal("2430.00")))
        self.assertIsNotNone(order_repo.get(self.db, order.id).do_generated_at)

    def test_anonymous_dealer(self):
        inquiry_id, _ = self._submit()
        order = self.desk.convert_to_order(inquiry_id)
        self.assertEqual(order.dealer_name, "Anonymous Dealer")

    def test_nothing_to_order(self):
        inquiry_id, _ = self._submit("Do you sell 20 unicorn saddles?")
        with self.assertRaises(NothingToOrderError):
            self.desk.convert_to_order(inquiry_id)
        self.assertEqual(inquiry_repo.get(self.db, inquiry_id).status, "quoted")

    def test_lookup_errors(self):
        with self.assertRaises(InquiryNotFoundError):
            self.desk.quote_inquiry(424242)
        with self.assertRaises(OrderNotFoundError):
            self.desk.generate_delivery_order(424242)
        unparsed = inquiry_repo.create(self.db, "10 helmets")
        with self.assertRaises(InquiryNotParsedError):
            self.desk.quote_inquiry(unparsed.id)

    def test_search_products(self):
        self.assertEqual([p.sku for p in self.desk.search_products("helmet safety")][:1], ["WH-SAFE-001"])
        self.assertEqual(len(self.desk.list_products()), 15)

    def test_submit_runs_repository_calls_off_the_event_loop(self):
        threads = []
        real_create = inquiry_repo.create

        def recording_create(*args, **kwargs):
            threads.append(threading.get_ident())
            return real_create(*args, **kwargs)

        with patch("orderdesk.orchestrator.inquiry_repo.create", side_effect=recording_create):
            inquiry_id, _ = self._submit()
        self.assertEqual(len(threads), 1)
        self.assertNotEqual(threads[0], threading.get_ident())
        self.assertEqual(inquiry_repo.get(self.db, inquiry_id).status, "parsed")

    def test_direct_order_recomputes_totals(self):
        lines = [
            DeliveryOrderLine.model_validate(
                {"sku": "WH-PACK-001", "productName": "Shipping Box", "quantity": 10, "unitPrice": "2.50", "lineTotal": "999"}
            ),
            DeliveryOrderLine(sku="CUSTOM-1", product_name="Custom crate", quantity=2, unit_price=Decimal("12.25")),
        ]
        order = self.desk.create_direct_order(lines, dealer_name="Acme", dealer_email="ops@acme.test")
        self.assertIsNone(order.inquiry_id)
        self.assertEqual([i.line_total for i in order.items], [Decimal("25.00"), Decimal("24.50")])
        self.assertEqual((order.subtotal, order.tax, order.total), (Decimal("49.50"), Decimal("3.96"), Decimal("53.46")))
        self.assertIsNotNone(order.dealer_id)

        do = self.desk.generate_delivery_order(order.id)
        self.assertEqual(do.total, Decimal("53.46"))
        self.assertEqual(do.dealer_name, "Acme")

    def test_direct_order_needs_lines(self):
        with self.assertRaises(NothingToOrderError):
            self.desk.create_direct_order([])

    def test_order_tracking_and_status(self):
        inquiry_id, _ = self._submit()
        order = self.desk.convert_to_order(inquiry_id)
        found = self.desk.get_order_by_number(order.order_number.lower())
        self.assertEqual(found.id, order.id)
        with self.assertRaises(OrderNotFoundError):
            self.desk.get_order_by_number("DO19990101-0000")

        self.assertEqual(self.desk.update_order_status(order.id, "shipped").status, "shipped")
        with self.assertRaises(ValueError):
            self.desk.update_order_status(order.id, "lost")
        with self.assertRaises(OrderNotFoundError):
            self.desk.update_order_status(424242, "shipped")

    def test_inquiry_listing_and_status(self):
        first, _ = self._submit("10 helmets")
        second, _ = self._submit("5 brooms")
        self.desk.quote_inquiry(second)
        self.assertEqual([r.id for r in self.desk.list_inquiries()][:2], [second, first])
        self.assertEqual([r.id for r in self.desk.list_inquiries(status="quoted")], [second])

        self.assertEqual(self.desk.update_inquiry_status(first, "rejected").status, "rejected")
        with self.assertRaises(ValueError):
            self.desk.list_inquiries(status="bogus")
        with self.assertRaises(InquiryNotFoundError):
            self.desk.update_inquiry_status(424242, "rejected")
