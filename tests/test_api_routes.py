"""Tests for the HTTP API: inquiries, pricing, orders, delivery orders, catalog."""

import os
import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from orderdesk.agents.llm import DisabledLLM
from orderdesk.api.server import create_app
from orderdesk.catalog import SqlCatalog
from orderdesk.db import Database
from orderdesk.orchestrator import OrderDesk


class TestApiRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        # File DB so the threadpool-run sync routes share data
        cls._db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
        cls._db_file.close()
        cls.db = Database(f"sqlite:///{cls._db_file.name}")
        cls.db.init()
        desk = OrderDesk(cls.db, SqlCatalog(cls.db), DisabledLLM(), clock=lambda: date(2026, 3, 2))
        cls.client = TestClient(create_app(desk))

    @classmethod
    def tearDownClass(cls):
        cls.db.dispose()
        os.unlink(cls._db_file.name)

    def _create_inquiry(self, text="I need 50 LED lights", **extra):
        resp = self.client.post("/inquiries", json={"rawInquiry": text, **extra})
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})

    def test_create_inquiry(self):
        data = self._create_inquiry(dealerName="Acme")
        self.assertEqual(data["parseSource"], "fallback")
        self.assertEqual(data["fallbackReason"], "llm_unavailable")
        self.assertEqual(data["parsedData"]["items"][0]["productSku"], "WH-ELEC-001")
        self.assertEqual(data["parsedData"]["confidence"], 0.6)

        stored = self.client.get(f"/inquiries/{data['inquiryId']}").json()
        self.assertEqual(stored["status"], "parsed")
        self.assertEqual(stored["dealerName"], "Acme")

    def test_blank_inquiry_rejected(self):
        self.assertEqual(self.client.post("/inquiries", json={"rawInquiry": "   "}).status_code, 422)

    def test_pricing(self):
        inquiry_id = self._create_inquiry()["inquiryId"]
        resp = self.client.post(f"/inquiries/{inquiry_id}/pricing")
        self.assertEqual(resp.status_code, 200)
        pricing = resp.json()
        self.assertEqual(pricing["subtotal"], "2250.00")
        self.assertEqual(pricing["estimatedTax"], "180.00")
        self.assertEqual(pricing["total"], "2430.00")
        self.assertEqual(pricing["earliestDeliveryDate"], "2026-03-06")
        self.assertTrue(pricing["allItemsAvailable"])

    def test_order_and_delivery_order(self):
        inquiry_id = self._create_inquiry(dealerName="Acme")["inquiryId"]
        resp = self.client.post(f"/inquiries/{inquiry_id}/orders", json={"deliveryAddress": "1 Dock Rd"})
        self.assertEqual(resp.status_code, 201, resp.text)
        order = resp.json()
        self.assertTrue(order["orderNumber"].startswith("DO20260302-"))
        self.assertEqual(order["total"], "2430.00")
        self.assertEqual(order["items"][0]["lineTotal"], "2250.00")

        self.assertEqual(self.client.get(f"/orders/{order['id']}").json()["orderNumber"], order["orderNumber"])
        do = self.client.post(f"/orders/{order['id']}/delivery-order").json()
        self.assertEqual(do["orderNumber"], order["orderNumber"])
        self.assertEqual(do["dealerName"], "Acme")
        self.assertEqual(do["deliveryAddress"], "1 Dock Rd")
        self.assertEqual(do["tax"], "180.00")

    def test_order_without_body(self):
        inquiry_id = self._create_inquiry()["inquiryId"]
        resp = self.client.post(f"/inquiries/{inquiry_id}/orders")
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["dealerName"], "Anonymous Dealer")

    def test_error_mapping(self):
        self.assertEqual(self.client.get("/inquiries/999999").status_code, 404)
        self.assertEqual(self.client.post("/inquiries/999999/pricing").status_code, 404)
        self.assertEqual(self.client.post("/orders/999999/delivery-order").status_code, 404)
        inquiry_id = self._create_inquiry("Do you sell 20 unicorn saddles?")["inquiryId"]
        resp = self.client.post(f"/inquiries/{inquiry_id}/orders")
        self.assertEqual(resp.status_code, 400)

    def test_products(self):
        products = self.client.get("/products").json()
        self.assertEqual(len(products), 15)
        self.assertEqual(products[0]["unitPrice"], "45.00")
        found = self.client.get("/products/search", params={"q": "gloves"}).json()
        self.assertEqual([p["sku"] for p in found], ["WH-SAFE-003"])

    def test_direct_order_ignores_caller_totals(self):
        body = {
            "dealerName": "Walk-in Co",
            "items": [
                {"sku": "WH-PACK-001", "productName": "Shipping Box", "quantity": 10, "unitPrice": "2.50", "lineTotal": "1.00"}
            ],
            "subtotal": "1.00",
            "total": "1.00",
        }
        resp = self.client.post("/orders", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        order = resp.json()
        self.assertIsNone(order["inquiryId"])
        self.assertEqual(order["items"][0]["lineTotal"], "25.00")
        self.assertEqual((order["subtotal"], order["tax"], order["total"]), ("25.00", "2.00", "27.00"))

        do = self.client.post(f"/orders/{order['id']}/delivery-order").json()
        self.assertEqual(do["total"], "27.00")
        self.assertEqual(do["dealerName"], "Walk-in Co")

    def test_direct_order_validation(self):
        self.assertEqual(self.client.post("/orders", json={"items": []}).status_code, 422)
        bad_line = {"items": [{"sku": "X", "productName": "X", "quantity": 0, "unitPrice": "1"}]}
        self.assertEqual(self.client.post("/orders", json=bad_line).status_code, 422)

    def test_order_tracking_and_status(self):
        inquiry_id = self._create_inquiry()["inquiryId"]
        order = self.client.post(f"/inquiries/{inquiry_id}/orders").json()

        tracked = self.client.get(f"/orders/by-number/{order['orderNumber']}")
        self.assertEqual(tracked.status_code, 200)
        self.assertEqual(tracked.json()["id"], order["id"])
        self.assertEqual(self.client.get("/orders/by-number/DO19990101-0000").status_code, 404)

        resp = self.client.patch(f"/orders/{order['id']}/status", json={"status": "confirmed"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["status"], "confirmed")
        self.assertEqual(self.client.patch(f"/orders/{order['id']}/status", json={"status": "lost"}).status_code, 400)
        self.assertEqual(self.client.patch("/orders/999999/status", json={"status": "shipped"}).status_code, 404)

    def test_inquiry_listing_and_status(self):
        inquiry_id = self._create_inquiry("10 helmets please")["inquiryId"]
        resp = self.client.patch(f"/inquiries/{inquiry_id}/status", json={"status": "rejected"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["status"], "rejected")

        rejected = self.client.get("/inquiries", params={"status": "rejected"}).json()
        self.assertIn(inquiry_id, [r["id"] for r in rejected])
        self.assertTrue(all(r["status"] == "rejected" for r in rejected))
        self.assertEqual(self.client.get("/inquiries", params={"status": "bogus"}).status_code, 400)
        self.assertEqual(self.client.patch("/inquiries/999999/status", json={"status": "parsed"}).status_code, 404)

    def test_config_routes(self):
        agents = self.client.get("/config/agents").json()
        self.assertIn("inquiry_parser", agents["agents"])
        self.assertEqual(self.client.get("/config/agents/nope").status_code, 404)


if __name__ == "__main__":
    unittest.main()
