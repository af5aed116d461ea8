"""Tests for the catalog collaborators (in-memory CSV and SQLAlchemy)."""

import sys
from pathlib import Path
from unittest import TestCase

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from orderdesk.catalog import InMemoryCatalog, SqlCatalog, product_from_row
from orderdesk.db import Database


class TestInMemoryCatalog(TestCase):
    def setUp(self):
        inactive = product_from_row(
            {"sku": "WH-OLD-001", "name": "Retired LED Tube", "category": "Electronics",
             "unit_price": "9.99", "is_active": "false"},
            99,
        )
        self.catalog = InMemoryCatalog(InMemoryCatalog.from_csv().list_active() + [inactive])

    def test_from_csv_loads_seed_catalog(self):
        products = InMemoryCatalog.from_csv().list_active()
        self.assertEqual(len(products), 15)
        led = products[0]
        self.assertEqual(led.sku, "WH-ELEC-001")
        self.assertEqual(str(led.unit_price), "45.00")
        self.assertEqual((led.stock_quantity, led.min_order_quantity, led.lead_time_days), (500, 10, 3))

    def test_inactive_products_hidden(self):
        self.assertIsNone(self.catalog.find_by_sku("WH-OLD-001"))
        self.assertNotIn("WH-OLD-001", [p.sku for p in self.catalog.search_by_text("led")])
        self.assertEqual(len(self.catalog.list_active()), 15)

    def test_search_is_case_insensitive_over_fields(self):
        self.assertEqual([p.sku for p in self.catalog.search_by_text("NITRILE")], ["WH-SAFE-003"])
        self.assertEqual(
            [p.sku for p in self.catalog.search_by_text("cleaning")],
            ["WH-CLEA-001", "WH-CLEA-002", "WH-CLEA-003"],
        )

    def test_check_availability(self):
        ok = self.catalog.check_availability("WH-TOOL-001", 50)
        self.assertTrue(ok.available)
        self.assertEqual((ok.available_quantity, ok.lead_time_days), (50, 7))
        self.assertFalse(self.catalog.check_availability("WH-TOOL-001", 51).available)
        missing = self.catalog.check_availability("NOPE", 1)
        self.assertEqual((missing.available, missing.available_quantity, missing.lead_time_days), (False, 0, 0))


class TestSqlCatalog(TestCase):
    @classmethod
    def setUpClass(cls):
        cls.db = Database("sqlite:///:memory:")
        cls.db.init()
        cls.catalog = SqlCatalog(cls.db)

    @classmethod
    def tearDownClass(cls):
        cls.db.dispose()

    def test_seeded_products(self):
        products = self.catalog.list_active()
        self.assertEqual(len(products), 15)
        self.assertEqual(products[0].sku, "WH-ELEC-001")
        self.assertIsNotNone(products[0].id)

    def test_find_and_search(self):
        self.assertEqual(self.catalog.find_by_sku("WH-PACK-002").unit, "roll")
        self.assertIsNone(self.catalog.find_by_sku("NOPE"))
        self.assertEqual([p.sku for p in self.catalog.search_by_text("broom")], ["WH-CLEA-002"])

    def test_check_availability(self):
        availability = self.catalog.check_availability("WH-ELEC-001", 600)
        self.assertFalse(availability.available)
        self.assertEqual(availability.available_quantity, 500)

    def test_store_errors_degrade_to_empty(self):
        broken = Database("sqlite://")
        broken._engine = create_engine("sqlite://")
        broken._session_factory = sessionmaker(bind=broken._engine)
        catalog = SqlCatalog(broken)
        self.assertEqual(catalog.list_active(), [])
        self.assertEqual(catalog.search_by_text("led"), [])
        self.assertIsNone(catalog.find_by_sku("WH-ELEC-001"))
        self.assertFalse(catalog.check_availability("WH-ELEC-001", 1).available)
        broken._engine.dispose()
