"""Tests for the delivery-order builder: totals are derived, never trusted."""

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from pydantic import ValidationError

from orderdesk.agents.delivery_order import build_delivery_order, order_lines_from_pricing
from orderdesk.agents.pricing import PricingReconciler
from orderdesk.catalog import InMemoryCatalog
from orderdesk.models.inquiry import ParsedInquiry, ParsedInquiryItem

TODAY = date(2026, 3, 2)

LINES = [
    {"sku": "WH-ELEC-001", "productName": "Industrial LED Panel Light 60W", "quantity": 50, "unit": "pcs", "unitPrice": "45.00"},
    {"sku": "WH-PACK-001", "productName": "Corrugated Shipping Box", "quantity": 100, "unitPrice": "2.50"},
]


def test_totals_recomputed_from_lines():
    do = build_delivery_order("DO20260302-0042", "Acme Supply", LINES, today=TODAY)
    assert [i.line_total for i in do.items] == [Decimal("2250.00"), Decimal("250.00")]
    assert do.subtotal == Decimal("2500.00")
    assert do.tax == Decimal("200.00")
    assert do.total == Decimal("2700.00")
    assert do.order_date == "2026-03-02"
    assert do.items[1].unit == "pcs"


def test_supplied_totals_ignored_and_idempotent():
    tampered = [{**LINES[0], "lineTotal": "1.00", "total": "1.00"}, LINES[1]]
    first = build_delivery_order("DO20260302-0042", "Acme Supply", tampered, today=TODAY)
    second = build_delivery_order("DO20260302-0042", "Acme Supply", LINES, today=TODAY)
    assert (first.subtotal, first.tax, first.total) == (second.subtotal, second.tax, second.total)
    assert first.items[0].line_total == Decimal("2250.00")


def test_regeneration_stamps_build_date():
    do = build_delivery_order("DO20260101-0001", "Acme Supply", LINES, today=date(2026, 4, 1))
    assert do.order_date == "2026-04-01"


def test_blob_shape():
    blob = build_delivery_order(
        "DO20260302-0042",
        "Acme Supply",
        LINES,
        dealer_email="buyer@acme.test",
        delivery_address="1 Dock Rd",
        notes="Rear entrance",
        today=TODAY,
    ).to_blob()
    assert blob["orderNumber"] == "DO20260302-0042"
    assert blob["dealerEmail"] == "buyer@acme.test"
    assert blob["total"] == "2700.00"
    assert blob["items"][0]["unitPrice"] == "45.00"
    assert blob["notes"] == "Rear entrance"


def test_non_positive_quantity_rejected():
    with pytest.raises(ValidationError):
        build_delivery_order("DO1", "Acme", [{**LINES[0], "quantity": 0}], today=TODAY)


def test_order_lines_keep_resolved_available_items():
    reconciler = PricingReconciler(InMemoryCatalog.from_csv(), clock=lambda: TODAY)
    pricing = reconciler.price_inquiry(
        ParsedInquiry(
            items=[
                ParsedInquiryItem(product_name="LED", product_sku="WH-ELEC-001", quantity=50),
                ParsedInquiryItem(product_name="Pallet jack", product_sku="WH-TOOL-001", quantity=60),
                ParsedInquiryItem(product_name="Unicorn saddle", quantity=1),
            ],
            confidence=0.9,
        )
    )
    lines = order_lines_from_pricing(pricing)
    assert [(line.sku, line.quantity, line.unit_price) for line in lines] == [
        ("WH-ELEC-001", 50, Decimal("45.00"))
    ]
