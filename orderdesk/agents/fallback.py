"""Deterministic keyword/regex inquiry parser used when the LLM path yields nothing usable."""

import re
from datetime import date, timedelta
from typing import Iterable, Optional

from orderdesk.models.catalog import CatalogProduct
from orderdesk.models.inquiry import ParsedInquiry, ParsedInquiryItem
from orderdesk.utils.logger import log_agent_step

# (keywords, sku); the keyword nearest the quantity wins, table order breaks ties
KEYWORD_TABLE: tuple[tuple[tuple[str, ...], str], ...] = (
    (("led", "light", "panel"), "WH-ELEC-001"),
    (("power strip", "power"), "WH-ELEC-002"),
    (("extension cord", "extension"), "WH-ELEC-003"),
    (("shipping box", "box", "boxes"), "WH-PACK-001"),
    (("bubble wrap", "bubble"), "WH-PACK-002"),
    (("packing tape", "tape"), "WH-PACK-003"),
    (("helmet", "hard hat"), "WH-SAFE-001"),
    (("safety vest", "vest", "hi-vis"), "WH-SAFE-002"),
    (("glove", "nitrile"), "WH-SAFE-003"),
    (("pallet jack", "pallet"), "WH-TOOL-001"),
    (("hand truck", "dolly"), "WH-TOOL-002"),
    (("shelving", "shelf", "rack"), "WH-TOOL-003"),
    (("floor cleaner", "cleaner"), "WH-CLEA-001"),
    (("push broom", "broom"), "WH-CLEA-002"),
    (("trash bag", "garbage bag"), "WH-CLEA-003"),
)

QUANTITY_PATTERN = re.compile(r"(\d+)\s*(?:x\s*)?([a-zA-Z\s]+)", re.IGNORECASE)

DATE_CUE_PATTERNS = (
    re.compile(r"(?:by|before|on|deliver(?:y)?(?:\s+by)?)\s+(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})", re.IGNORECASE),
    re.compile(r"(?:next|this)\s+(monday|tuesday|wednesday|thursday|friday|saturday|sunday)", re.IGNORECASE),
    re.compile(r"(?:next|this)\s+week", re.IGNORECASE),
)

# Any date cue maps to a fixed horizon, not the date actually mentioned
DATE_CUE_DAYS = 7

MATCHED_CONFIDENCE = 0.6
UNMATCHED_CONFIDENCE = 0.3
MATCHED_NOTE = "Parsed using pattern matching. Please verify the items."
UNMATCHED_NOTE = (
    "Could not automatically parse products. Please specify product names and quantities clearly."
)
DEFAULT_QUANTITY_NOTE = "Quantity not specified, defaulting to 1"


# Keywords match at a word start, so "led" does not hit "sealed"; plurals still match
KEYWORD_PATTERNS: tuple[tuple[re.Pattern, str], ...] = tuple(
    (re.compile(rf"\b{re.escape(kw)}", re.IGNORECASE), sku)
    for keywords, sku in KEYWORD_TABLE
    for kw in keywords
)


def _keyword_offset(text: str, pattern: re.Pattern) -> Optional[int]:
    found = pattern.search(text)
    return found.start() if found else None


def _match_product(text: str, products_by_sku: dict[str, CatalogProduct]) -> Optional[CatalogProduct]:
    """Catalog product whose keyword starts earliest in `text`; table order breaks ties."""
    best: Optional[tuple[int, CatalogProduct]] = None
    for pattern, sku in KEYWORD_PATTERNS:
        product = products_by_sku.get(sku)
        if product is None:
            continue
        offset = _keyword_offset(text, pattern)
        if offset is not None and (best is None or offset < best[0]):
            best = (offset, product)
    return best[1] if best else None


def _mentions(text: str, sku: str) -> bool:
    return any(pattern.search(text) for pattern, kw_sku in KEYWORD_PATTERNS if kw_sku == sku)


def _item(product: CatalogProduct, quantity: int, notes: Optional[str] = None) -> ParsedInquiryItem:
    return ParsedInquiryItem(
        product_name=product.name,
        product_sku=product.sku,
        quantity=quantity,
        unit=product.unit,
        notes=notes,
    )


def extract_items(raw_text: str, products: Iterable[CatalogProduct]) -> list[ParsedInquiryItem]:
    """Quantity-bearing mentions first; bare keyword mentions (quantity 1) only if none matched."""
    products_by_sku = {p.sku: p for p in products}
    lowered = raw_text.lower()
    items: list[ParsedInquiryItem] = []
    seen: set[str] = set()

    for match in QUANTITY_PATTERN.finditer(raw_text):
        quantity = int(match.group(1))
        if quantity <= 0:
            continue
        words = match.group(2).strip().lower()
        product = _match_product(words, products_by_sku) or _match_product(lowered, products_by_sku)
        if product is None or product.sku in seen:
            continue
        seen.add(product.sku)
        items.append(_item(product, quantity))

    if items:
        return items

    for _, sku in KEYWORD_TABLE:
        product = products_by_sku.get(sku)
        if product is not None and _mentions(lowered, sku):
            items.append(_item(product, 1, DEFAULT_QUANTITY_NOTE))
    return items


def extract_delivery_date(raw_text: str, today: date) -> Optional[str]:
    """today + 7 days when the text carries any delivery-date cue, else None."""
    for pattern in DATE_CUE_PATTERNS:
        if pattern.search(raw_text):
            return (today + timedelta(days=DATE_CUE_DAYS)).isoformat()
    return None


def fallback_parse(raw_text: str, products: Iterable[CatalogProduct], today: date) -> ParsedInquiry:
    items = extract_items(raw_text, products)
    parsed = ParsedInquiry(
        items=items,
        requested_delivery_date=extract_delivery_date(raw_text, today),
        general_notes=MATCHED_NOTE if items else UNMATCHED_NOTE,
        confidence=MATCHED_CONFIDENCE if items else UNMATCHED_CONFIDENCE,
    )
    log_agent_step(
        "InquiryParser",
        "Fallback parse complete",
        {"items": len(items), "skus": [i.product_sku for i in items]},
    )
    return parsed
