"""Pydantic models for inquiry parsing, quoting and delivery orders."""

from orderdesk.models.catalog import Availability, CatalogProduct
from orderdesk.models.delivery import DeliveryOrderData, DeliveryOrderItem, DeliveryOrderLine
from orderdesk.models.inquiry import (
    FallbackParse,
    ParsedInquiry,
    ParsedInquiryItem,
    ParseOutcome,
    PrimaryParse,
)
from orderdesk.models.llm import ChatMessage, LLMReply, TextReply, UnrecognizedReply
from orderdesk.models.pricing import NOT_FOUND_SKU, PricingItem, PricingResponse

__all__ = [
    "Availability",
    "CatalogProduct",
    "DeliveryOrderData",
    "DeliveryOrderItem",
    "DeliveryOrderLine",
    "FallbackParse",
    "ParsedInquiry",
    "ParsedInquiryItem",
    "ParseOutcome",
    "PrimaryParse",
    "ChatMessage",
    "LLMReply",
    "TextReply",
    "UnrecognizedReply",
    "NOT_FOUND_SKU",
    "PricingItem",
    "PricingResponse",
]
