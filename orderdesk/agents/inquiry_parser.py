"""Inquiry parser: LLM-backed extraction of line items with a deterministic fallback."""

import asyncio
import json
import math
from datetime import date
from typing import Any, Callable, Optional

from pydantic import ValidationError

from orderdesk.agents.fallback import fallback_parse
from orderdesk.agents.llm import InquiryLLM
from orderdesk.agents.registry import get_system_prompt_template, get_user_prompt_template
from orderdesk.catalog.protocol import Catalog
from orderdesk.models.catalog import CatalogProduct
from orderdesk.models.inquiry import (
    FallbackParse,
    FallbackReason,
    ParsedInquiry,
    ParsedInquiryItem,
    ParseOutcome,
    PrimaryParse,
)
from orderdesk.models.llm import ChatMessage, UnrecognizedReply
from orderdesk.utils.logger import get_logger, log_agent_step
from orderdesk.utils.observability import set_span_input_output, span_attributes_for_step, text_preview
from orderdesk.utils.tracing import get_tracer

logger = get_logger("orderdesk.agents.inquiry_parser")

DEFAULT_CONFIDENCE = 0.5

_UNRECOGNIZED_REASONS: dict[str, FallbackReason] = {
    "disabled": "llm_unavailable",
    "error": "llm_error",
    "content": "unrecognized_content",
}

# Contact fields kept from an item-less LLM answer when degrading to the fallback
_CARRIED_FIELDS = ("dealer_name", "dealer_email", "dealer_phone", "delivery_address", "requested_delivery_date")


class InvalidStructure(ValueError):
    """LLM JSON that is not an inquiry object."""


def build_catalog_context(products: list[CatalogProduct]) -> str:
    """One line per active product: SKU, name, category, price and unit."""
    return "\n".join(
        f"- {p.sku}: {p.name} ({p.category}, ${p.unit_price}/{p.unit})" for p in products
    )


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json / ``` markdown fence."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _opt_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return DEFAULT_CONFIDENCE
    return min(max(float(value), 0.0), 1.0)


def _coerce_items(raw_items: Any) -> list[ParsedInquiryItem]:
    if not isinstance(raw_items, list):
        return []
    items = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue
        try:
            items.append(ParsedInquiryItem.model_validate(raw))
        except ValidationError as e:
            logger.warning("inquiry_parser.item_dropped", item=raw, errors=e.error_count())
    return items


def coerce_parsed_inquiry(data: Any) -> ParsedInquiry:
    """Build a ParsedInquiry from decoded LLM JSON. Bad items are dropped, confidence defaults to 0.5."""
    if not isinstance(data, dict):
        raise InvalidStructure(f"expected a JSON object, got {type(data).__name__}")
    return ParsedInquiry(
        dealer_name=_opt_str(data.get("dealerName")),
        dealer_email=_opt_str(data.get("dealerEmail")),
        dealer_phone=_opt_str(data.get("dealerPhone")),
        items=_coerce_items(data.get("items")),
        requested_delivery_date=_opt_str(data.get("requestedDeliveryDate")),
        delivery_address=_opt_str(data.get("deliveryAddress")),
        general_notes=_opt_str(data.get("generalNotes")),
        confidence=_coerce_confidence(data.get("confidence")),
    )


class InquiryParser:
    """Turns raw inquiry text into a ParseOutcome. Never raises for LLM or content failures."""

    def __init__(
        self,
        catalog: Catalog,
        llm: InquiryLLM,
        agent_id: str = "inquiry_parser",
        clock: Callable[[], date] = date.today,
    ):
        self.catalog = catalog
        self.llm = llm
        self.agent_id = agent_id
        self.clock = clock

    def build_messages(self, raw_text: str, products: list[CatalogProduct]) -> list[ChatMessage]:
        system = get_system_prompt_template(self.agent_id).format(catalog=build_catalog_context(products))
        user = (get_user_prompt_template(self.agent_id) or "{raw_inquiry}").format(raw_inquiry=raw_text)
        return [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)]

    def _fallback(
        self,
        raw_text: str,
        products: list[CatalogProduct],
        reason: FallbackReason,
        primary: Optional[ParsedInquiry] = None,
    ) -> FallbackParse:
        logger.info("inquiry_parser.fallback", reason=reason)
        parsed = fallback_parse(raw_text, products, self.clock())
        if primary is not None:
            carried = {
                name: getattr(primary, name)
                for name in _CARRIED_FIELDS
                if getattr(parsed, name) is None and getattr(primary, name) is not None
            }
            if carried:
                parsed = parsed.model_copy(update=carried)
        return FallbackParse(inquiry=parsed, reason=reason)

    async def _parse_primary(self, raw_text: str, products: list[CatalogProduct]) -> ParseOutcome:
        try:
            messages = self.build_messages(raw_text, products)
        except (FileNotFoundError, ValueError, KeyError) as e:
            logger.error("inquiry_parser.prompt_config_error", error=str(e))
            return self._fallback(raw_text, products, "llm_unavailable")

        try:
            reply = await self.llm.complete(messages)
        except Exception as e:
            logger.warning("inquiry_parser.llm_error", error=str(e), error_type=type(e).__name__)
            return self._fallback(raw_text, products, "llm_error")

        if isinstance(reply, UnrecognizedReply):
            logger.info("inquiry_parser.llm_unrecognized", cause=reply.cause, detail=reply.detail)
            return self._fallback(raw_text, products, _UNRECOGNIZED_REASONS[reply.cause])

        cleaned = strip_code_fences(reply.value)
        logger.debug("inquiry_parser.llm_content", preview=text_preview(cleaned, 200))
        try:
            parsed = coerce_parsed_inquiry(json.loads(cleaned))
        except json.JSONDecodeError as e:
            logger.warning("inquiry_parser.invalid_json", error=str(e))
            return self._fallback(raw_text, products, "invalid_json")
        except (InvalidStructure, ValidationError) as e:
            logger.warning("inquiry_parser.invalid_structure", error=str(e))
            return self._fallback(raw_text, products, "invalid_structure")

        if not parsed.items:
            return self._fallback(raw_text, products, "no_items", primary=parsed)
        return PrimaryParse(inquiry=parsed)

    async def parse(self, raw_text: str) -> ParseOutcome:
        """Parse an inquiry; the outcome says whether the LLM or the fallback produced it."""
        tracer = get_tracer()
        attrs = span_attributes_for_step("CHAIN", input_summary={"chars": len(raw_text or "")})
        with tracer.start_as_current_span("inquiry_parser.parse", attributes=attrs) as span:
            log_agent_step("InquiryParser", "Parsing inquiry", {"preview": text_preview(raw_text, 100)})
            products = await asyncio.to_thread(self.catalog.list_active)
            logger.debug("inquiry_parser.catalog_loaded", products=len(products))
            outcome = await self._parse_primary(raw_text or "", products)
            set_span_input_output(
                span,
                output_summary={
                    "kind": outcome.kind,
                    "items": len(outcome.inquiry.items),
                    "confidence": outcome.inquiry.confidence,
                },
            )
            log_agent_step(
                "InquiryParser",
                "Parsed inquiry",
                {"kind": outcome.kind, "items": len(outcome.inquiry.items), "confidence": outcome.inquiry.confidence},
            )
            return outcome

    async def parse_inquiry(self, raw_text: str) -> ParsedInquiry:
        return (await self.parse(raw_text)).inquiry
