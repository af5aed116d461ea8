"""Parsed inquiry models and the tagged parse outcome."""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from orderdesk.models.base import ValueModel

FallbackReason = Literal[
    "llm_unavailable",
    "llm_error",
    "unrecognized_content",
    "invalid_json",
    "invalid_structure",
    "no_items",
]


class ParsedInquiryItem(ValueModel):
    """One product request line extracted from a dealer inquiry."""

    product_name: str
    product_sku: Optional[str] = None
    quantity: int = Field(gt=0)
    unit: Optional[str] = None
    notes: Optional[str] = None


class ParsedInquiry(ValueModel):
    """Structured form of a free-text inquiry. `items` is always a list."""

    dealer_name: Optional[str] = None
    dealer_email: Optional[str] = None
    dealer_phone: Optional[str] = None
    items: list[ParsedInquiryItem] = Field(default_factory=list)
    requested_delivery_date: Optional[str] = None
    delivery_address: Optional[str] = None
    general_notes: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)


class PrimaryParse(ValueModel):
    """Inquiry parsed by the LLM."""

    kind: Literal["primary"] = "primary"
    inquiry: ParsedInquiry


class FallbackParse(ValueModel):
    """Inquiry parsed by the keyword/regex fallback; `reason` says why the LLM path was skipped."""

    kind: Literal["fallback"] = "fallback"
    inquiry: ParsedInquiry
    reason: FallbackReason


ParseOutcome = Annotated[Union[PrimaryParse, FallbackParse], Field(discriminator="kind")]
