"""Inquiry-to-order pipeline: parser, pricing reconciler, DO builder, smart search."""

from orderdesk.agents.registry import (
    get_agent,
    get_agent_config,
    get_all_config,
    get_system_prompt_template,
    get_user_prompt_template,
    reload_config,
)
from orderdesk.agents.llm import DisabledLLM, InquiryLLM, PydanticAILLM, build_llm, normalize_content
from orderdesk.agents.fallback import fallback_parse
from orderdesk.agents.inquiry_parser import InquiryParser, strip_code_fences
from orderdesk.agents.pricing import PricingReconciler
from orderdesk.agents.delivery_order import build_delivery_order, order_lines_from_pricing
from orderdesk.agents.smart_search import smart_search

__all__ = [
    "get_agent",
    "get_agent_config",
    "get_all_config",
    "get_system_prompt_template",
    "get_user_prompt_template",
    "reload_config",
    "DisabledLLM",
    "InquiryLLM",
    "PydanticAILLM",
    "build_llm",
    "normalize_content",
    "fallback_parse",
    "InquiryParser",
    "strip_code_fences",
    "PricingReconciler",
    "build_delivery_order",
    "order_lines_from_pricing",
    "smart_search",
]
