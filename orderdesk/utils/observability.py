"""Reusable helpers for observability: span attributes and previews.

Use these when attaching small, human-readable summaries to traces (e.g. Phoenix).
"""

import json
from typing import Any

# OpenInference attribute names understood by Phoenix (kind, input/output columns)
_OPENINFERENCE_SPAN_KIND = "openinference.span.kind"
_INPUT_VALUE = "input.value"
_INPUT_MIME_TYPE = "input.mime_type"
_OUTPUT_VALUE = "output.value"
_OUTPUT_MIME_TYPE = "output.mime_type"

PREVIEW_MAX_CHARS = 500


def _to_json(summary: dict[str, Any] | str) -> str:
    return summary if isinstance(summary, str) else json.dumps(summary, default=str)


def span_attributes_for_step(
    openinference_kind: str,
    input_summary: dict[str, Any] | str | None = None,
    output_summary: dict[str, Any] | str | None = None,
) -> dict[str, Any]:
    """Build span attributes for Phoenix: OpenInference kind and input/output.value.

    Keep payloads small (ids, counts, SKUs).

    Args:
        openinference_kind: One of CHAIN, TOOL, AGENT, LLM.
        input_summary: Dict or JSON string for input.value.
        output_summary: Dict or JSON string for output.value.

    Returns:
        Dict of attributes to pass to start_as_current_span(attributes=...).
    """
    attrs: dict[str, Any] = {_OPENINFERENCE_SPAN_KIND: openinference_kind}
    if input_summary is not None:
        attrs[_INPUT_VALUE] = _to_json(input_summary)
        attrs[_INPUT_MIME_TYPE] = "application/json"
    if output_summary is not None:
        attrs[_OUTPUT_VALUE] = _to_json(output_summary)
        attrs[_OUTPUT_MIME_TYPE] = "application/json"
    return attrs


def set_span_input_output(
    span: Any,
    input_summary: dict[str, Any] | str | None = None,
    output_summary: dict[str, Any] | str | None = None,
) -> None:
    """Set input.value and output.value (and mime_type) on an existing span."""
    if input_summary is not None:
        span.set_attribute(_INPUT_VALUE, _to_json(input_summary))
        span.set_attribute(_INPUT_MIME_TYPE, "application/json")
    if output_summary is not None:
        span.set_attribute(_OUTPUT_VALUE, _to_json(output_summary))
        span.set_attribute(_OUTPUT_MIME_TYPE, "application/json")


def text_preview(text: str, limit: int = PREVIEW_MAX_CHARS) -> str:
    """Single-line, length-limited preview of free text for logs and span attributes."""
    flat = " ".join((text or "").split())
    if len(flat) > limit:
        return flat[:limit] + "..."
    return flat
