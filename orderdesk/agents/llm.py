"""LLM adapters. Every adapter returns an LLMReply so the parser never sees transport shapes."""

from typing import Any, Protocol

from orderdesk.agents.registry import get_agent
from orderdesk.models.llm import ChatMessage, LLMReply, TextReply, UnrecognizedReply
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.agents.llm")


class InquiryLLM(Protocol):
    """Single request/response chat call."""

    async def complete(self, messages: list[ChatMessage]) -> LLMReply: ...


def _part_field(part: Any, name: str) -> Any:
    if isinstance(part, dict):
        return part.get(name)
    return getattr(part, name, None)


def normalize_content(content: Any) -> LLMReply:
    """Map a model's message content (plain string or list of typed parts) to an LLMReply."""
    if isinstance(content, str):
        return TextReply(value=content)
    if isinstance(content, (list, tuple)):
        for part in content:
            if _part_field(part, "type") == "text":
                text = _part_field(part, "text")
                if isinstance(text, str):
                    return TextReply(value=text)
        return UnrecognizedReply(detail=f"no text part among {len(content)} content parts")
    return UnrecognizedReply(detail=f"unsupported content type {type(content).__name__}")


def _split_messages(messages: list[ChatMessage]) -> tuple[str, str]:
    system = "\n\n".join(m.content for m in messages if m.role == "system")
    user = "\n\n".join(m.content for m in messages if m.role != "system")
    return system, user


class PydanticAILLM:
    """Runs the registry's chat agent; system messages become the run's system prompt."""

    def __init__(self, agent_id: str = "inquiry_parser", model: Any = None):
        self.agent_id = agent_id
        self._model = model

    async def complete(self, messages: list[ChatMessage]) -> LLMReply:
        system, user = _split_messages(messages)
        try:
            agent = get_agent(self.agent_id, model=self._model)
            result = await agent.run(user, deps=system)
        except Exception as e:
            logger.warning("llm.call_failed", agent_id=self.agent_id, error=str(e), error_type=type(e).__name__)
            return UnrecognizedReply(cause="error", detail=f"{type(e).__name__}: {e}")
        return normalize_content(result.output)


class DisabledLLM:
    """Adapter used when no model is configured; always forces the fallback parser."""

    def __init__(self, detail: str = "llm disabled"):
        self.detail = detail

    async def complete(self, messages: list[ChatMessage]) -> LLMReply:
        return UnrecognizedReply(cause="disabled", detail=self.detail)


def build_llm(enabled: bool, api_key: str) -> InquiryLLM:
    """Pick the adapter for the current environment."""
    if not enabled:
        return DisabledLLM("llm disabled by configuration")
    if not api_key:
        return DisabledLLM("OPENAI_API_KEY not set")
    return PydanticAILLM()
