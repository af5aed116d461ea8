"""LLM boundary types: role-tagged chat messages and the normalized reply union."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class TextReply(BaseModel):
    kind: Literal["text"] = "text"
    value: str


class UnrecognizedReply(BaseModel):
    """No usable text. `cause`: disabled (no model configured), error (call raised), content (odd shape)."""

    kind: Literal["unrecognized"] = "unrecognized"
    cause: Literal["disabled", "error", "content"] = "content"
    detail: str = ""


LLMReply = Annotated[Union[TextReply, UnrecognizedReply], Field(discriminator="kind")]
