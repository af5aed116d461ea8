"""Shared pydantic base for the value objects exchanged with callers and storage."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ValueModel(BaseModel):
    """Immutable model; serializes with camelCase keys, accepts either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_blob(self) -> dict:
        """JSON-ready dict with camelCase keys (Decimals as strings) for persistence."""
        return self.model_dump(mode="json", by_alias=True)
