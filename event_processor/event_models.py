from datetime import datetime
from typing import Any, Dict

import orjson
from pydantic import BaseModel, ConfigDict, Field


class Envelope(BaseModel):
    """
    Event record carried over the bus.

    Field names follow Python conventions; the wire format uses the
    ``eventId``/``eventType`` aliases. Both spellings are accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="eventId", description="Unique event identifier")
    type: str | None = Field(default=None, alias="eventType", description="Event type discriminator")
    source: str | None = Field(default=None, description="Origin identifier")
    timestamp: datetime | None = None
    payload: Dict[str, Any] | None = None

    def to_json(self) -> bytes:
        """Serialize to JSON bytes using the wire field names."""
        return orjson.dumps(self.model_dump(mode="json", by_alias=True))

    @classmethod
    def from_json(cls, data: bytes | str) -> "Envelope":
        return cls.model_validate(orjson.loads(data))
