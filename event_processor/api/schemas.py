from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict
from ..event_models import Envelope

class PublishRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_id: str | None = Field(default=None, alias="eventId")
    event_type: str = Field(..., alias="eventType")
    source: str
    timestamp: datetime | None = None
    payload: Dict[str, Any]

    def to_envelope(self) -> Envelope:
        return Envelope(
            id=self.event_id,
            type=self.event_type,
            source=self.source,
            timestamp=self.timestamp,
            payload=self.payload,
        )

class PublishResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    event_id: str = Field(..., alias="eventId")
    message: str

class HealthResponse(BaseModel):
    status: str
    service: str
