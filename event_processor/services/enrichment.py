"""Processing-stage enrichment of envelopes."""
from datetime import datetime
from typing import Callable

from .clock import utc_now
from ..event_models import Envelope


class EnvelopeError(Exception):
    """Base exception for envelopes that cannot be processed"""

    def __init__(self, message: str, event_id: str | None = None):
        super().__init__(message)
        self.event_id = event_id


class MissingPayloadError(EnvelopeError):
    """Raised when an envelope reaches enrichment without a payload mapping"""
    pass


class Enricher:
    """Stamps envelopes as processed.

    Unlike identity stamping, the timestamp is always replaced with the
    processing time. The input envelope and its payload are left untouched.
    """

    PROCESSED_KEY = "processed"
    PROCESSED_AT_KEY = "processedAt"

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    def enrich(self, envelope: Envelope) -> Envelope:
        """
        Return a processed copy of the envelope.

        Raises:
            MissingPayloadError: If the envelope has no payload
        """
        if envelope.payload is None:
            raise MissingPayloadError(
                f"Envelope {envelope.id} has no payload to enrich", event_id=envelope.id
            )

        now = self._clock()
        payload = {
            **envelope.payload,
            self.PROCESSED_KEY: True,
            self.PROCESSED_AT_KEY: now.isoformat(),
        }
        return envelope.model_copy(update={"timestamp": now, "payload": payload})
