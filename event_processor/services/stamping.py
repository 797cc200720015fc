"""Fill-only identity and creation-time stamping."""
import uuid
from datetime import datetime
from typing import Callable

from .clock import utc_now
from ..event_models import Envelope


def new_event_id() -> str:
    return str(uuid.uuid4())


class IdentityStamper:
    """
    Assigns an id and a creation timestamp to envelopes lacking them.

    Present values are never overwritten, so stamping is idempotent.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = new_event_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._id_factory = id_factory
        self._clock = clock

    def stamp(self, envelope: Envelope) -> Envelope:
        """
        Return the envelope with ``id`` and ``timestamp`` populated.

        Args:
            envelope: Envelope as submitted by the caller

        Returns:
            A copy with the missing fields filled in, or the same envelope
            when both are already set
        """
        update = {}
        if not envelope.id:
            update["id"] = self._id_factory()
        if envelope.timestamp is None:
            update["timestamp"] = self._clock()

        if not update:
            return envelope
        return envelope.model_copy(update=update)
