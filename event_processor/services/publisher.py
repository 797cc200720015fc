"""Single-attempt publication of envelopes to named channels."""
import time
import structlog

from ..adapters.base import BusAdapter
from ..event_models import Envelope
from ..metrics import Metrics

log = structlog.get_logger()


class Publisher:
    """
    Sends envelopes to the bus and reports whether the bus accepted them.

    A rejected send is logged and returned as False; it is never retried
    and never raised. Transport errors from the bus propagate.
    """

    def __init__(self, bus: BusAdapter, metrics: Metrics | None = None, logger=None):
        self._bus = bus
        self._metrics = metrics
        self._log = logger or log

    async def publish(self, channel: str, envelope: Envelope) -> bool:
        """
        Publish an envelope to a channel.

        Args:
            channel: Destination channel name
            envelope: Stamped envelope to send

        Returns:
            True if the bus accepted the envelope, False if it rejected it
        """
        self._log.info("event.publishing", event_id=envelope.id, channel=channel)
        start_time = time.time()

        delivered = await self._bus.send(channel, envelope)

        if self._metrics:
            self._metrics.record_publish(channel, delivered, time.time() - start_time)

        if delivered:
            self._log.info("event.published", event_id=envelope.id, channel=channel)
        else:
            self._log.error("event.publish_failed", event_id=envelope.id, channel=channel)
        return delivered
