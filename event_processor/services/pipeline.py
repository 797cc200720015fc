"""Consumer subscriptions: enrich-and-forward, terminal observation and receipt."""
from collections import deque
import structlog

from .enrichment import Enricher, MissingPayloadError
from .publisher import Publisher
from ..adapters.base import BusAdapter
from ..event_models import Envelope
from ..metrics import Metrics

log = structlog.get_logger()


class ConsumerPipeline:
    """
    Handlers invoked by the bus once per delivered envelope.

    - ``enrich_and_forward`` enriches inbound envelopes and publishes them
      to the downstream channel.
    - ``observe`` records processed envelopes from the downstream channel.
    - ``receive`` records envelopes published on the primary outbound channel.

    Enrichment failures are logged and the envelope is dropped. Redelivery
    of faulted messages is left to the bus.
    """

    def __init__(
        self,
        publisher: Publisher,
        downstream_channel: str,
        enricher: Enricher | None = None,
        metrics: Metrics | None = None,
        history_size: int = 100,
        logger=None,
    ):
        self.publisher = publisher
        self.downstream_channel = downstream_channel
        self.enricher = enricher or Enricher()
        self._metrics = metrics
        self._log = logger or log
        self.received_channel: str | None = None
        self._observed: deque[Envelope] = deque(maxlen=history_size)

    def register(self, bus: BusAdapter, inbound_channel: str, received_channel: str | None = None):
        """
        Subscribe the pipeline's handlers on the bus.

        Args:
            bus: Bus to subscribe on
            inbound_channel: Channel whose envelopes are enriched and forwarded
            received_channel: Optional channel whose envelopes are only logged
        """
        bus.subscribe(inbound_channel, self.enrich_and_forward)
        bus.subscribe(self.downstream_channel, self.observe)
        if received_channel:
            self.received_channel = received_channel
            bus.subscribe(received_channel, self.receive)

    async def enrich_and_forward(self, envelope: Envelope) -> Envelope | None:
        """
        Enrich an envelope and publish it downstream.

        Returns:
            The forwarded envelope, or None if it was dropped
        """
        self._log.info("event.processing", event_id=envelope.id, event_type=envelope.type)

        try:
            enriched = self.enricher.enrich(envelope)
        except MissingPayloadError as e:
            self._log.error(
                "event.enrichment_failed",
                event_id=e.event_id,
                reason="missing_payload",
                error=str(e),
            )
            if self._metrics:
                self._metrics.enrichment_failures_total.labels(reason="missing_payload").inc()
            return None

        if self._metrics:
            self._metrics.events_enriched_total.inc()
        self._log.info("event.enriched", event_id=enriched.id)

        delivered = await self.publisher.publish(self.downstream_channel, enriched)
        if not delivered:
            self._log.error(
                "event.forward_failed",
                event_id=enriched.id,
                channel=self.downstream_channel,
            )
        return enriched

    async def observe(self, envelope: Envelope) -> None:
        """Record a processed envelope. Nothing is forwarded."""
        self._log.info(
            "event.processed_consumed",
            event_id=envelope.id,
            event_type=envelope.type,
            payload=envelope.payload,
        )
        self._observed.append(envelope)
        if self._metrics:
            self._metrics.events_observed_total.labels(channel=self.downstream_channel).inc()

    async def receive(self, envelope: Envelope) -> None:
        """Record receipt of an envelope from the primary outbound channel."""
        self._log.info(
            "event.received",
            event_id=envelope.id,
            event_type=envelope.type,
            payload=envelope.payload,
        )
        if self._metrics:
            self._metrics.events_observed_total.labels(channel=self.received_channel or "unregistered").inc()

    @property
    def observed(self) -> list[Envelope]:
        """Processed envelopes seen by ``observe``, oldest first."""
        return list(self._observed)
