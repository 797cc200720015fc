"""Entry point: stamp submitted envelopes and route them to a channel."""
from enum import Enum
from pydantic import BaseModel
import structlog

from .publisher import Publisher
from .stamping import IdentityStamper
from .. import SERVICE_NAME
from ..event_models import Envelope

log = structlog.get_logger()


class Destination(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class Acknowledgment(BaseModel):
    id: str
    delivered: bool
    channel: str


class EventGateway:
    """
    Accepts submitted envelopes for publication.

    Every envelope is stamped before it is published. A rejected delivery
    is returned in the acknowledgment rather than raised.
    """

    def __init__(
        self,
        publisher: Publisher,
        primary_channel: str,
        secondary_channel: str,
        stamper: IdentityStamper | None = None,
        logger=None,
    ):
        self.publisher = publisher
        self.stamper = stamper or IdentityStamper()
        self._channels = {
            Destination.PRIMARY: primary_channel,
            Destination.SECONDARY: secondary_channel,
        }
        self._log = logger or log

    def channel_for(self, destination: Destination) -> str:
        return self._channels[Destination(destination)]

    async def submit(self, envelope: Envelope, destination: Destination = Destination.PRIMARY) -> Acknowledgment:
        """
        Stamp an envelope and publish it to the destination's channel.

        Args:
            envelope: Envelope as submitted by the caller
            destination: Which of the two configured channels to use

        Returns:
            Acknowledgment with the final event id and delivery outcome
        """
        stamped = self.stamper.stamp(envelope)
        channel = self.channel_for(destination)
        self._log.info(
            "event.submitted",
            event_id=stamped.id,
            event_type=stamped.type,
            source=stamped.source,
            destination=Destination(destination).value,
        )

        delivered = await self.publisher.publish(channel, stamped)
        return Acknowledgment(id=stamped.id, delivered=delivered, channel=channel)

    @staticmethod
    def health() -> dict[str, str]:
        """Static liveness indicator."""
        return {"status": "UP", "service": SERVICE_NAME}
