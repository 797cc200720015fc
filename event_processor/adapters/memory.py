"""In-memory message bus adapter."""
from collections import defaultdict, deque
from typing import Iterable
import structlog
from .base import BusAdapter, Handler
from ..event_models import Envelope

log = structlog.get_logger()


class InMemoryAdapter(BusAdapter):
    """
    In-memory implementation of the message bus.

    Handlers run inline during ``send``. Each delivered envelope is a fresh
    copy decoded from its JSON form, so subscribers never share state with
    the sender and non-serializable payloads fail at send time.
    """

    def __init__(self, history_size: int = 1000):
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._buffers: dict[str, deque[Envelope]] = defaultdict(lambda: deque(maxlen=history_size))

    async def send(self, channel: str, envelope: Envelope) -> bool:
        """Buffer the envelope and dispatch it to the channel's handlers."""
        data = envelope.to_json()
        message = Envelope.from_json(data)
        self._buffers[channel].append(message)
        log.info(
            "bus.sent",
            channel=channel,
            id=message.id,
            type=message.type,
            adapter="memory",
        )

        for handler in list(self._handlers.get(channel, ())):
            # No redelivery in memory: a failed handler loses the message
            try:
                await handler(Envelope.from_json(data))
            except Exception as e:
                log.error(
                    "bus.handler_failed",
                    channel=channel,
                    id=message.id,
                    error=str(e),
                    adapter="memory",
                    exc_info=True,
                )
        return True

    def subscribe(self, channel: str, handler: Handler) -> None:
        self._handlers[channel].append(handler)
        log.info("bus.subscribed", channel=channel, adapter="memory")

    async def list_recent(self, channel: str, limit: int = 50) -> Iterable[Envelope]:
        """List recent envelopes sent on a channel, newest first."""
        return list(reversed(self._buffers.get(channel, ())))[:limit]

    async def health_check(self) -> bool:
        """In-memory adapter is always healthy."""
        return True
