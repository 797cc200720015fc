"""Base adapter interface for message bus backends."""
from abc import ABC, abstractmethod
from typing import Awaitable, Callable
from ..event_models import Envelope

Handler = Callable[[Envelope], Awaitable[None]]


class BusAdapter(ABC):
    """Abstract interface for message bus backend implementations."""

    @abstractmethod
    async def send(self, channel: str, envelope: Envelope) -> bool:
        """
        Send an envelope to a named channel.

        Args:
            channel: Destination channel name
            envelope: The envelope to send

        Returns:
            True if the bus accepted the envelope for delivery, False if it
            rejected it. Transport failures are raised, not reported as False.
        """
        pass

    @abstractmethod
    def subscribe(self, channel: str, handler: Handler) -> None:
        """
        Register a handler invoked once per envelope delivered on a channel.

        Args:
            channel: Source channel name
            handler: Coroutine function receiving each envelope
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """
        pass

    async def start(self) -> None:
        """Begin delivering to subscribed handlers."""

    async def stop(self) -> None:
        """Stop delivery and release backend resources."""
