"""Shared fixtures."""
import pytest
import structlog
from structlog.testing import LogCapture
from event_processor.adapters.base import BusAdapter, Handler
from event_processor.config import Settings
from event_processor.event_models import Envelope


class RecordingBus(BusAdapter):
    """Bus double that records sends and reports a fixed outcome."""

    def __init__(self, accept: bool = True, error: Exception | None = None):
        self.accept = accept
        self.error = error
        self.sent: list[tuple[str, Envelope]] = []
        self.subscriptions: dict[str, list[Handler]] = {}

    async def send(self, channel: str, envelope: Envelope) -> bool:
        if self.error is not None:
            raise self.error
        self.sent.append((channel, envelope))
        return self.accept

    def subscribe(self, channel: str, handler: Handler) -> None:
        self.subscriptions.setdefault(channel, []).append(handler)

    async def health_check(self) -> bool:
        return self.accept


@pytest.fixture
def settings():
    return Settings(
        BUS_ADAPTER="memory",
        OUTPUT_CHANNEL="events-out",
        INPUT_CHANNEL="events-in",
        PROCESSED_CHANNEL="events-processed",
    )


@pytest.fixture
def recording_bus():
    return RecordingBus()


@pytest.fixture
def log_capture():
    """A structlog logger whose entries are collected instead of printed."""
    capture = LogCapture()
    logger = structlog.wrap_logger(
        structlog.PrintLogger(),
        processors=[capture],
        wrapper_class=structlog.BoundLogger,
    )
    return logger, capture
