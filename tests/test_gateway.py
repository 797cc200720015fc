"""Tests for the entry point gateway."""
import pytest
from conftest import RecordingBus
from event_processor.event_models import Envelope
from event_processor.services.gateway import Destination, EventGateway
from event_processor.services.publisher import Publisher


def make_gateway(bus):
    return EventGateway(Publisher(bus), primary_channel="events-out", secondary_channel="events-in")


@pytest.mark.asyncio
async def test_submit_primary_stamps_and_routes():
    bus = RecordingBus()
    ack = await make_gateway(bus).submit(
        Envelope(type="USER_CREATED", source="test", payload={"name": "John"}),
        Destination.PRIMARY,
    )

    assert ack.delivered is True
    assert ack.channel == "events-out"
    assert len(ack.id) >= 36
    channel, sent = bus.sent[0]
    assert channel == "events-out"
    assert sent.id == ack.id
    assert sent.timestamp is not None


@pytest.mark.asyncio
async def test_submit_secondary_routes_to_input():
    bus = RecordingBus()
    ack = await make_gateway(bus).submit(Envelope(payload={}), Destination.SECONDARY)

    assert ack.channel == "events-in"
    assert [c for c, _ in bus.sent] == ["events-in"]


@pytest.mark.asyncio
async def test_submit_accepts_destination_string():
    bus = RecordingBus()
    ack = await make_gateway(bus).submit(Envelope(payload={}), "secondary")
    assert ack.channel == "events-in"


@pytest.mark.asyncio
async def test_submit_preserves_caller_id_and_allows_duplicates():
    bus = RecordingBus()
    gateway = make_gateway(bus)

    first = await gateway.submit(Envelope(id="abc-123", payload={}))
    second = await gateway.submit(Envelope(id="abc-123", payload={}))

    assert first.id == second.id == "abc-123"
    assert len(bus.sent) == 2


@pytest.mark.asyncio
async def test_submit_reports_rejection():
    bus = RecordingBus(accept=False)
    ack = await make_gateway(bus).submit(Envelope(payload={}))

    assert ack.delivered is False
    assert ack.id


def test_health_is_static():
    assert EventGateway.health() == {"status": "UP", "service": "event-processor"}
