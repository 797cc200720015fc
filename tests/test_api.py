"""Tests for the HTTP entry point."""
import pytest
from httpx import AsyncClient, ASGITransport
from conftest import RecordingBus
from event_processor.adapters.memory import InMemoryAdapter
from event_processor.main import create_app

USER_CREATED = {"eventType": "USER_CREATED", "source": "test", "payload": {"name": "John"}}


def client_for(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_publish_endpoint_routes_to_output(settings):
    bus = RecordingBus()
    async with client_for(create_app(settings, bus=bus)) as client:
        response = await client.post("/events/publish", json=USER_CREATED)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert len(data["eventId"]) >= 36
    assert data["message"] == "Event published successfully"
    assert len(bus.sent) == 1
    channel, sent = bus.sent[0]
    assert channel == "events-out"
    assert sent.id == data["eventId"]
    assert sent.type == "USER_CREATED"
    assert sent.timestamp is not None


@pytest.mark.asyncio
async def test_input_endpoint_routes_to_input(settings):
    bus = RecordingBus()
    async with client_for(create_app(settings, bus=bus)) as client:
        response = await client.post("/events/input", json=USER_CREATED)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["message"] == "Event sent to events-in"
    assert [c for c, _ in bus.sent] == ["events-in"]
    assert bus.sent[0][1].id == data["eventId"]


@pytest.mark.asyncio
async def test_caller_id_and_timestamp_are_kept(settings):
    bus = RecordingBus()
    body = {**USER_CREATED, "eventId": "abc-123", "timestamp": "2026-10-19T08:00:00"}
    async with client_for(create_app(settings, bus=bus)) as client:
        response = await client.post("/events/publish", json=body)

    assert response.json()["eventId"] == "abc-123"
    sent = bus.sent[0][1]
    assert sent.timestamp.isoformat() == "2026-10-19T08:00:00"


@pytest.mark.asyncio
async def test_rejected_delivery_is_a_normal_response(settings):
    bus = RecordingBus(accept=False)
    async with client_for(create_app(settings, bus=bus)) as client:
        response = await client.post("/events/publish", json=USER_CREATED)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "failed"
    assert data["eventId"]
    assert data["message"] == "Failed to publish event"


@pytest.mark.asyncio
async def test_input_is_enriched_and_observed(settings):
    app = create_app(settings, bus=InMemoryAdapter())
    body = {"eventType": "ORDER_CREATED", "source": "test", "payload": {"orderId": "789", "amount": 99.99}}
    async with client_for(app) as client:
        response = await client.post("/events/input", json=body)

    event_id = response.json()["eventId"]
    observed = app.state.pipeline.observed
    assert [e.id for e in observed] == [event_id]
    payload = observed[0].payload
    assert payload["orderId"] == "789"
    assert payload["amount"] == 99.99
    assert payload["processed"] is True
    assert "processedAt" in payload


@pytest.mark.asyncio
async def test_publish_is_not_enriched(settings):
    bus = InMemoryAdapter()
    app = create_app(settings, bus=bus)
    async with client_for(app) as client:
        await client.post("/events/publish", json=USER_CREATED)

    assert app.state.pipeline.observed == []
    sent = list(await bus.list_recent("events-out"))
    assert len(sent) == 1
    assert "processed" not in sent[0].payload


@pytest.mark.asyncio
async def test_health_endpoint_is_static(settings):
    bus = RecordingBus(accept=False)
    async with client_for(create_app(settings, bus=bus)) as client:
        response = await client.get("/events/health")

    assert response.status_code == 200
    assert response.json() == {"status": "UP", "service": "event-processor"}


@pytest.mark.asyncio
async def test_health_endpoint_ignores_bus_failures(settings):
    bus = RecordingBus(error=RuntimeError("bus down"))
    async with client_for(create_app(settings, bus=bus)) as client:
        response = await client.get("/events/health")

    assert response.json() == {"status": "UP", "service": "event-processor"}
