from fastapi import APIRouter, Depends, Request
from .schemas import HealthResponse, PublishRequest, PublishResponse
from ..services.gateway import Acknowledgment, Destination, EventGateway

router = APIRouter(prefix="/events", tags=["events"])


def get_gateway(request: Request) -> EventGateway:
    return request.app.state.gateway


def _response(ack: Acknowledgment, success: str, failure: str) -> PublishResponse:
    if ack.delivered:
        return PublishResponse(status="success", event_id=ack.id, message=success)
    return PublishResponse(status="failed", event_id=ack.id, message=failure)


@router.post("/publish", response_model=PublishResponse)
async def publish_event(req: PublishRequest, gateway: EventGateway = Depends(get_gateway)):
    """
    Publish an event to the output channel.

    Example:
    ```
    curl -X POST http://localhost:7070/events/publish \\
      -H "Content-Type: application/json" \\
      -d '{"eventType": "USER_CREATED", "source": "test", "payload": {"name": "John"}}'
    ```
    """
    ack = await gateway.submit(req.to_envelope(), Destination.PRIMARY)
    return _response(ack, "Event published successfully", "Failed to publish event")


@router.post("/input", response_model=PublishResponse)
async def publish_to_input(req: PublishRequest, gateway: EventGateway = Depends(get_gateway)):
    """Send an event to the input channel, where it is enriched and forwarded."""
    ack = await gateway.submit(req.to_envelope(), Destination.SECONDARY)
    return _response(ack, f"Event sent to {ack.channel}", f"Failed to send event to {ack.channel}")


@router.get("/health", response_model=HealthResponse)
async def health():
    return EventGateway.health()
