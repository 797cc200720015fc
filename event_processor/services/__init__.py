"""Stamping, enrichment, publication and consumption of envelopes."""
from .stamping import IdentityStamper
from .enrichment import Enricher, EnvelopeError, MissingPayloadError
from .publisher import Publisher
from .pipeline import ConsumerPipeline
from .gateway import Acknowledgment, Destination, EventGateway

__all__ = [
    "IdentityStamper",
    "Enricher",
    "EnvelopeError",
    "MissingPayloadError",
    "Publisher",
    "ConsumerPipeline",
    "Acknowledgment",
    "Destination",
    "EventGateway",
]
