"""Event processor: stamp, publish, enrich and observe events over a message bus."""

__version__ = "0.1.0"

SERVICE_NAME = "event-processor"
