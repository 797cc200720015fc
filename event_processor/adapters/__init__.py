"""Message bus adapters."""
from .base import BusAdapter, Handler
from .memory import InMemoryAdapter
from .redis_stream import RedisStreamAdapter
from .factory import create_bus

__all__ = ["BusAdapter", "Handler", "InMemoryAdapter", "RedisStreamAdapter", "create_bus"]
