"""Bus adapter selection from configuration."""
import structlog
from .base import BusAdapter
from .memory import InMemoryAdapter
from .redis_stream import RedisStreamAdapter
from ..config import Settings

log = structlog.get_logger()


def create_bus(settings: Settings) -> BusAdapter:
    """
    Create the bus adapter named by the BUS_ADAPTER setting.

    Returns:
        BusAdapter instance; falls back to memory when redis is requested
        without a REDIS_URL
    """
    if settings.BUS_ADAPTER == "redis":
        if not settings.REDIS_URL:
            log.warning(
                "adapter.fallback",
                requested="redis",
                actual="memory",
                reason="REDIS_URL not configured"
            )
            return InMemoryAdapter()

        log.info("adapter.selected", type="redis", url=str(settings.REDIS_URL))
        return RedisStreamAdapter(
            redis_url=str(settings.REDIS_URL),
            stream_prefix=settings.REDIS_STREAM_PREFIX,
            group=settings.REDIS_CONSUMER_GROUP,
        )

    log.info("adapter.selected", type="memory")
    return InMemoryAdapter()
