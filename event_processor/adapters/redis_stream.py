"""Redis Streams message bus adapter."""
import asyncio
import socket
import time
from collections import defaultdict
import structlog
from redis import Redis
from redis.exceptions import RedisError, ResponseError
from .base import BusAdapter, Handler
from ..event_models import Envelope
from ..config import get_settings

log = structlog.get_logger()


class RedisStreamAdapter(BusAdapter):
    """Redis Streams implementation of the message bus.

    Every channel maps to one stream. Subscribers read through a consumer
    group; a message is acknowledged only after all handlers for its channel
    return. Unacknowledged entries stay in the group's pending entries list
    and are reclaimed with XAUTOCLAIM once they have been idle for
    ``claim_idle_ms``, on start and then every ``claim_interval`` seconds.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        stream_prefix: str | None = None,
        group: str | None = None,
        consumer: str | None = None,
        block_ms: int = 1000,
        batch_size: int = 10,
        maxlen: int = 10000,
        retry_delay: float = 1.0,
        claim_idle_ms: int = 30000,
        claim_interval: float = 30.0,
    ):
        """
        Initialize Redis stream adapter.

        Args:
            redis_url: Redis connection URL (defaults to settings.REDIS_URL)
            stream_prefix: Prefix for stream keys (defaults to settings.REDIS_STREAM_PREFIX)
            group: Consumer group name (defaults to settings.REDIS_CONSUMER_GROUP)
            consumer: Consumer name within the group (defaults to the hostname)
            block_ms: How long a read blocks waiting for new messages
            batch_size: Maximum messages fetched per read or reclaim
            maxlen: Approximate maximum stream length
            retry_delay: Seconds to wait after a failed read
            claim_idle_ms: Minimum idle time before a pending entry is reclaimed
            claim_interval: Seconds between reclaim passes
        """
        settings = get_settings()
        self.redis_url = redis_url or str(settings.REDIS_URL)
        self.stream_prefix = stream_prefix or settings.REDIS_STREAM_PREFIX
        self.group = group or settings.REDIS_CONSUMER_GROUP
        self.consumer = consumer or socket.gethostname()
        self.block_ms = block_ms
        self.batch_size = batch_size
        self.maxlen = maxlen
        self.retry_delay = retry_delay
        self.claim_idle_ms = claim_idle_ms
        self.claim_interval = claim_interval
        self._client: Redis | None = None
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._tasks: list[asyncio.Task] = []

    def _get_client(self) -> Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = Redis.from_url(
                self.redis_url,
                decode_responses=False,  # We'll handle encoding ourselves
                socket_connect_timeout=5,
                socket_timeout=5 + self.block_ms / 1000,
            )
        return self._client

    def stream_key(self, channel: str) -> str:
        return f"{self.stream_prefix}:{channel}"

    async def send(self, channel: str, envelope: Envelope) -> bool:
        """
        Append the envelope to the channel's stream.

        Raises:
            RedisError: If Redis is unreachable or refuses the command
        """
        data = envelope.to_json()

        try:
            message_id = await asyncio.to_thread(
                self._get_client().xadd,
                self.stream_key(channel),
                {"data": data},
                id="*",
                maxlen=self.maxlen,
                approximate=True,
            )
        except RedisError as e:
            log.error("redis.send_failed", error=str(e), channel=channel, event_id=envelope.id)
            raise

        if not message_id:
            return False

        log.info(
            "bus.sent",
            channel=channel,
            id=envelope.id,
            type=envelope.type,
            message_id=message_id.decode() if isinstance(message_id, bytes) else message_id,
            adapter="redis_stream",
        )
        return True

    def subscribe(self, channel: str, handler: Handler) -> None:
        """Register a handler; takes effect on the next ``start``."""
        self._handlers[channel].append(handler)
        log.info("bus.subscribed", channel=channel, adapter="redis_stream")

    async def start(self) -> None:
        """Spawn one consumer task per subscribed channel."""
        if self._tasks:
            return
        for channel in self._handlers:
            await asyncio.to_thread(self._ensure_group, self.stream_key(channel))
            self._tasks.append(asyncio.create_task(self._consume(channel)))
        log.info("redis.consumers_started", channels=list(self._handlers), group=self.group)

    async def stop(self) -> None:
        """Cancel consumer tasks and close the connection."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self.close()

    def _ensure_group(self, key: str) -> None:
        try:
            self._get_client().xgroup_create(key, self.group, id="0", mkstream=True)
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise

    async def _consume(self, channel: str) -> None:
        key = self.stream_key(channel)
        client = self._get_client()
        last_claim = None

        while True:
            if last_claim is None or time.monotonic() - last_claim >= self.claim_interval:
                await self._reclaim(channel, key)
                last_claim = time.monotonic()

            try:
                response = await asyncio.to_thread(
                    client.xreadgroup,
                    self.group,
                    self.consumer,
                    {key: ">"},
                    count=self.batch_size,
                    block=self.block_ms,
                )
            except RedisError as e:
                log.error("redis.read_failed", error=str(e), channel=channel)
                await asyncio.sleep(self.retry_delay)
                continue

            for _stream, entries in response or []:
                for message_id, fields in entries:
                    await self._deliver(channel, key, message_id, fields)

    async def _reclaim(self, channel: str, key: str) -> int:
        """
        Take over pending entries idle for at least ``claim_idle_ms`` and
        deliver them again.

        Returns:
            Number of reclaimed entries that were acknowledged
        """
        try:
            response = await asyncio.to_thread(
                self._get_client().xautoclaim,
                key,
                self.group,
                self.consumer,
                self.claim_idle_ms,
                start_id="0-0",
                count=self.batch_size,
            )
        except RedisError as e:
            log.error("redis.claim_failed", error=str(e), channel=channel)
            return 0

        acked = 0
        for message_id, fields in response[1]:
            # Entries trimmed from the stream come back without fields
            if not fields:
                continue
            log.info("redis.entry_reclaimed", channel=channel, message_id=message_id)
            if await self._deliver(channel, key, message_id, fields):
                acked += 1
        return acked

    async def _deliver(self, channel: str, key: str, message_id: bytes, fields: dict) -> bool:
        """
        Run the channel's handlers for one stream entry and acknowledge it.

        Returns:
            True if the entry was acknowledged
        """
        try:
            envelope = Envelope.from_json(fields[b"data"])
            for handler in self._handlers.get(channel, ()):
                await handler(envelope)
        except Exception as e:
            # Left unacknowledged in the pending entries list
            log.error(
                "bus.handler_failed",
                channel=channel,
                message_id=message_id,
                error=str(e),
                adapter="redis_stream",
                exc_info=True,
            )
            return False

        try:
            await asyncio.to_thread(self._get_client().xack, key, self.group, message_id)
        except RedisError as e:
            # Still pending; reclaimed and handled again later
            log.error("redis.ack_failed", error=str(e), channel=channel, message_id=message_id)
            return False
        return True

    async def health_check(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            client = self._get_client()
            return bool(client.ping())
        except Exception as e:
            log.warning("redis.health_check_failed", error=str(e))
            return False

    def close(self):
        """Close Redis connection."""
        if self._client:
            self._client.close()
            self._client = None
