"""Redis Pub/Sub delivery of registry events to live indexers.

Events are already durable in market_events by the time publish() runs
(same transaction as the mutation), so a failed publish is logged and the
committed mutation stands. Indexers that miss a message replay from the table.

Message format (JSON):
    {"event_type": "MarketCreated", "payload": {...}}
"""

import json
import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings
from src.pm_common.redis_client import get_redis
from src.pm_market.domain.events import RegistryEvent

logger = logging.getLogger(__name__)


def encode_event(event: RegistryEvent) -> str:
    return json.dumps({"event_type": event.event_type.value, "payload": event.payload()})


class RedisEventSink:
    def __init__(
        self,
        channel: str | None = None,
        redis: aioredis.Redis | None = None,
    ) -> None:
        self._channel = channel or settings.MARKET_EVENTS_CHANNEL
        self._redis = redis

    async def publish(self, event: RegistryEvent) -> None:
        client = self._redis or await get_redis()
        try:
            await client.publish(self._channel, encode_event(event))
        except RedisError:
            logger.exception(
                "Event publish failed (kept in market_events): type=%s",
                event.event_type.value,
            )
