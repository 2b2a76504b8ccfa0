"""
Redis persistence for triad routes.

The scanner replaces the whole set on every run; the monitor only reads it.
"""
from typing import Iterable

import redis.asyncio as redis

from config.settings import REDIS_TRIADS_KEY, get_redis_url
from core.exceptions import RouteSchemaError
from core.models import TriadRoute
from utils.logger import get_logger

logger = get_logger(__name__)


def decode_routes(members: Iterable[str | bytes]) -> list[TriadRoute]:
    """Decode raw set members, skipping records that fail validation"""
    routes = []
    for raw in members:
        try:
            routes.append(TriadRoute.from_json(raw))
        except RouteSchemaError as e:
            logger.warning(f"⚠️ Skipping malformed route record: {e}")
    return routes


class RouteStore:
    """Set of serialized TriadRoutes under a single Redis key"""

    def __init__(self, client: redis.Redis, key: str = REDIS_TRIADS_KEY):
        self._client = client
        self.key = key

    @classmethod
    def from_url(cls, url: str | None = None, key: str = REDIS_TRIADS_KEY) -> "RouteStore":
        return cls(redis.from_url(url or get_redis_url()), key)

    async def replace_routes(self, routes: list[TriadRoute]) -> int:
        """
        Atomically swap the stored routes for `routes`.
        Returns the number of distinct records written.
        """
        members = sorted({route.to_json() for route in routes})

        async with self._client.pipeline(transaction=True) as pipe:
            pipe.delete(self.key)
            if members:
                pipe.sadd(self.key, *members)
            await pipe.execute()

        logger.info(f"💾 Saved {len(members)} triads to Redis key: \"{self.key}\"")
        return len(members)

    async def load_routes(self) -> list[TriadRoute]:
        """All valid routes currently stored"""
        members = await self._client.smembers(self.key)
        routes = decode_routes(members)
        skipped = len(members) - len(routes)
        if skipped:
            logger.warning(f"⚠️ {skipped} of {len(members)} stored routes were malformed")
        return routes

    async def close(self):
        await self._client.aclose()
