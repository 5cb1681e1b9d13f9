"""Redis cache of freshly generated itinerary results.

Lets the result page render straight after generation without re-reading and
re-merging the stored document. One instance lives on ``app.state``; entries
expire in Redis after ``ttl_seconds`` whether or not they are ever read.
"""

import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

KEY_PREFIX = "itinerary-result:"


class ItineraryResultCache:
    """Redis-backed result cache. Every operation degrades to a miss when Redis is down."""

    def __init__(
        self,
        ttl_seconds: int,
        redis_url: str | None = None,
        client: redis.Redis | None = None,
    ):
        self.ttl_seconds = ttl_seconds
        self.redis_url = redis_url
        self._redis = client
        self._owns_client = client is None

    def _key(self, cache_key: str) -> str:
        return f"{KEY_PREFIX}{cache_key}"

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            if not self.redis_url:
                return None
            try:
                self._redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except (RedisError, OSError) as e:
                logger.warning(f"Redis unavailable, itinerary result cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def put(self, cache_key: str, result: dict) -> bool:
        """Store a result for ``ttl_seconds``. False when it could not be cached."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(self._key(cache_key), json.dumps(result), ex=self.ttl_seconds)
            return True
        except (RedisError, OSError, TypeError) as e:
            logger.warning(f"Could not cache itinerary result {cache_key}: {e}")
            return False

    async def get(self, cache_key: str) -> dict | None:
        """Cached result, or None on miss, expiry or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(self._key(cache_key))
            if raw is None:
                return None
            result = json.loads(raw)
        except (RedisError, OSError, ValueError) as e:
            logger.warning(f"Could not read cached itinerary result {cache_key}: {e}")
            return None
        return result if isinstance(result, dict) else None

    async def clear(self, cache_key: str) -> bool:
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.delete(self._key(cache_key))
            return True
        except (RedisError, OSError) as e:
            logger.warning(f"Could not clear cached itinerary result {cache_key}: {e}")
            return False

    async def close(self):
        if self._redis and self._owns_client:
            await self._redis.aclose()
        self._redis = None
