import pytest_asyncio
from fakeredis import FakeAsyncRedis
from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.itinerary_cache import KEY_PREFIX, ItineraryResultCache


@pytest_asyncio.fixture
async def fake_redis():
    r = FakeAsyncRedis(decode_responses=True)
    await r.flushall()
    yield r
    await r.aclose()


@pytest_asyncio.fixture
async def cache(fake_redis):
    return ItineraryResultCache(ttl_seconds=60, client=fake_redis)


async def test_put_and_get(cache):
    assert await cache.put("u1:a", {"request": {"originCity": "London"}}) is True
    assert await cache.get("u1:a") == {"request": {"originCity": "London"}}
    assert await cache.get("u1:missing") is None


async def test_entries_carry_ttl(cache, fake_redis):
    await cache.put("u1:a", {"x": 1})

    ttl = await fake_redis.ttl(f"{KEY_PREFIX}u1:a")
    assert 0 < ttl <= 60


async def test_unread_entries_expire_in_redis(cache, fake_redis):
    await cache.put("u1:a", {"x": 1})

    # Simulate the TTL elapsing without any read
    await fake_redis.expire(f"{KEY_PREFIX}u1:a", 0)

    assert await fake_redis.exists(f"{KEY_PREFIX}u1:a") == 0
    assert await cache.get("u1:a") is None


async def test_clear(cache):
    await cache.put("u1:a", {})
    await cache.put("u1:b", {})

    assert await cache.clear("u1:a") is True
    assert await cache.clear("never-cached") is True
    assert await cache.get("u1:a") is None
    assert await cache.get("u1:b") == {}


async def test_non_dict_payload_is_a_miss(cache, fake_redis):
    await fake_redis.set(f"{KEY_PREFIX}u1:a", "[1, 2]")
    await fake_redis.set(f"{KEY_PREFIX}u1:b", "not json")

    assert await cache.get("u1:a") is None
    assert await cache.get("u1:b") is None


async def test_without_redis_everything_is_a_miss():
    cache = ItineraryResultCache(ttl_seconds=60, redis_url=None)

    assert await cache.put("u1:a", {"x": 1}) is False
    assert await cache.get("u1:a") is None
    assert await cache.clear("u1:a") is False


class _DownRedis:
    async def set(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    async def get(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")

    async def delete(self, *args, **kwargs):
        raise RedisConnectionError("connection refused")


async def test_redis_errors_degrade_to_miss():
    cache = ItineraryResultCache(ttl_seconds=60, client=_DownRedis())

    assert await cache.put("u1:a", {"x": 1}) is False
    assert await cache.get("u1:a") is None
    assert await cache.clear("u1:a") is False


async def test_close_keeps_injected_client_open(cache, fake_redis):
    await cache.close()

    assert await fake_redis.ping() is True
