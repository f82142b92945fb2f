# config/cache.py
import logging
from typing import Optional
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError
from config.settings import settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


def _connect() -> Redis:
    return from_url(
        settings.REDIS_URL,
        decode_responses=False,  # media blobs are stored as raw bytes
        socket_keepalive=True,
        health_check_interval=30,
    )


async def get_redis() -> Redis:
    """Shared client for every repository; the first call must reach PING."""
    global _client
    if _client is None:
        client = _connect()
        try:
            await client.ping()
        except (RedisError, OSError):
            await client.aclose()
            raise
        _client = client
        logger.info("redis.connect.ok")
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("redis.close.ok")


async def ping_redis() -> bool:
    """Health probe: True when the shared client answers PING."""
    try:
        r = await get_redis()
        return bool(await r.ping())
    except (RedisError, OSError) as e:
        logger.warning("redis.ping.failed err=%s", type(e).__name__)
        return False
