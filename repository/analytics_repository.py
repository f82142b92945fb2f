# repository/analytics_repository.py
from typing import Dict, Optional, Tuple
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.cache import get_redis
from repository.base import AnalyticsStore
from repository.namespaces import CLICKS, LAST_CLICKED, VISITS
from util.errors import StoreError


def _s(v) -> str:
    return v.decode("utf-8") if isinstance(v, (bytes, bytearray)) else str(v)


class AnalyticsRepository(AnalyticsStore):
    """
    Visit and click counters.

    HINCRBY makes "create at 1 or add 1" a single atomic step, so concurrent
    visitors never lose an increment.
    """

    def __init__(self, client: Optional[Redis] = None) -> None:
        self._injected = client

    async def _client(self) -> Redis:
        return self._injected if self._injected is not None else await get_redis()

    async def increment_daily_visit_counter(self, date: str) -> int:
        try:
            r = await self._client()
            return int(await r.hincrby(VISITS, date, 1))
        except RedisError as e:
            raise StoreError("visit increment failed") from e

    async def increment_click_counter(self, item_id: str, at: str) -> int:
        try:
            r = await self._client()
            async with r.pipeline(transaction=True) as pipe:
                pipe.hincrby(CLICKS, item_id, 1)
                pipe.hset(LAST_CLICKED, item_id, at)
                count, _ = await pipe.execute()
        except RedisError as e:
            raise StoreError("click increment failed") from e
        return int(count)

    async def visit_counts(self) -> Dict[str, int]:
        try:
            r = await self._client()
            raw = await r.hgetall(VISITS)
        except RedisError as e:
            raise StoreError("visit read failed") from e
        return {_s(k): int(v) for k, v in (raw or {}).items()}

    async def click_counts(self) -> Dict[str, Tuple[int, Optional[str]]]:
        try:
            r = await self._client()
            counts = await r.hgetall(CLICKS)
            stamps = await r.hgetall(LAST_CLICKED)
        except RedisError as e:
            raise StoreError("click read failed") from e
        last = {_s(k): _s(v) for k, v in (stamps or {}).items()}
        return {_s(k): (int(v), last.get(_s(k))) for k, v in (counts or {}).items()}

    async def forget_item(self, item_id: str) -> None:
        try:
            r = await self._client()
            async with r.pipeline(transaction=True) as pipe:
                pipe.hdel(CLICKS, item_id)
                pipe.hdel(LAST_CLICKED, item_id)
                await pipe.execute()
        except RedisError as e:
            raise StoreError("click delete failed") from e
