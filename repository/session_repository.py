# repository/session_repository.py
from typing import Optional
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.cache import get_redis
from config.settings import settings
from repository.base import SessionStore
from repository.namespaces import SESSIONS
from util.errors import StoreError


class SessionRepository(SessionStore):
    """
    Admin sessions keyed by opaque token.

    TTL is refreshed by every successful get() so active admins stay signed in.
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        ttl_seconds: int = settings.SESSION_TTL_SECONDS,
    ) -> None:
        self._injected = client
        self._ttl = int(ttl_seconds)

    async def _client(self) -> Redis:
        return self._injected if self._injected is not None else await get_redis()

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSIONS}:{token}"

    async def create(self, token: str, email: str) -> None:
        try:
            r = await self._client()
            await r.set(self._key(token), email.encode("utf-8"), ex=self._ttl)
        except RedisError as e:
            raise StoreError("session create failed") from e

    async def get(self, token: str) -> Optional[str]:
        if not token:
            return None
        try:
            r = await self._client()
            raw = await r.get(self._key(token))
            if raw is None:
                return None
            await r.expire(self._key(token), self._ttl)
        except RedisError as e:
            raise StoreError("session read failed") from e
        return raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)

    async def delete(self, token: str) -> None:
        try:
            r = await self._client()
            await r.delete(self._key(token))
        except RedisError as e:
            raise StoreError("session delete failed") from e
