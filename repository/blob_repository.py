# repository/blob_repository.py
import logging
from typing import Optional, Tuple
from urllib.parse import quote
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.cache import get_redis
from config.settings import settings
from repository.base import BlobStore
from repository.namespaces import BLOB_TYPES, BLOBS
from util.constants import InternalURIs
from util.errors import StoreError

logger = logging.getLogger(__name__)


class BlobRepository(BlobStore):
    """
    Redis-backed byte storage for uploaded media keyed by (bucket, path).

    Media is durable (no TTL); the public URL points at the media route,
    which streams the bytes back with their stored content type.
    """

    def __init__(
        self, client: Optional[Redis] = None, base_url: str = settings.PUBLIC_BASE_URL
    ) -> None:
        self._injected = client
        self._base_url = base_url.rstrip("/")

    async def _client(self) -> Redis:
        return self._injected if self._injected is not None else await get_redis()

    @staticmethod
    def _key(bucket: str, path: str) -> str:
        return f"{BLOBS}:{bucket}:{path}"

    @staticmethod
    def _type_key(bucket: str, path: str) -> str:
        return f"{BLOB_TYPES}:{bucket}:{path}"

    def public_url(self, bucket: str, path: str) -> str:
        route = InternalURIs.MEDIA.replace("{bucket}", quote(bucket)).replace(
            "{path:path}", quote(path)
        )
        return f"{self._base_url}{route}"

    async def upload_blob(
        self, bucket: str, path: str, data: bytes, content_type: str
    ) -> str:
        try:
            r = await self._client()
            async with r.pipeline(transaction=True) as pipe:
                pipe.set(self._key(bucket, path), data)
                pipe.set(self._type_key(bucket, path), content_type.encode("utf-8"))
                await pipe.execute()
        except RedisError as e:
            logger.error("blob.upload.error bucket=%s path=%s", bucket, path)
            raise StoreError("upload failed") from e
        logger.info("blob.upload.ok bucket=%s path=%s bytes=%d", bucket, path, len(data))
        return self.public_url(bucket, path)

    async def get_blob(self, bucket: str, path: str) -> Optional[Tuple[bytes, str]]:
        try:
            r = await self._client()
            data, ctype = await r.mget(
                [self._key(bucket, path), self._type_key(bucket, path)]
            )
        except RedisError as e:
            logger.error("blob.get.error bucket=%s path=%s", bucket, path)
            raise StoreError("read failed") from e
        if data is None:
            return None
        if isinstance(ctype, (bytes, bytearray)):
            ctype = ctype.decode("utf-8")
        return bytes(data), ctype or "application/octet-stream"

    async def delete_blob(self, bucket: str, path: str) -> None:
        try:
            r = await self._client()
            await r.delete(self._key(bucket, path), self._type_key(bucket, path))
        except RedisError as e:
            logger.error("blob.delete.error bucket=%s path=%s", bucket, path)
            raise StoreError("delete failed") from e
