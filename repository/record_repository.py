# repository/record_repository.py
import json
import logging
from typing import Any, List, Mapping, Optional, Sequence
from uuid import uuid4
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.cache import get_redis
from repository.base import OrderBy, RecordStore, Row, matches, sort_rows
from repository.namespaces import RECORDS
from util.errors import RecordNotFoundError, StoreError
from util.functions import now_iso

logger = logging.getLogger(__name__)


def _decode(raw: Any) -> Optional[Row]:
    if raw is None:
        return None
    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        row = json.loads(raw)
    except ValueError:
        return None
    return row if isinstance(row, dict) else None


def _encode(row: Mapping[str, Any]) -> bytes:
    return json.dumps(row, separators=(",", ":")).encode("utf-8")


class RecordRepository(RecordStore):
    """
    Redis-backed content tables.

    Flow:
    - One hash per kind (`portfolio:records:<kind>`), field = record id,
      value = the row as compact JSON.
    - Filtering/ordering happens in process; collections are small.
    - Every Redis failure surfaces as StoreError so services have one type to catch.
    """

    def __init__(self, client: Optional[Redis] = None) -> None:
        self._injected = client

    async def _client(self) -> Redis:
        return self._injected if self._injected is not None else await get_redis()

    @staticmethod
    def _key(kind: str) -> str:
        return f"{RECORDS}:{kind}"

    async def _all(self, kind: str) -> List[Row]:
        try:
            r = await self._client()
            vals = await r.hvals(self._key(kind))
        except RedisError as e:
            logger.error("store.fetch.error kind=%s err=%s", kind, type(e).__name__)
            raise StoreError(f"fetch {kind} failed") from e
        out: List[Row] = []
        for raw in vals or []:
            row = _decode(raw)
            if row is None:
                # Skip malformed entries instead of failing the whole read
                logger.warning("store.row.malformed kind=%s", kind)
                continue
            out.append(row)
        return out

    async def fetch_collection(
        self,
        kind: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Row]:
        rows = [row for row in await self._all(kind) if matches(row, filters)]
        # Stable base order before the caller's keys.
        rows.sort(key=lambda r: (r.get("created_at") or "", r.get("id") or ""))
        return sort_rows(rows, order_by)

    async def get_record(self, kind: str, record_id: str) -> Optional[Row]:
        try:
            r = await self._client()
            raw = await r.hget(self._key(kind), record_id)
        except RedisError as e:
            logger.error("store.get.error kind=%s id=%s", kind, record_id)
            raise StoreError(f"get {kind} failed") from e
        return _decode(raw)

    @staticmethod
    def _new_row(fields: Mapping[str, Any]) -> Row:
        row: Row = dict(fields)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", now_iso())
        return row

    async def insert_record(self, kind: str, fields: Mapping[str, Any]) -> Row:
        row = self._new_row(fields)
        try:
            r = await self._client()
            await r.hset(self._key(kind), row["id"], _encode(row))
        except RedisError as e:
            logger.error("store.insert.error kind=%s", kind)
            raise StoreError(f"insert {kind} failed") from e
        logger.debug("store.insert.ok kind=%s id=%s", kind, row["id"])
        return row

    async def insert_many(
        self, kind: str, rows: Sequence[Mapping[str, Any]]
    ) -> List[Row]:
        new_rows = [self._new_row(f) for f in rows]
        if not new_rows:
            return []
        try:
            r = await self._client()
            await r.hset(
                self._key(kind), mapping={row["id"]: _encode(row) for row in new_rows}
            )
        except RedisError as e:
            logger.error("store.insert_many.error kind=%s n=%d", kind, len(new_rows))
            raise StoreError(f"insert {kind} failed") from e
        return new_rows

    async def update_record(
        self, kind: str, record_id: str, fields: Mapping[str, Any]
    ) -> Row:
        current = await self.get_record(kind, record_id)
        if current is None:
            raise RecordNotFoundError(kind, record_id)
        current.update(fields)
        current["id"] = record_id
        try:
            r = await self._client()
            await r.hset(self._key(kind), record_id, _encode(current))
        except RedisError as e:
            logger.error("store.update.error kind=%s id=%s", kind, record_id)
            raise StoreError(f"update {kind} failed") from e
        return current

    async def delete_record(self, kind: str, record_id: str) -> None:
        try:
            r = await self._client()
            removed = int(await r.hdel(self._key(kind), record_id))
        except RedisError as e:
            logger.error("store.delete.error kind=%s id=%s", kind, record_id)
            raise StoreError(f"delete {kind} failed") from e
        if removed == 0:
            raise RecordNotFoundError(kind, record_id)

    async def delete_where(self, kind: str, filters: Mapping[str, Any]) -> int:
        ids = [row["id"] for row in await self._all(kind) if matches(row, filters)]
        if not ids:
            return 0
        try:
            r = await self._client()
            return int(await r.hdel(self._key(kind), *ids))
        except RedisError as e:
            logger.error("store.delete_where.error kind=%s", kind)
            raise StoreError(f"delete {kind} failed") from e

    async def count(self, kind: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        if not filters:
            try:
                r = await self._client()
                return int(await r.hlen(self._key(kind)))
            except RedisError as e:
                raise StoreError(f"count {kind} failed") from e
        return sum(1 for row in await self._all(kind) if matches(row, filters))
