"""In-memory store doubles with failure injection."""

import asyncio
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from repository.base import (
    AnalyticsStore,
    BlobStore,
    OrderBy,
    RecordStore,
    Row,
    SessionStore,
    matches,
    sort_rows,
)
from util.errors import RecordNotFoundError, StoreError

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def run(coro):
    """Drive one coroutine to completion from a sync test."""
    return asyncio.run(coro)


class FakeRecordStore(RecordStore):
    """Dict-of-dicts store.

    `fail_ops` names operations that raise StoreError on every call,
    `fail_once` ones that raise a single time, and `fail_update_calls`
    holds 1-based update_record call numbers that fail.
    """

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[str, Row]] = {}
        self.fail_ops: Set[str] = set()
        self.fail_once: Set[str] = set()
        self.fail_update_calls: Set[int] = set()
        self.update_calls = 0
        self.updates: List[Tuple[str, str, Dict[str, Any]]] = []
        self._ids = count(1)

    def _table(self, kind: str) -> Dict[str, Row]:
        return self.tables.setdefault(str(kind), {})

    def _check(self, op: str) -> None:
        if op in self.fail_once:
            self.fail_once.discard(op)
            raise StoreError(f"{op} failed")
        if op in self.fail_ops:
            raise StoreError(f"{op} failed")

    def seed(self, kind: str, **fields: Any) -> Row:
        """Insert synchronously with a deterministic id and created_at."""
        n = next(self._ids)
        row = {
            "id": fields.pop("id", f"{kind}-{n}"),
            "created_at": (_EPOCH + timedelta(seconds=n)).isoformat(),
            **fields,
        }
        self._table(kind)[row["id"]] = row
        return dict(row)

    async def fetch_collection(
        self,
        kind: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Row]:
        self._check("fetch")
        rows = [dict(r) for r in self._table(kind).values() if matches(r, filters)]
        rows.sort(key=lambda r: (r.get("created_at") or "", r.get("id") or ""))
        return sort_rows(rows, order_by)

    async def get_record(self, kind: str, record_id: str) -> Optional[Row]:
        self._check("get")
        row = self._table(kind).get(record_id)
        return dict(row) if row else None

    async def insert_record(self, kind: str, fields: Mapping[str, Any]) -> Row:
        self._check("insert")
        return self.seed(kind, **dict(fields))

    async def insert_many(self, kind: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        self._check("insert_many")
        return [self.seed(kind, **dict(r)) for r in rows]

    async def update_record(self, kind: str, record_id: str, fields: Mapping[str, Any]) -> Row:
        self._check("update")
        self.update_calls += 1
        if self.update_calls in self.fail_update_calls:
            raise StoreError("update failed")
        table = self._table(kind)
        if record_id not in table:
            raise RecordNotFoundError(str(kind), record_id)
        table[record_id].update(fields)
        self.updates.append((str(kind), record_id, dict(fields)))
        return dict(table[record_id])

    async def delete_record(self, kind: str, record_id: str) -> None:
        self._check("delete")
        table = self._table(kind)
        if record_id not in table:
            raise RecordNotFoundError(str(kind), record_id)
        del table[record_id]

    async def delete_where(self, kind: str, filters: Mapping[str, Any]) -> int:
        self._check("delete_where")
        table = self._table(kind)
        doomed = [rid for rid, r in table.items() if matches(r, filters)]
        for rid in doomed:
            del table[rid]
        return len(doomed)

    async def count(self, kind: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        self._check("count")
        return sum(1 for r in self._table(kind).values() if matches(r, filters))


class FakeBlobStore(BlobStore):
    def __init__(self) -> None:
        self.blobs: Dict[Tuple[str, str], Tuple[bytes, str]] = {}
        self.fail = False

    async def upload_blob(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise StoreError("upload failed")
        self.blobs[(bucket, path)] = (data, content_type)
        return f"http://testserver/api/v1/media/{bucket}/{path}"

    async def get_blob(self, bucket: str, path: str) -> Optional[Tuple[bytes, str]]:
        return self.blobs.get((bucket, path))

    async def delete_blob(self, bucket: str, path: str) -> None:
        self.blobs.pop((bucket, path), None)


class FakeSessionStore(SessionStore):
    def __init__(self) -> None:
        self.sessions: Dict[str, str] = {}

    async def create(self, token: str, email: str) -> None:
        self.sessions[token] = email

    async def get(self, token: str) -> Optional[str]:
        return self.sessions.get(token)

    async def delete(self, token: str) -> None:
        self.sessions.pop(token, None)


class FakeAnalyticsStore(AnalyticsStore):
    def __init__(self) -> None:
        self.visits: Dict[str, int] = {}
        self.clicks: Dict[str, Tuple[int, Optional[str]]] = {}
        self.fail = False

    async def increment_daily_visit_counter(self, date: str) -> int:
        if self.fail:
            raise StoreError("visit failed")
        self.visits[date] = self.visits.get(date, 0) + 1
        return self.visits[date]

    async def increment_click_counter(self, item_id: str, at: str) -> int:
        if self.fail:
            raise StoreError("click failed")
        clicks, _ = self.clicks.get(item_id, (0, None))
        self.clicks[item_id] = (clicks + 1, at)
        return clicks + 1

    async def visit_counts(self) -> Dict[str, int]:
        return dict(self.visits)

    async def click_counts(self) -> Dict[str, Tuple[int, Optional[str]]]:
        return dict(self.clicks)

    async def forget_item(self, item_id: str) -> None:
        self.clicks.pop(item_id, None)


def seed_catalog(records: FakeRecordStore) -> None:
    """Two visible categories, one hidden, two tags and four items.

    Starred-then-newest order of the visible items is item-2, item-3, item-1.
    """
    records.seed(
        "categories", id="cat-gaming", name="Gaming", slug="gaming", is_hidden=False, order_index=0
    )
    records.seed(
        "categories", id="cat-vlogs", name="Vlogs", slug="vlogs", is_hidden=False, order_index=1
    )
    records.seed(
        "categories", id="cat-secret", name="Secret", slug="secret", is_hidden=True, order_index=2
    )
    records.seed("tags", id="tag-mc", name="Minecraft", slug="minecraft", order_index=0)
    records.seed("tags", id="tag-tech", name="Tech Review", slug="tech-review", order_index=1)

    def item(item_id: str, category_id: str, order_index: int, starred: bool = False) -> None:
        records.seed(
            "portfolio_items",
            id=item_id,
            file_url=f"http://testserver/{item_id}.png",
            file_type="image",
            category_id=category_id,
            order_index=order_index,
            is_starred=starred,
        )

    item("item-1", "cat-gaming", 0)
    item("item-2", "cat-gaming", 1, starred=True)
    item("item-3", "cat-vlogs", 2)
    item("item-4", "cat-secret", 3)
    records.seed("portfolio_item_tags", portfolio_item_id="item-1", tag_id="tag-mc")
    records.seed("portfolio_item_tags", portfolio_item_id="item-3", tag_id="tag-tech")
