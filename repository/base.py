# repository/base.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Row = Dict[str, Any]
# (field, descending)
OrderBy = Sequence[Tuple[str, bool]]


class RecordStore(ABC):
    """Table-like access to content records, keyed by kind."""

    @abstractmethod
    async def fetch_collection(
        self,
        kind: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[Row]:
        """Rows of `kind` whose fields equal every filter value, sorted by `order_by`."""

    @abstractmethod
    async def get_record(self, kind: str, record_id: str) -> Optional[Row]:
        """Single row or None."""

    @abstractmethod
    async def insert_record(self, kind: str, fields: Mapping[str, Any]) -> Row:
        """Insert and return the stored row with its generated id and created_at."""

    @abstractmethod
    async def insert_many(self, kind: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        """Insert all rows in one write."""

    @abstractmethod
    async def update_record(self, kind: str, record_id: str, fields: Mapping[str, Any]) -> Row:
        """Merge `fields` into an existing row; RecordNotFoundError when absent."""

    @abstractmethod
    async def delete_record(self, kind: str, record_id: str) -> None:
        """Remove a row; RecordNotFoundError when absent."""

    @abstractmethod
    async def delete_where(self, kind: str, filters: Mapping[str, Any]) -> int:
        """Remove every matching row and return how many went."""

    @abstractmethod
    async def count(self, kind: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Number of matching rows."""


class BlobStore(ABC):
    @abstractmethod
    async def upload_blob(
        self, bucket: str, path: str, data: bytes, content_type: str
    ) -> str:
        """Persist bytes and return their public URL."""

    @abstractmethod
    async def get_blob(self, bucket: str, path: str) -> Optional[Tuple[bytes, str]]:
        """(bytes, content type) or None."""

    @abstractmethod
    async def delete_blob(self, bucket: str, path: str) -> None:
        """Remove a blob if present."""


class SessionStore(ABC):
    @abstractmethod
    async def create(self, token: str, email: str) -> None:
        """Open a session for `email` under `token`."""

    @abstractmethod
    async def get(self, token: str) -> Optional[str]:
        """Email of a live session, refreshing its TTL; None otherwise."""

    @abstractmethod
    async def delete(self, token: str) -> None:
        """Close a session."""


class AnalyticsStore(ABC):
    @abstractmethod
    async def increment_daily_visit_counter(self, date: str) -> int:
        """Upsert: create the day at 1 or add 1; returns the new count."""

    @abstractmethod
    async def increment_click_counter(self, item_id: str, at: str) -> int:
        """Add one click for an item and stamp last_clicked_at."""

    @abstractmethod
    async def visit_counts(self) -> Dict[str, int]:
        """date -> visits."""

    @abstractmethod
    async def click_counts(self) -> Dict[str, Tuple[int, Optional[str]]]:
        """item id -> (clicks, last_clicked_at)."""

    @abstractmethod
    async def forget_item(self, item_id: str) -> None:
        """Drop click counters of a deleted item."""


def matches(row: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    if not filters:
        return True
    return all(row.get(k) == v for k, v in filters.items())


def _sort_key(value: Any, descending: bool) -> Tuple[int, Any]:
    # None sorts last in either direction; reverse=True flips the flag too.
    if value is None:
        return (0, "") if descending else (1, "")
    return (1, value) if descending else (0, value)


def sort_rows(rows: List[Row], order_by: Optional[OrderBy]) -> List[Row]:
    """Multi-key stable sort, applied least significant key first."""
    out = list(rows)
    for field, descending in reversed(list(order_by or [])):
        out.sort(key=lambda r: _sort_key(r.get(field), descending), reverse=descending)
    return out
