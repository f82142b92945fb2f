# core/star_limiter.py
from collections import Counter
from typing import Dict, Iterable, Tuple

STAR_LIMIT: int = 12


def can_star(is_starred: bool, starred_count: int, limit: int = STAR_LIMIT) -> bool:
    """Unstarring is always allowed; starring only while the category is under the cap."""
    if is_starred:
        return True
    return starred_count < limit


class StarCounter:
    """
    Per-category starred counts for one listing.

    Counts are seeded from a read-time query and only moved by `apply`
    after the store accepted the change.
    """

    def __init__(self, counts: Dict[str, int] | None = None, limit: int = STAR_LIMIT) -> None:
        self._counts: Dict[str, int] = dict(counts or {})
        self.limit = limit

    @classmethod
    def from_items(
        cls, items: Iterable[Tuple[str, bool]], limit: int = STAR_LIMIT
    ) -> "StarCounter":
        """Seed from (category_id, is_starred) pairs."""
        counts = Counter(cat for cat, starred in items if starred)
        return cls(dict(counts), limit)

    def count(self, category_id: str) -> int:
        return self._counts.get(category_id, 0)

    def can_star(self, category_id: str, is_starred: bool) -> bool:
        return can_star(is_starred, self.count(category_id), self.limit)

    def apply(self, category_id: str, new_state: bool) -> int:
        current = self.count(category_id)
        updated = current + 1 if new_state else max(0, current - 1)
        self._counts[category_id] = updated
        return updated

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)
