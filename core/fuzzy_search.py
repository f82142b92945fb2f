# core/fuzzy_search.py
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar
from core.entities import ScoredItem
from core.similarity import similarity

T = TypeVar("T")

FieldsFn = Callable[[T], Iterable[str]]

EXACT_MATCH: float = 1.0
WORD_CONTAINS_FLOOR: float = 0.8
DEFAULT_THRESHOLD: float = 0.6
TAG_SUGGEST_THRESHOLD: float = 0.5


def score_fields(query: str, texts: Iterable[str]) -> float:
    """
    Best similarity of `query` (already lowercased and trimmed) across `texts`.

    - A field containing the query scores 1.0 and ends the scan.
    - Otherwise each whitespace word is compared, words containing the
      query count at least 0.8, and the whole field is compared too.
    """
    best = 0.0
    for text in texts:
        if not text:
            continue
        lowered = text.lower()
        if query in lowered:
            return EXACT_MATCH

        for word in lowered.split():
            best = max(best, similarity(query, word))
            if query in word:
                best = max(best, WORD_CONTAINS_FLOOR)

        best = max(best, similarity(query, lowered))
    return best


def rank(
    items: Sequence[T], query: str, fields: FieldsFn, threshold: float
) -> List[ScoredItem[T]]:
    q = query.strip().lower()
    scored = [ScoredItem(item=it, similarity=score_fields(q, fields(it))) for it in items]
    kept = [s for s in scored if s.similarity >= threshold]
    # list.sort is stable: equal scores keep input order.
    kept.sort(key=lambda s: s.similarity, reverse=True)
    return kept


def fuzzy_search(
    items: Sequence[T],
    query: str,
    fields: FieldsFn,
    threshold: float = DEFAULT_THRESHOLD,
) -> List[T]:
    """
    Filter and rank `items` by fuzzy match of `query` against `fields(item)`.
    A blank query returns the items untouched, in input order.
    """
    if not query.strip():
        return list(items)
    return [s.item for s in rank(items, query, fields, threshold)]


def fuzzy_search_tags(
    tags: Sequence[T],
    query: str,
    name: Callable[[T], str],
    threshold: float = TAG_SUGGEST_THRESHOLD,
) -> List[T]:
    return fuzzy_search(tags, query, lambda t: [name(t)], threshold)


def no_match_message(
    tags: Sequence[T],
    query: str,
    name: Callable[[T], str],
    threshold: float = DEFAULT_THRESHOLD,
) -> Optional[str]:
    """
    Diagnostic for an empty item search: if the query names a known tag,
    say that tag has no items. Returns None when no tag matches either.
    """
    if not query.strip():
        return None
    matches = fuzzy_search(tags, query, lambda t: [name(t)], threshold)
    if not matches:
        return None
    return f'No items available for tag "{name(matches[0])}"'
