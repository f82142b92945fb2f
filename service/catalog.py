# service/catalog.py
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple
from model.content import Category, PortfolioItem, Tag
from repository.base import AnalyticsStore, OrderBy, RecordStore
from util.enums import Kind

BY_ORDER: OrderBy = [("order_index", False)]
STARRED_THEN_NEWEST: OrderBy = [("is_starred", True), ("created_at", True)]


async def load_categories(records: RecordStore, visible_only: bool) -> List[Category]:
    filters = {"is_hidden": False} if visible_only else None
    rows = await records.fetch_collection(Kind.CATEGORIES, filters, BY_ORDER)
    return [Category.model_validate(r) for r in rows]


async def load_tags(records: RecordStore) -> List[Tag]:
    rows = await records.fetch_collection(Kind.TAGS, order_by=BY_ORDER)
    return [Tag.model_validate(r) for r in rows]


async def load_items(
    records: RecordStore,
    *,
    visible_only: bool,
    order_by: OrderBy,
) -> Tuple[List[Category], List[PortfolioItem]]:
    """
    Items joined with their category and tags.

    With visible_only the join is inner: items of hidden or missing
    categories are left out. Otherwise the category may be None.
    """
    categories = await load_categories(records, visible_only)
    tags = {t.id: t for t in await load_tags(records)}
    links = await records.fetch_collection(Kind.PORTFOLIO_ITEM_TAGS)
    rows = await records.fetch_collection(Kind.PORTFOLIO_ITEMS, order_by=order_by)

    by_category = {c.id: c for c in categories}
    tags_by_item: Dict[str, List[Tag]] = defaultdict(list)
    for link in links:
        tag = tags.get(link.get("tag_id"))
        if tag is not None:
            tags_by_item[link.get("portfolio_item_id")].append(tag)

    items: List[PortfolioItem] = []
    for row in rows:
        category: Optional[Category] = by_category.get(row.get("category_id"))
        if visible_only and category is None:
            continue
        item = PortfolioItem.model_validate(row)
        item.category = category
        item.tags = sorted(tags_by_item.get(item.id, []), key=lambda t: t.order_index)
        items.append(item)
    return categories, items


def filter_by_category(items: List[PortfolioItem], slug: str) -> List[PortfolioItem]:
    if not slug or slug == "all":
        return list(items)
    return [i for i in items if i.category is not None and i.category.slug == slug]


def searchable_fields(item: PortfolioItem) -> List[str]:
    """Category name first, then every tag name."""
    return [item.category.name if item.category else ""] + [t.name for t in item.tags]


async def purge_items(
    records: RecordStore, analytics: AnalyticsStore, item_ids: Iterable[str]
) -> int:
    """Delete items together with their tag links and click counters."""
    n = 0
    for item_id in item_ids:
        await records.delete_record(Kind.PORTFOLIO_ITEMS, item_id)
        await records.delete_where(Kind.PORTFOLIO_ITEM_TAGS, {"portfolio_item_id": item_id})
        await analytics.forget_item(item_id)
        n += 1
    return n
