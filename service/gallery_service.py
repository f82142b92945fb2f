# service/gallery_service.py
import logging
from typing import List, Optional, Tuple
from config.settings import settings
from core.fuzzy_search import fuzzy_search, no_match_message
from core.lightbox import neighbors
from core.star_limiter import StarCounter
from model.api import GalleryEntry, GalleryResponse, NeighborsResponse, StarResponse
from model.content import Category, PortfolioItem, Tag
from repository.base import AnalyticsStore, RecordStore
from service import catalog
from util.enums import ErrorMessage, Kind
from util.errors import AppError, store_guard
from util.functions import now_iso
from util.timing import timed

logger = logging.getLogger(__name__)


class GalleryService:
    """
    Public gallery views: the full listing and the "popular" subset.

    Both views search the same way; starred counts are derived from the
    items at read time rather than kept as a stored counter.
    """

    def __init__(
        self,
        records: RecordStore,
        analytics: AnalyticsStore,
        *,
        star_limit: int = settings.STAR_LIMIT,
        popular_limit: int = settings.POPULAR_ITEMS_LIMIT,
        item_threshold: float = settings.ITEM_SEARCH_THRESHOLD,
        tag_threshold: float = settings.TAG_MATCH_THRESHOLD,
    ) -> None:
        self._records = records
        self._analytics = analytics
        self._star_limit = star_limit
        self._popular_limit = popular_limit
        self._item_threshold = item_threshold
        self._tag_threshold = tag_threshold

    async def _load(self) -> Tuple[List[Category], List[PortfolioItem]]:
        with store_guard(logger, "gallery.load", ErrorMessage.FETCH_FAILED):
            with timed(logger, "gallery.load"):
                return await catalog.load_items(
                    self._records,
                    visible_only=True,
                    order_by=catalog.STARRED_THEN_NEWEST,
                )

    async def categories(self) -> List[Category]:
        with store_guard(logger, "gallery.categories", ErrorMessage.FETCH_FAILED):
            return await catalog.load_categories(self._records, visible_only=True)

    def _select(
        self,
        items: List[PortfolioItem],
        category: str,
        query: str,
        popular: bool,
    ) -> Tuple[List[PortfolioItem], Optional[str]]:
        selected = catalog.filter_by_category(items, category)
        if popular:
            # Items arrive starred-first then newest, so the head is "popular".
            selected = selected[: self._popular_limit]

        if not query.strip():
            return selected, None

        found = fuzzy_search(
            selected, query, catalog.searchable_fields, self._item_threshold
        )
        message = None
        if not found:
            every_tag: List[Tag] = [t for i in items for t in i.tags]
            message = no_match_message(
                every_tag, query, lambda t: t.name, self._tag_threshold
            )
        return found, message

    async def gallery(
        self, category: str = "all", query: str = "", popular: bool = False
    ) -> GalleryResponse:
        categories, items = await self._load()
        counter = StarCounter.from_items(
            ((i.category_id, i.is_starred) for i in items), self._star_limit
        )
        selected, message = self._select(items, category, query, popular)
        logger.info(
            "gallery.view category=%s popular=%s q_len=%d hits=%d",
            category,
            popular,
            len(query.strip()),
            len(selected),
        )
        return GalleryResponse(
            items=[
                GalleryEntry(
                    item=i, canStar=counter.can_star(i.category_id, i.is_starred)
                )
                for i in selected
            ],
            categories=categories,
            starredCounts=counter.as_dict(),
            message=message,
        )

    async def neighbors(
        self, item_id: str, category: str = "all", query: str = "", popular: bool = False
    ) -> NeighborsResponse:
        _, items = await self._load()
        selected, _ = self._select(items, category, query, popular)
        found = neighbors([i.id for i in selected], item_id)
        if found is None:
            raise AppError.of(ErrorMessage.NOT_FOUND)
        return NeighborsResponse(
            index=found.index,
            total=found.total,
            previousId=found.previous_id,
            nextId=found.next_id,
        )

    async def toggle_star(
        self, item_id: str, is_starred: Optional[bool] = None
    ) -> StarResponse:
        """
        Star or unstar one item.

        Starring is refused once the item's category holds `star_limit`
        starred items; unstarring always goes through. The local count moves
        only after the store accepted the change.
        """
        with store_guard(logger, "star.read", ErrorMessage.STAR_FAILED, item=item_id):
            row = await self._records.get_record(Kind.PORTFOLIO_ITEMS, item_id)
            if row is None:
                raise AppError.of(ErrorMessage.NOT_FOUND)
            item = PortfolioItem.model_validate(row)
            current = await self._records.count(
                Kind.PORTFOLIO_ITEMS,
                {"category_id": item.category_id, "is_starred": True},
            )

        counter = StarCounter({item.category_id: current}, self._star_limit)
        new_state = (not item.is_starred) if is_starred is None else is_starred
        if new_state == item.is_starred:
            return StarResponse(item=item, starredCount=current)

        if not counter.can_star(item.category_id, item.is_starred):
            logger.info(
                "star.limit item=%s category=%s count=%d",
                item_id,
                item.category_id,
                current,
            )
            raise AppError.of(ErrorMessage.STAR_LIMIT)

        with store_guard(logger, "star.toggle", ErrorMessage.STAR_FAILED, item=item_id):
            await self._records.update_record(
                Kind.PORTFOLIO_ITEMS, item_id, {"is_starred": new_state}
            )

        item.is_starred = new_state
        count = counter.apply(item.category_id, new_state)
        logger.info("star.toggle.ok item=%s starred=%s count=%d", item_id, new_state, count)
        return StarResponse(item=item, starredCount=count)

    async def track_click(self, item_id: str) -> int:
        with store_guard(logger, "click.track", ErrorMessage.INTERNAL_ERROR, item=item_id):
            row = await self._records.get_record(Kind.PORTFOLIO_ITEMS, item_id)
            if row is None:
                raise AppError.of(ErrorMessage.NOT_FOUND)
            return await self._analytics.increment_click_counter(item_id, now_iso())
