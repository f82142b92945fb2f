# service/portfolio_admin_service.py
import logging
import time
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4
from config.settings import settings
from core.entities import MediaUpload
from core.fuzzy_search import fuzzy_search_tags
from core.star_limiter import can_star
from model.content import PortfolioItem, PortfolioItemTag, Tag, TagPreset
from repository.base import AnalyticsStore, BlobStore, RecordStore, Row
from service import catalog
from service.reorder_service import ReorderService
from util import functions
from util.enums import ErrorMessage, Kind
from util.errors import AppError, StoreError, store_guard
from util.timing import timed

logger = logging.getLogger(__name__)

SAVE_ERROR = "Error saving portfolio item. Please try again."
DELETE_ERROR = "Error deleting portfolio item. Please try again."


class PortfolioAdminService:
    """
    Admin management of portfolio items.

    Saving an item touches three things: the media blob, the item row and
    its tag links. They are written as one unit of work: when a later step
    fails, earlier steps are compensated (new rows deleted, previous row and
    links restored) before the error is reported.
    """

    def __init__(
        self,
        records: RecordStore,
        blobs: BlobStore,
        analytics: AnalyticsStore,
        reorder: ReorderService,
        *,
        bucket: str = settings.MEDIA_BUCKET,
        star_limit: int = settings.STAR_LIMIT,
        tag_threshold: float = settings.TAG_SUGGEST_THRESHOLD,
    ) -> None:
        self._records = records
        self._blobs = blobs
        self._analytics = analytics
        self._reorder = reorder
        self._bucket = bucket
        self._star_limit = star_limit
        self._tag_threshold = tag_threshold

    # ---------------- Reads ----------------

    async def list_items(self, category: str = "all") -> List[PortfolioItem]:
        with store_guard(logger, "admin.items.list", ErrorMessage.FETCH_FAILED):
            _, items = await catalog.load_items(
                self._records, visible_only=False, order_by=catalog.BY_ORDER
            )
        return catalog.filter_by_category(items, category)

    async def tag_suggestions(self, query: str) -> List[Tag]:
        with store_guard(logger, "admin.tags.suggest", ErrorMessage.FETCH_FAILED):
            tags = await catalog.load_tags(self._records)
        return fuzzy_search_tags(tags, query, lambda t: t.name, self._tag_threshold)

    async def search_presets(self, query: str) -> List[TagPreset]:
        with store_guard(logger, "admin.presets.search", ErrorMessage.FETCH_FAILED):
            rows = await self._records.fetch_collection(
                Kind.TAG_PRESETS, order_by=[("created_at", True)]
            )
        presets = [TagPreset.model_validate(r) for r in rows]
        q = query.strip().lower()
        if not q:
            return presets
        return [p for p in presets if q in p.preset_name.lower()]

    async def apply_preset(self, preset_id: str, current: Sequence[str]) -> List[str]:
        with store_guard(logger, "admin.presets.apply", ErrorMessage.FETCH_FAILED):
            row = await self._records.get_record(Kind.TAG_PRESETS, preset_id)
        if row is None:
            raise AppError.of(ErrorMessage.NOT_FOUND)
        return functions.unique_in_order(current, TagPreset.model_validate(row).tag_ids)

    # ---------------- Writes ----------------

    async def _upload(self, upload: MediaUpload) -> str:
        ext = functions.file_extension(upload.filename)
        path = f"portfolio/{int(time.time() * 1000)}-{uuid4().hex[:8]}.{ext}"
        with store_guard(logger, "admin.item.upload", ErrorMessage.UPLOAD_FAILED):
            return await self._blobs.upload_blob(
                self._bucket, path, upload.data, upload.content_type
            )

    async def _check_star(
        self, category_id: str, wants_star: bool, already_counted: bool
    ) -> None:
        if not wants_star or already_counted:
            return
        with store_guard(logger, "admin.item.star_count", ErrorMessage.FETCH_FAILED):
            count = await self._records.count(
                Kind.PORTFOLIO_ITEMS, {"category_id": category_id, "is_starred": True}
            )
        if not can_star(False, count, self._star_limit):
            raise AppError.of(ErrorMessage.STAR_LIMIT)

    async def _replace_tags(self, item_id: str, tag_ids: Sequence[str]) -> None:
        # Delete-then-reinsert keeps the link set exactly equal to tag_ids.
        await self._records.delete_where(
            Kind.PORTFOLIO_ITEM_TAGS, {"portfolio_item_id": item_id}
        )
        if tag_ids:
            await self._records.insert_many(
                Kind.PORTFOLIO_ITEM_TAGS,
                [{"portfolio_item_id": item_id, "tag_id": t} for t in tag_ids],
            )

    async def _current_tag_ids(self, item_id: str) -> List[str]:
        links = await self._records.fetch_collection(
            Kind.PORTFOLIO_ITEM_TAGS, {"portfolio_item_id": item_id}
        )
        return [PortfolioItemTag.model_validate(link).tag_id for link in links]

    async def create_item(
        self,
        upload: Optional[MediaUpload],
        category_id: str,
        tag_ids: Sequence[str] = (),
        is_starred: bool = False,
    ) -> PortfolioItem:
        if upload is None or not category_id.strip():
            raise AppError.of(ErrorMessage.ITEM_INCOMPLETE)
        tag_ids = functions.unique_in_order(tag_ids)
        await self._check_star(category_id, is_starred, already_counted=False)

        file_url = await self._upload(upload)
        with timed(logger, "admin.item.create", tags=len(tag_ids)):
            with store_guard(logger, "admin.item.create", ErrorMessage.INTERNAL_ERROR, SAVE_ERROR):
                row = await self._records.insert_record(
                    Kind.PORTFOLIO_ITEMS,
                    {
                        "file_url": file_url,
                        "file_type": upload.file_type,
                        "category_id": category_id,
                        "order_index": await self._records.count(Kind.PORTFOLIO_ITEMS),
                        "is_starred": is_starred,
                    },
                )
            try:
                await self._replace_tags(row["id"], tag_ids)
            except StoreError as e:
                logger.error("admin.item.tags.error item=%s err=%s", row["id"], e)
                await self._undo_create(row["id"])
                raise AppError(SAVE_ERROR, ErrorMessage.INTERNAL_ERROR.value.http_status) from e

        logger.info("admin.item.create.ok item=%s tags=%d", row["id"], len(tag_ids))
        return await self._joined(row["id"])

    async def _undo_create(self, item_id: str) -> None:
        try:
            await self._records.delete_where(
                Kind.PORTFOLIO_ITEM_TAGS, {"portfolio_item_id": item_id}
            )
            await self._records.delete_record(Kind.PORTFOLIO_ITEMS, item_id)
        except StoreError as e:
            logger.error("admin.item.compensate.error item=%s err=%s", item_id, e)

    async def update_item(
        self,
        item_id: str,
        category_id: str,
        tag_ids: Sequence[str] = (),
        is_starred: bool = False,
        upload: Optional[MediaUpload] = None,
    ) -> PortfolioItem:
        if not category_id.strip():
            raise AppError.of(ErrorMessage.ITEM_INCOMPLETE)
        tag_ids = functions.unique_in_order(tag_ids)

        with store_guard(logger, "admin.item.read", ErrorMessage.FETCH_FAILED, item=item_id):
            previous = await self._records.get_record(Kind.PORTFOLIO_ITEMS, item_id)
            if previous is None:
                raise AppError.of(ErrorMessage.NOT_FOUND)
            previous_tags = await self._current_tag_ids(item_id)

        already_counted = bool(previous.get("is_starred")) and previous.get("category_id") == category_id
        await self._check_star(category_id, is_starred, already_counted)

        fields: Dict[str, Any] = {"category_id": category_id, "is_starred": is_starred}
        if upload is not None:
            fields["file_url"] = await self._upload(upload)
            fields["file_type"] = upload.file_type

        with store_guard(logger, "admin.item.update", ErrorMessage.INTERNAL_ERROR, SAVE_ERROR):
            await self._records.update_record(Kind.PORTFOLIO_ITEMS, item_id, fields)
        try:
            await self._replace_tags(item_id, tag_ids)
        except StoreError as e:
            logger.error("admin.item.tags.error item=%s err=%s", item_id, e)
            await self._undo_update(item_id, previous, previous_tags)
            raise AppError(SAVE_ERROR, ErrorMessage.INTERNAL_ERROR.value.http_status) from e

        logger.info("admin.item.update.ok item=%s tags=%d", item_id, len(tag_ids))
        return await self._joined(item_id)

    async def _undo_update(self, item_id: str, previous: Row, previous_tags: List[str]) -> None:
        restore = {k: previous.get(k) for k in ("category_id", "is_starred", "file_url", "file_type")}
        try:
            await self._records.update_record(Kind.PORTFOLIO_ITEMS, item_id, restore)
            await self._replace_tags(item_id, previous_tags)
        except StoreError as e:
            logger.error("admin.item.compensate.error item=%s err=%s", item_id, e)

    async def delete_item(self, item_id: str) -> None:
        with store_guard(
            logger, "admin.item.delete", ErrorMessage.INTERNAL_ERROR, DELETE_ERROR, item=item_id
        ):
            await catalog.purge_items(self._records, self._analytics, [item_id])
        logger.info("admin.item.delete.ok item=%s", item_id)
        await self._reorder.settle(Kind.PORTFOLIO_ITEMS)

    async def _joined(self, item_id: str) -> PortfolioItem:
        for item in await self.list_items():
            if item.id == item_id:
                return item
        raise AppError.of(ErrorMessage.NOT_FOUND)
