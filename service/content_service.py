# service/content_service.py
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Type
from pydantic import BaseModel, ValidationError
from config.settings import settings
from core.count_up import display_value
from core.entities import MediaUpload
from model.api import (
    AchievementPayload,
    AchievementView,
    CategoryPayload,
    FAQPayload,
    ReviewPayload,
    TagPayload,
    TagPresetPayload,
)
from model.content import (
    ABTest,
    Achievement,
    Category,
    FAQ,
    PrivateFormSubmission,
    ProgressTracker,
    Record,
    Review,
    Tag,
    TagPreset,
)
from repository.base import AnalyticsStore, BlobStore, OrderBy, RecordStore
from service import catalog
from service.catalog import BY_ORDER
from service.reorder_service import ReorderService
from util import functions
from util.enums import ORDERED_KINDS, ErrorMessage, Kind
from util.errors import AppError, store_guard

logger = logging.getLogger(__name__)

NEWEST_FIRST: OrderBy = [("created_at", True)]

RECORD_MODELS: Dict[Kind, Type[Record]] = {
    Kind.CATEGORIES: Category,
    Kind.TAGS: Tag,
    Kind.TAG_PRESETS: TagPreset,
    Kind.AB_TESTS: ABTest,
    Kind.ACHIEVEMENTS: Achievement,
    Kind.REVIEWS: Review,
    Kind.FAQS: FAQ,
    Kind.PROGRESS_TRACKER: ProgressTracker,
    Kind.PRIVATE_FORM_SUBMISSIONS: PrivateFormSubmission,
}

LABELS: Dict[Kind, str] = {
    Kind.CATEGORIES: "category",
    Kind.TAGS: "tag",
    Kind.TAG_PRESETS: "preset",
    Kind.AB_TESTS: "A/B test",
    Kind.ACHIEVEMENTS: "achievement",
    Kind.REVIEWS: "review",
    Kind.FAQS: "FAQ",
    Kind.PORTFOLIO_ITEMS: "portfolio item",
    Kind.PROGRESS_TRACKER: "progress",
    Kind.PRIVATE_FORM_SUBMISSIONS: "submission",
}


def _required(*values: str) -> None:
    if any(not v.strip() for v in values):
        raise AppError.of(ErrorMessage.FIELDS_REQUIRED)


def _category_fields(p: CategoryPayload) -> Dict[str, Any]:
    _required(p.name)
    return {
        "name": p.name.strip(),
        "slug": functions.generate_slug(p.name),
        "aspect_ratio": p.aspect_ratio,
        "is_hidden": p.is_hidden,
    }


def _tag_fields(p: TagPayload) -> Dict[str, Any]:
    _required(p.name)
    return {"name": p.name.strip(), "slug": functions.generate_slug(p.name), "color": p.color}


def _preset_fields(p: TagPresetPayload) -> Dict[str, Any]:
    if not p.preset_name.strip() or not p.tag_ids:
        raise AppError.of(ErrorMessage.PRESET_INCOMPLETE)
    return {
        "preset_name": p.preset_name.strip(),
        "tag_ids": functions.unique_in_order(p.tag_ids),
    }


def _achievement_fields(p: AchievementPayload) -> Dict[str, Any]:
    _required(p.label)
    return {
        "number": p.number,
        "suffix": p.suffix.strip(),
        "label": p.label.strip(),
        "icon": p.icon.strip(),
    }


def _review_fields(p: ReviewPayload) -> Dict[str, Any]:
    _required(p.reviewer_name, p.reviewer_text)
    return {"reviewer_name": p.reviewer_name.strip(), "reviewer_text": p.reviewer_text.strip()}


def _faq_fields(p: FAQPayload) -> Dict[str, Any]:
    _required(p.question, p.answer)
    return {"question": p.question.strip(), "answer": p.answer.strip()}


# Kinds editable through the generic JSON content routes.
EDITORS: Dict[Kind, tuple[Type[BaseModel], Callable[[Any], Dict[str, Any]]]] = {
    Kind.CATEGORIES: (CategoryPayload, _category_fields),
    Kind.TAGS: (TagPayload, _tag_fields),
    Kind.TAG_PRESETS: (TagPresetPayload, _preset_fields),
    Kind.ACHIEVEMENTS: (AchievementPayload, _achievement_fields),
    Kind.REVIEWS: (ReviewPayload, _review_fields),
    Kind.FAQS: (FAQPayload, _faq_fields),
}


def _order_for(kind: Kind) -> OrderBy:
    return BY_ORDER if kind in ORDERED_KINDS else NEWEST_FIRST


class ContentService:
    """
    Admin CRUD for the site's small content tables (categories, tags, tag
    presets, achievements, reviews, FAQs, A/B tests) plus their public reads.

    Required fields are checked before any store call; store failures come
    back as "Error saving <thing>. Please try again.".
    """

    def __init__(
        self,
        records: RecordStore,
        blobs: BlobStore,
        analytics: AnalyticsStore,
        reorder: ReorderService,
        bucket: str = settings.MEDIA_BUCKET,
        million_views_label: str = settings.MILLION_VIEWS_LABEL,
    ) -> None:
        self._records = records
        self._blobs = blobs
        self._analytics = analytics
        self._reorder = reorder
        self._bucket = bucket
        self._million_label = million_views_label

    @staticmethod
    def _save_error(kind: Kind) -> str:
        return f"Error saving {LABELS.get(kind, 'record')}. Please try again."

    @staticmethod
    def _delete_error(kind: Kind) -> str:
        return f"Error deleting {LABELS.get(kind, 'record')}. Please try again."

    # ---------------- Reads ----------------

    async def list_records(self, kind: Kind) -> List[Record]:
        model = RECORD_MODELS.get(kind)
        if model is None:
            raise AppError.of(ErrorMessage.NOT_FOUND)
        with store_guard(logger, "content.list", ErrorMessage.FETCH_FAILED, kind=kind):
            rows = await self._records.fetch_collection(kind, order_by=_order_for(kind))
        return [model.model_validate(r) for r in rows]

    async def achievement_views(self) -> List[AchievementView]:
        views = []
        for a in await self.list_records(Kind.ACHIEVEMENTS):
            million = a.label == self._million_label
            # Final frame of the card animation: formatted once it is the views card.
            views.append(
                AchievementView(
                    achievement=a,
                    isMillionViews=million,
                    displayValue=display_value(a.number, million, a.suffix),
                )
            )
        return views

    # ---------------- Generic JSON editors ----------------

    def _fields(self, kind: Kind, payload: Dict[str, Any]) -> Dict[str, Any]:
        editor = EDITORS.get(kind)
        if editor is None:
            raise AppError.of(ErrorMessage.NOT_FOUND)
        model, to_fields = editor
        try:
            parsed = model.model_validate(payload)
        except ValidationError as e:
            logger.info("content.payload.invalid kind=%s errors=%d", kind, e.error_count())
            raise AppError.of(ErrorMessage.FIELDS_REQUIRED) from e
        return to_fields(parsed)

    async def create(self, kind: Kind, payload: Dict[str, Any]) -> Record:
        fields = self._fields(kind, payload)
        with store_guard(
            logger, "content.create", ErrorMessage.INTERNAL_ERROR, self._save_error(kind), kind=kind
        ):
            if kind in ORDERED_KINDS:
                fields["order_index"] = await self._records.count(kind)
            row = await self._records.insert_record(kind, fields)
        logger.info("content.create.ok kind=%s id=%s", kind, row["id"])
        return RECORD_MODELS[kind].model_validate(row)

    async def update(self, kind: Kind, record_id: str, payload: Dict[str, Any]) -> Record:
        fields = self._fields(kind, payload)
        with store_guard(
            logger, "content.update", ErrorMessage.INTERNAL_ERROR, self._save_error(kind), kind=kind
        ):
            row = await self._records.update_record(kind, record_id, fields)
        logger.info("content.update.ok kind=%s id=%s", kind, record_id)
        return RECORD_MODELS[kind].model_validate(row)

    async def delete(self, kind: Kind, record_id: str) -> None:
        """
        Flow:
        - Categories take their portfolio items (with tag links and click
          counters) along; the category row goes last so a failed attempt
          can be retried.
        - Tags drop their item links.
        - Ordered kinds are re-indexed afterwards on a best-effort basis.
        """
        if kind not in RECORD_MODELS:
            raise AppError.of(ErrorMessage.NOT_FOUND)
        purged = 0
        with store_guard(
            logger, "content.delete", ErrorMessage.INTERNAL_ERROR, self._delete_error(kind), kind=kind
        ):
            if kind == Kind.CATEGORIES:
                if await self._records.get_record(kind, record_id) is None:
                    raise AppError.of(ErrorMessage.NOT_FOUND)
                items = await self._records.fetch_collection(
                    Kind.PORTFOLIO_ITEMS, {"category_id": record_id}
                )
                purged = await catalog.purge_items(
                    self._records, self._analytics, [row["id"] for row in items]
                )
            await self._records.delete_record(kind, record_id)
            if kind == Kind.TAGS:
                await self._records.delete_where(Kind.PORTFOLIO_ITEM_TAGS, {"tag_id": record_id})
        logger.info("content.delete.ok kind=%s id=%s items=%d", kind, record_id, purged)
        if kind in ORDERED_KINDS:
            await self._reorder.settle(kind)
        if purged:
            await self._reorder.settle(Kind.PORTFOLIO_ITEMS)

    async def toggle_category_visibility(self, category_id: str) -> Category:
        msg = "Error updating category visibility. Please try again."
        with store_guard(logger, "category.visibility", ErrorMessage.INTERNAL_ERROR, msg):
            row = await self._records.get_record(Kind.CATEGORIES, category_id)
            if row is None:
                raise AppError.of(ErrorMessage.NOT_FOUND)
            row = await self._records.update_record(
                Kind.CATEGORIES, category_id, {"is_hidden": not row.get("is_hidden", False)}
            )
        return Category.model_validate(row)

    # ---------------- A/B tests (multipart) ----------------

    async def _upload(self, upload: MediaUpload, variant: str) -> str:
        ext = functions.file_extension(upload.filename, "png")
        path = f"ab-tests/{int(time.time() * 1000)}-{variant}.{ext}"
        with store_guard(logger, "ab.upload", ErrorMessage.UPLOAD_FAILED, variant=variant):
            return await self._blobs.upload_blob(
                self._bucket, path, upload.data, upload.content_type
            )

    async def create_ab_test(
        self,
        video_title: str,
        version_a: Optional[MediaUpload],
        version_b: Optional[MediaUpload],
    ) -> ABTest:
        _required(video_title)
        if version_a is None or version_b is None:
            raise AppError.of(ErrorMessage.AB_IMAGES_REQUIRED)
        url_a = await self._upload(version_a, "a")
        url_b = await self._upload(version_b, "b")
        with store_guard(
            logger, "ab.create", ErrorMessage.INTERNAL_ERROR, self._save_error(Kind.AB_TESTS)
        ):
            row = await self._records.insert_record(
                Kind.AB_TESTS,
                {
                    "video_title": video_title.strip(),
                    "version_a_url": url_a,
                    "version_b_url": url_b,
                    "order_index": await self._records.count(Kind.AB_TESTS),
                },
            )
        return ABTest.model_validate(row)

    async def update_ab_test(
        self,
        record_id: str,
        video_title: str,
        version_a: Optional[MediaUpload] = None,
        version_b: Optional[MediaUpload] = None,
    ) -> ABTest:
        _required(video_title)
        fields: Dict[str, Any] = {"video_title": video_title.strip()}
        if version_a is not None:
            fields["version_a_url"] = await self._upload(version_a, "a")
        if version_b is not None:
            fields["version_b_url"] = await self._upload(version_b, "b")
        with store_guard(
            logger, "ab.update", ErrorMessage.INTERNAL_ERROR, self._save_error(Kind.AB_TESTS)
        ):
            row = await self._records.update_record(Kind.AB_TESTS, record_id, fields)
        return ABTest.model_validate(row)
