# controller/admin_controller.py
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from model.api import (
    AnalyticsSummary,
    AppliedPresetResponse,
    DashboardCounts,
    OrderEntry,
    ProgressRequest,
    ReorderRequest,
    ReorderResponse,
    StarRequest,
    StarResponse,
    TagSuggestionsResponse,
    TimeEstimateResponse,
)
from model.content import ABTest, Category, PortfolioItem, PrivateFormSubmission, Record, TagPreset
from service.analytics_service import AnalyticsService
from service.content_service import ContentService
from service.estimate_service import EstimateService
from service.gallery_service import GalleryService
from service.portfolio_admin_service import PortfolioAdminService
from service.private_access_service import PrivateAccessService
from service.reorder_service import ReorderService
from util.constants import InternalURIs
from util.enums import Kind
from controller.controller_dependencies import (
    enforce_max_upload_size,
    get_analytics_service,
    get_content_service,
    get_estimate_service,
    get_gallery_service,
    get_portfolio_admin_service,
    get_private_access_service,
    get_reorder_service,
    rate_limiter,
    read_upload,
    require_admin,
)

admin_router = APIRouter(dependencies=[Depends(require_admin), Depends(rate_limiter)])


# ---------------- Dashboard ----------------


@admin_router.get(InternalURIs.ADMIN_DASHBOARD, response_model=DashboardCounts)
async def dashboard(
    service: AnalyticsService = Depends(get_analytics_service),
) -> DashboardCounts:
    return await service.dashboard_counts()


@admin_router.get(InternalURIs.ADMIN_ANALYTICS, response_model=AnalyticsSummary)
async def analytics(
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsSummary:
    return await service.summary()


# ---------------- Portfolio items ----------------


@admin_router.get(InternalURIs.ADMIN_ITEMS, response_model=List[PortfolioItem])
async def list_items(
    category: str = Query("all"),
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> List[PortfolioItem]:
    return await service.list_items(category)


@admin_router.post(
    InternalURIs.ADMIN_ITEMS,
    response_model=PortfolioItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def create_item(
    categoryId: str = Form(""),
    tagIds: List[str] = Form(default=[]),
    isStarred: bool = Form(False),
    file: Optional[UploadFile] = File(None),
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> PortfolioItem:
    upload = await read_upload(file)
    return await service.create_item(upload, categoryId, tagIds, isStarred)


@admin_router.put(
    InternalURIs.ADMIN_ITEM,
    response_model=PortfolioItem,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def update_item(
    item_id: str,
    categoryId: str = Form(""),
    tagIds: List[str] = Form(default=[]),
    isStarred: bool = Form(False),
    file: Optional[UploadFile] = File(None),
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> PortfolioItem:
    upload = await read_upload(file)
    return await service.update_item(item_id, categoryId, tagIds, isStarred, upload)


@admin_router.delete(InternalURIs.ADMIN_ITEM, status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> None:
    await service.delete_item(item_id)


@admin_router.post(InternalURIs.ADMIN_ITEM_STAR, response_model=StarResponse)
async def toggle_star(
    item_id: str,
    payload: Optional[StarRequest] = None,
    service: GalleryService = Depends(get_gallery_service),
) -> StarResponse:
    return await service.toggle_star(item_id, payload.isStarred if payload else None)


# ---------------- Tags & presets ----------------


@admin_router.get(InternalURIs.ADMIN_TAG_SUGGESTIONS, response_model=TagSuggestionsResponse)
async def tag_suggestions(
    q: str = Query(""),
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> TagSuggestionsResponse:
    return TagSuggestionsResponse(tags=await service.tag_suggestions(q))


@admin_router.get(InternalURIs.ADMIN_PRESET_SEARCH, response_model=List[TagPreset])
async def search_presets(
    q: str = Query(""),
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> List[TagPreset]:
    return await service.search_presets(q)


@admin_router.post(InternalURIs.ADMIN_PRESET_APPLY, response_model=AppliedPresetResponse)
async def apply_preset(
    preset_id: str,
    tagIds: List[str] = Body(default=[], embed=True),
    service: PortfolioAdminService = Depends(get_portfolio_admin_service),
) -> AppliedPresetResponse:
    return AppliedPresetResponse(tagIds=await service.apply_preset(preset_id, tagIds))


# ---------------- Categories & A/B tests ----------------


@admin_router.post(InternalURIs.ADMIN_CATEGORY_VISIBILITY, response_model=Category)
async def toggle_category_visibility(
    record_id: str,
    service: ContentService = Depends(get_content_service),
) -> Category:
    return await service.toggle_category_visibility(record_id)


@admin_router.post(
    InternalURIs.ADMIN_AB_TESTS,
    response_model=ABTest,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def create_ab_test(
    videoTitle: str = Form(""),
    versionA: Optional[UploadFile] = File(None),
    versionB: Optional[UploadFile] = File(None),
    service: ContentService = Depends(get_content_service),
) -> ABTest:
    return await service.create_ab_test(
        videoTitle, await read_upload(versionA), await read_upload(versionB)
    )


@admin_router.put(
    InternalURIs.ADMIN_AB_TEST,
    response_model=ABTest,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def update_ab_test(
    record_id: str,
    videoTitle: str = Form(""),
    versionA: Optional[UploadFile] = File(None),
    versionB: Optional[UploadFile] = File(None),
    service: ContentService = Depends(get_content_service),
) -> ABTest:
    return await service.update_ab_test(
        record_id, videoTitle, await read_upload(versionA), await read_upload(versionB)
    )


# ---------------- Progress & submissions ----------------


@admin_router.get(InternalURIs.ADMIN_PROGRESS, response_model=TimeEstimateResponse)
async def progress(
    service: EstimateService = Depends(get_estimate_service),
) -> TimeEstimateResponse:
    return await service.current()


@admin_router.put(InternalURIs.ADMIN_PROGRESS, response_model=TimeEstimateResponse)
async def set_progress(
    payload: ProgressRequest,
    service: EstimateService = Depends(get_estimate_service),
) -> TimeEstimateResponse:
    await service.set_progress(payload.thumbnailsInProgress)
    return await service.current()


@admin_router.get(InternalURIs.ADMIN_SUBMISSIONS, response_model=List[PrivateFormSubmission])
async def list_submissions(
    service: PrivateAccessService = Depends(get_private_access_service),
) -> List[PrivateFormSubmission]:
    return await service.submissions()


@admin_router.delete(InternalURIs.ADMIN_SUBMISSION, status_code=status.HTTP_204_NO_CONTENT)
async def delete_submission(
    record_id: str,
    service: ContentService = Depends(get_content_service),
) -> None:
    await service.delete(Kind.PRIVATE_FORM_SUBMISSIONS, record_id)


# ---------------- Ordering ----------------


@admin_router.post(InternalURIs.ADMIN_REORDER, response_model=ReorderResponse)
async def reorder(
    kind: Kind,
    payload: ReorderRequest,
    service: ReorderService = Depends(get_reorder_service),
) -> ReorderResponse:
    entities = await service.reorder(kind, payload.movedId, payload.targetId)
    return ReorderResponse(
        items=[OrderEntry(id=e.id, orderIndex=e.order_index) for e in entities]
    )


# ---------------- Generic content ----------------


@admin_router.get(InternalURIs.ADMIN_RECORDS)
async def list_records(
    kind: Kind,
    service: ContentService = Depends(get_content_service),
) -> List[Dict[str, Any]]:
    return [r.model_dump() for r in await service.list_records(kind)]


@admin_router.post(InternalURIs.ADMIN_RECORDS, status_code=status.HTTP_201_CREATED)
async def create_record(
    kind: Kind,
    payload: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
) -> Dict[str, Any]:
    record: Record = await service.create(kind, payload)
    return record.model_dump()


@admin_router.put(InternalURIs.ADMIN_RECORD)
async def update_record(
    kind: Kind,
    record_id: str,
    payload: Dict[str, Any] = Body(...),
    service: ContentService = Depends(get_content_service),
) -> Dict[str, Any]:
    record: Record = await service.update(kind, record_id, payload)
    return record.model_dump()


@admin_router.delete(InternalURIs.ADMIN_RECORD, status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    kind: Kind,
    record_id: str,
    service: ContentService = Depends(get_content_service),
) -> None:
    await service.delete(kind, record_id)
