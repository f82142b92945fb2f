# controller/site_controller.py
from typing import List
from fastapi import APIRouter, Depends, Response, status
from model.api import (
    AchievementView,
    PrivateAccessRequest,
    PrivateAccessResponse,
    PrivateSubmissionRequest,
    TimeEstimateResponse,
)
from model.content import ABTest, FAQ, PrivateFormSubmission, Review
from repository.base import BlobStore
from service.analytics_service import AnalyticsService
from service.content_service import ContentService
from service.estimate_service import EstimateService
from service.private_access_service import PrivateAccessService
from util.constants import InternalURIs
from util.enums import ErrorMessage, Kind
from util.errors import AppError, StoreError
from controller.controller_dependencies import (
    get_analytics_service,
    get_blobs,
    get_content_service,
    get_estimate_service,
    get_private_access_service,
    rate_limiter,
)

site_router = APIRouter()


@site_router.get(InternalURIs.FAQS, response_model=List[FAQ])
async def list_faqs(service: ContentService = Depends(get_content_service)):
    return await service.list_records(Kind.FAQS)


@site_router.get(InternalURIs.REVIEWS, response_model=List[Review])
async def list_reviews(service: ContentService = Depends(get_content_service)):
    return await service.list_records(Kind.REVIEWS)


@site_router.get(InternalURIs.ACHIEVEMENTS, response_model=List[AchievementView])
async def list_achievements(
    service: ContentService = Depends(get_content_service),
) -> List[AchievementView]:
    return await service.achievement_views()


@site_router.get(InternalURIs.AB_TESTS, response_model=List[ABTest])
async def list_ab_tests(service: ContentService = Depends(get_content_service)):
    return await service.list_records(Kind.AB_TESTS)


@site_router.get(InternalURIs.TIME_ESTIMATE, response_model=TimeEstimateResponse)
async def time_estimate(
    service: EstimateService = Depends(get_estimate_service),
) -> TimeEstimateResponse:
    return await service.current()


@site_router.post(InternalURIs.VISIT, dependencies=[Depends(rate_limiter)])
async def track_visit(service: AnalyticsService = Depends(get_analytics_service)):
    return {"visits": await service.track_visit()}


@site_router.post(
    InternalURIs.PRIVATE_ACCESS,
    response_model=PrivateAccessResponse,
    dependencies=[Depends(rate_limiter)],
)
async def private_access(
    payload: PrivateAccessRequest,
    service: PrivateAccessService = Depends(get_private_access_service),
) -> PrivateAccessResponse:
    service.check_password(payload.password)
    return PrivateAccessResponse(ok=True)


@site_router.post(
    InternalURIs.PRIVATE_SUBMISSIONS,
    response_model=PrivateFormSubmission,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limiter)],
)
async def private_submit(
    payload: PrivateSubmissionRequest,
    service: PrivateAccessService = Depends(get_private_access_service),
) -> PrivateFormSubmission:
    return await service.submit(payload.name, payload.email, payload.message)


@site_router.get(InternalURIs.MEDIA)
async def media(bucket: str, path: str, blobs: BlobStore = Depends(get_blobs)):
    try:
        found = await blobs.get_blob(bucket, path)
    except StoreError as e:
        raise AppError.of(ErrorMessage.FETCH_FAILED) from e
    if found is None:
        raise AppError.of(ErrorMessage.NOT_FOUND)
    data, content_type = found
    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
