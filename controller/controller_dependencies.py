# controller/controller_dependencies.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.entities import MediaUpload
from repository.analytics_repository import AnalyticsRepository
from repository.base import AnalyticsStore, BlobStore, RecordStore, SessionStore
from repository.blob_repository import BlobRepository
from repository.record_repository import RecordRepository
from repository.session_repository import SessionRepository
from service.analytics_service import AnalyticsService
from service.auth_service import AuthService
from service.content_service import ContentService
from service.estimate_service import EstimateService
from service.gallery_service import GalleryService
from service.portfolio_admin_service import PortfolioAdminService
from service.private_access_service import PrivateAccessService
from service.reorder_service import ReorderService
from util.enums import ErrorMessage
from util.errors import AppError

# Overridden as a unit in tests.
rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)

_bearer = HTTPBearer(auto_error=False)


# ---------------- Stores ----------------


def get_records() -> RecordStore:
    return RecordRepository()


def get_blobs() -> BlobStore:
    return BlobRepository()


def get_sessions() -> SessionStore:
    return SessionRepository()


def get_analytics_store() -> AnalyticsStore:
    return AnalyticsRepository()


# ---------------- Services ----------------


def get_reorder_service(records: RecordStore = Depends(get_records)) -> ReorderService:
    return ReorderService(records)


def get_gallery_service(
    records: RecordStore = Depends(get_records),
    analytics: AnalyticsStore = Depends(get_analytics_store),
) -> GalleryService:
    return GalleryService(records, analytics)


def get_content_service(
    records: RecordStore = Depends(get_records),
    blobs: BlobStore = Depends(get_blobs),
    analytics: AnalyticsStore = Depends(get_analytics_store),
    reorder: ReorderService = Depends(get_reorder_service),
) -> ContentService:
    return ContentService(records, blobs, analytics, reorder)


def get_portfolio_admin_service(
    records: RecordStore = Depends(get_records),
    blobs: BlobStore = Depends(get_blobs),
    analytics: AnalyticsStore = Depends(get_analytics_store),
    reorder: ReorderService = Depends(get_reorder_service),
) -> PortfolioAdminService:
    return PortfolioAdminService(records, blobs, analytics, reorder)


def get_auth_service(sessions: SessionStore = Depends(get_sessions)) -> AuthService:
    return AuthService(sessions)


def get_analytics_service(
    records: RecordStore = Depends(get_records),
    analytics: AnalyticsStore = Depends(get_analytics_store),
) -> AnalyticsService:
    return AnalyticsService(records, analytics)


def get_estimate_service(records: RecordStore = Depends(get_records)) -> EstimateService:
    return EstimateService(records)


def get_private_access_service(
    records: RecordStore = Depends(get_records),
) -> PrivateAccessService:
    return PrivateAccessService(records)


# ---------------- Auth ----------------


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[str]:
    return credentials.credentials if credentials else None


async def require_admin(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> str:
    """No session -> 401 (client shows the login); any session is authorised."""
    email = await auth.get_session(token)
    if email is None:
        raise AppError.of(ErrorMessage.UNAUTHORIZED)
    return email


# ---------------- Uploads ----------------


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=413,
        detail={
            "ok": False,
            "error": "file_too_large",
            "maxMb": settings.MAX_FILE_MB,
        },
    )


async def enforce_max_upload_size(request: Request) -> None:
    # Fast pre-check via Content-Length if present
    max_bytes = settings.MAX_FILE_MB * 1024 * 1024
    cl = request.headers.get("content-length")
    if cl and cl.isdigit() and int(cl) > max_bytes:
        raise _too_large()


async def read_upload(file: Optional[UploadFile]) -> Optional[MediaUpload]:
    """Read an optional multipart file with a hard size cap."""
    if file is None or not file.filename:
        return None
    max_bytes = settings.MAX_FILE_MB * 1024 * 1024
    blob = await file.read(max_bytes + 1)
    if len(blob) > max_bytes:
        raise _too_large()
    return MediaUpload(
        data=blob,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )
