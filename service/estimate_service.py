# service/estimate_service.py
import logging
from datetime import datetime
from typing import Optional
from core.delivery import tier
from model.api import TimeEstimateResponse
from model.content import ProgressTracker
from repository.base import RecordStore
from util.enums import ErrorMessage, Kind
from util.errors import store_guard
from util.functions import format_last_updated, now_iso, parse_iso

logger = logging.getLogger(__name__)

LATEST_FIRST = [("updated_at", True)]


class EstimateService:
    """Delivery-time estimate from the latest thumbnails-in-progress figure."""

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    async def _latest(self) -> Optional[ProgressTracker]:
        rows = await self._records.fetch_collection(
            Kind.PROGRESS_TRACKER, order_by=LATEST_FIRST
        )
        return ProgressTracker.model_validate(rows[0]) if rows else None

    async def current(self, now: Optional[datetime] = None) -> TimeEstimateResponse:
        with store_guard(logger, "estimate.read", ErrorMessage.FETCH_FAILED):
            latest = await self._latest()

        count = latest.thumbnails_in_progress if latest else 0
        band = tier(count)
        updated_at = latest.updated_at if latest else None
        return TimeEstimateResponse(
            thumbnailsInProgress=count,
            timeLabel=band.time_label,
            severity=band.severity,
            status=band.status,
            description=band.description,
            updatedAt=updated_at,
            lastUpdated=(
                format_last_updated(parse_iso(updated_at), now) if updated_at else "Unknown"
            ),
        )

    async def set_progress(self, thumbnails_in_progress: int) -> ProgressTracker:
        """Update the latest row in place, or create the first one."""
        msg = "Error saving progress. Please try again."
        fields = {"thumbnails_in_progress": thumbnails_in_progress, "updated_at": now_iso()}
        with store_guard(logger, "estimate.save", ErrorMessage.INTERNAL_ERROR, msg):
            latest = await self._latest()
            if latest is not None:
                row = await self._records.update_record(Kind.PROGRESS_TRACKER, latest.id, fields)
            else:
                row = await self._records.insert_record(Kind.PROGRESS_TRACKER, fields)
        logger.info("estimate.save.ok count=%d", thumbnails_in_progress)
        return ProgressTracker.model_validate(row)
