# service/analytics_service.py
import asyncio
import logging
from typing import Optional
from config.settings import settings
from model.api import AnalyticsSummary, DashboardCounts, TopItem
from repository.base import AnalyticsStore, RecordStore
from service import catalog
from util.enums import ErrorMessage, Kind
from util.errors import store_guard
from util.functions import today_iso

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(
        self,
        records: RecordStore,
        analytics: AnalyticsStore,
        top_n: int = settings.TOP_CLICKED_ITEMS,
    ) -> None:
        self._records = records
        self._analytics = analytics
        self._top_n = top_n

    async def track_visit(self, date: Optional[str] = None) -> int:
        day = date or today_iso()
        with store_guard(logger, "analytics.visit", ErrorMessage.INTERNAL_ERROR, day=day):
            count = await self._analytics.increment_daily_visit_counter(day)
        logger.debug("analytics.visit.ok day=%s count=%d", day, count)
        return count

    async def summary(self, today: Optional[str] = None) -> AnalyticsSummary:
        """Totals across all days, today's visits and the most clicked items."""
        day = today or today_iso()
        with store_guard(logger, "analytics.summary", ErrorMessage.FETCH_FAILED):
            visits = await self._analytics.visit_counts()
            clicks = await self._analytics.click_counts()
            _, items = await catalog.load_items(
                self._records, visible_only=False, order_by=catalog.BY_ORDER
            )

        by_id = {i.id: i for i in items}
        ranked = sorted(clicks.items(), key=lambda kv: kv[1][0], reverse=True)
        return AnalyticsSummary(
            totalVisits=sum(visits.values()),
            todayVisits=visits.get(day, 0),
            totalClicks=sum(c for c, _ in clicks.values()),
            topItems=[
                TopItem(item=by_id.get(item_id), itemId=item_id, clicks=count)
                for item_id, (count, _) in ranked[: self._top_n]
            ],
        )

    async def dashboard_counts(self) -> DashboardCounts:
        kinds = (
            Kind.PORTFOLIO_ITEMS,
            Kind.AB_TESTS,
            Kind.ACHIEVEMENTS,
            Kind.REVIEWS,
            Kind.FAQS,
            Kind.CATEGORIES,
        )
        with store_guard(logger, "analytics.dashboard", ErrorMessage.FETCH_FAILED):
            counts = await asyncio.gather(*(self._records.count(k) for k in kinds))
        return DashboardCounts(
            portfolioItems=counts[0],
            abTests=counts[1],
            achievements=counts[2],
            reviews=counts[3],
            faqs=counts[4],
            categories=counts[5],
        )
