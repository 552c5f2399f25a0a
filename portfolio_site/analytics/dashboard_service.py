"""Dashboard aggregation and page-view tracking service."""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from portfolio_site.db import (
    AnalyticsDashboardSource,
    AnalyticsEventCreateRequest,
    AnalyticsRepositoryPort,
    PortfolioItemSummaryRecord,
)

from .date_window import AnalyticsWindow, analytics_resolve_window
from .errors import AnalyticsServiceError, AnalyticsValidationError
from .interfaces import (
    AnalyticsPort,
    CategoryPerformanceEntry,
    DailyViewsEntry,
    DashboardOverview,
    DashboardSnapshot,
    EngagementMetrics,
    RecentActivityEntry,
    TimeRangeStats,
    TopContentEntry,
    TrafficSourceEntry,
)
from .traffic_sources import analytics_rank_traffic_sources

logger = logging.getLogger(__name__)

ANALYTICS_PAGE_VIEW_EVENT = "page_view"
_ANALYTICS_UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class AnalyticsDashboardConfig:
    """Static limits applied to every dashboard computation.

    Attributes:
        default_period_days: Window length when no bound or period is given.
        top_content_limit: Max ranked top-content entries.
        traffic_source_limit: Max traffic-source entries.
        recent_activity_days: Lookback for recent activity, relative to now.
        recent_activity_limit: Max recent activity entries.
        max_list_limit: Upper bound for caller-provided list limits.
    """

    default_period_days: int = 30
    top_content_limit: int = 5
    traffic_source_limit: int = 10
    recent_activity_days: int = 7
    recent_activity_limit: int = 10
    max_list_limit: int = 100


def _analytics_utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalyticsDashboardService(AnalyticsPort):
    """Compute dashboard snapshots and record page views."""

    def __init__(
        self,
        repository: AnalyticsRepositoryPort,
        config: AnalyticsDashboardConfig | None = None,
        now_provider: Callable[[], datetime] = _analytics_utc_now,
    ):
        """Initialize dashboard service dependencies.

        Args:
            repository: DB-layer analytics repository.
            config: Optional aggregation limits; defaults apply when omitted.
            now_provider: Clock returning offset-aware current time.

        Raises:
            ValueError: Raised when repository is invalid.
        """

        if repository is None:
            raise ValueError("repository must not be None")
        self._repository = repository
        self._config = config or AnalyticsDashboardConfig()
        self._now_provider = now_provider

    def analytics_compute_dashboard(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        period: str | None = None,
    ) -> DashboardSnapshot:
        """Compute one dashboard snapshot for the requested window.

        Window input is validated before the repository is touched. The
        repository is read once; a failure yields no snapshot at all.

        Args:
            start_date: Optional explicit start bound (ISO-8601).
            end_date: Optional explicit end bound (ISO-8601).
            period: Optional symbolic period (`7d`, `30d`, `90d`, `1y`).

        Returns:
            DashboardSnapshot: Aggregated snapshot.

        Raises:
            AnalyticsValidationError: Raised when the window input is invalid.
            AnalyticsServiceError: Raised when the data store fails.
        """

        now_utc = self._now_provider()
        window = analytics_resolve_window(
            now_utc=now_utc,
            start_date=start_date,
            end_date=end_date,
            period=period,
            default_period_days=self._config.default_period_days,
        )

        load_started = time.perf_counter()
        try:
            source = self._repository.db_analytics_dashboard_source_load(
                window_start_utc=window.start_utc,
                window_end_utc=window.end_utc,
                recent_since_utc=now_utc - timedelta(days=self._config.recent_activity_days),
                top_content_limit=self._config.top_content_limit,
                recent_activity_limit=self._config.recent_activity_limit,
            )
        except RuntimeError as error:
            logger.error(
                "analytics dashboard load failed window=%s..%s: %s",
                window.start_utc.isoformat(),
                window.end_utc.isoformat(),
                error,
            )
            raise AnalyticsServiceError("analytics data store unavailable") from error

        snapshot = self._analytics_build_snapshot(window=window, source=source)
        logger.info(
            "analytics dashboard computed window=%s..%s events=%d load_ms=%.1f",
            window.start_utc.isoformat(),
            window.end_utc.isoformat(),
            snapshot.time_range_stats.total_events,
            (time.perf_counter() - load_started) * 1000,
        )
        return snapshot

    def analytics_track_page_view(
        self,
        page_url: str,
        referrer: str | None = None,
        user_agent: str | None = None,
        session_id: str | None = None,
        ip_address: str | None = None,
        user_id: str | None = None,
        portfolio_item_id: UUID | None = None,
    ) -> UUID:
        """Record one page view event.

        Args:
            page_url: Viewed page URL.
            referrer: Optional referrer string.
            user_agent: Optional client user agent.
            session_id: Optional visitor session identifier.
            ip_address: Optional visitor IP address.
            user_id: Optional authenticated user identifier.
            portfolio_item_id: Optional viewed portfolio item.

        Returns:
            UUID: Identifier of the stored event.

        Raises:
            AnalyticsValidationError: Raised when page_url is blank.
            AnalyticsServiceError: Raised when the data store fails.
        """

        normalized_page_url = (page_url or "").strip()
        if not normalized_page_url:
            raise AnalyticsValidationError("page_url must not be blank", field_name="page_url", value=page_url)

        try:
            return self._repository.db_analytics_event_insert(
                AnalyticsEventCreateRequest(
                    event_type=ANALYTICS_PAGE_VIEW_EVENT,
                    page_url=normalized_page_url,
                    referrer=referrer,
                    user_agent=user_agent,
                    session_id=session_id,
                    ip_address=ip_address,
                    user_id=user_id,
                    portfolio_item_id=portfolio_item_id,
                    event_data={"page_url": normalized_page_url},
                )
            )
        except RuntimeError as error:
            logger.error("page view tracking failed page_url=%s: %s", normalized_page_url, error)
            raise AnalyticsServiceError("analytics data store unavailable") from error

    def analytics_list_popular_items(self, limit: int) -> list[TopContentEntry]:
        """List the most viewed published items.

        Args:
            limit: Max entries, between 1 and the configured list maximum.

        Returns:
            list[TopContentEntry]: Items by view count desc, newest first on ties.

        Raises:
            AnalyticsValidationError: Raised when limit is out of range.
            AnalyticsServiceError: Raised when the data store fails.
        """

        self._analytics_validate_list_limit(limit)
        try:
            popular_items = self._repository.db_portfolio_popular_list(limit=limit)
        except RuntimeError as error:
            raise AnalyticsServiceError("analytics data store unavailable") from error
        return self._analytics_rank_items(popular_items)

    def analytics_list_featured_items(self, limit: int) -> list[TopContentEntry]:
        """List published featured items, newest first.

        Args:
            limit: Max entries, between 1 and the configured list maximum.

        Returns:
            list[TopContentEntry]: Featured items in repository order.

        Raises:
            AnalyticsValidationError: Raised when limit is out of range.
            AnalyticsServiceError: Raised when the data store fails.
        """

        self._analytics_validate_list_limit(limit)
        try:
            featured_items = self._repository.db_portfolio_featured_list(limit=limit)
        except RuntimeError as error:
            raise AnalyticsServiceError("analytics data store unavailable") from error
        return [self._analytics_map_item(item) for item in featured_items]

    def analytics_compute_engagement(self) -> EngagementMetrics:
        """Compute visitor engagement counters.

        Returns:
            EngagementMetrics: Engagement counters.

        Raises:
            AnalyticsServiceError: Raised when the data store fails.
        """

        try:
            total_sessions = self._repository.db_analytics_session_count()
        except RuntimeError as error:
            raise AnalyticsServiceError("analytics data store unavailable") from error
        return EngagementMetrics(total_sessions=max(0, total_sessions))

    def _analytics_build_snapshot(self, window: AnalyticsWindow, source: AnalyticsDashboardSource) -> DashboardSnapshot:
        """Aggregate loaded source rows into one snapshot.

        Args:
            window: Resolved window.
            source: Rows loaded for the window.

        Returns:
            DashboardSnapshot: Aggregated snapshot.
        """

        window_events = [
            event for event in source.events if window.start_utc <= event.timestamp_utc <= window.end_utc
        ]
        page_view_events = [event for event in window_events if event.event_type == ANALYTICS_PAGE_VIEW_EVENT]
        visitor_keys = {event.session_id or event.ip_address for event in window_events}
        visitor_keys.discard(None)
        visitor_keys.discard("")

        overview = DashboardOverview(
            total_views=max(0, source.counters.total_views),
            unique_visitors=len(visitor_keys),
            page_views=len(page_view_events),
            total_portfolio_items=max(0, source.counters.total_items),
            published_items=max(0, source.counters.published_items),
            featured_items=max(0, source.counters.featured_items),
            total_categories=len(source.categories),
        )

        # sorted() is stable, so equal totals keep the configured sort order.
        category_performance = sorted(
            (
                CategoryPerformanceEntry(
                    category_id=category.category_id,
                    name=category.name,
                    slug=category.slug,
                    item_count=max(0, category.item_count),
                    total_views=max(0, category.total_views),
                )
                for category in source.categories
            ),
            key=lambda entry: -entry.total_views,
        )

        return DashboardSnapshot(
            overview=overview,
            top_content=self._analytics_rank_items(source.top_items)[: self._config.top_content_limit],
            traffic_sources=[
                TrafficSourceEntry(source=source_name, count=count)
                for source_name, count in analytics_rank_traffic_sources(
                    (event.referrer for event in window_events),
                    limit=self._config.traffic_source_limit,
                )
            ],
            category_performance=category_performance,
            recent_activity=[
                RecentActivityEntry(
                    portfolio_item_id=item.portfolio_item_id,
                    title=item.title,
                    action="published",
                    timestamp_utc=item.created_at_utc,
                    category=item.category_name or _ANALYTICS_UNCATEGORIZED,
                )
                for item in sorted(source.recent_items, key=lambda item: item.created_at_utc, reverse=True)
            ][: self._config.recent_activity_limit],
            time_range_stats=TimeRangeStats(
                start_utc=window.start_utc,
                end_utc=window.end_utc,
                total_events=len(window_events),
                daily_views=analytics_group_daily_views(window, (event.timestamp_utc for event in page_view_events)),
            ),
        )

    @staticmethod
    def _analytics_rank_items(items: list[PortfolioItemSummaryRecord]) -> list[TopContentEntry]:
        ranked_items = sorted(items, key=lambda item: (-item.view_count, -item.created_at_utc.timestamp()))
        return [AnalyticsDashboardService._analytics_map_item(item) for item in ranked_items]

    @staticmethod
    def _analytics_map_item(item: PortfolioItemSummaryRecord) -> TopContentEntry:
        return TopContentEntry(
            portfolio_item_id=item.portfolio_item_id,
            title=item.title,
            view_count=max(0, item.view_count),
            category=item.category_name or _ANALYTICS_UNCATEGORIZED,
            thumbnail_path=item.thumbnail_path,
            created_at_utc=item.created_at_utc,
        )

    def _analytics_validate_list_limit(self, limit: int) -> None:
        if limit < 1 or limit > self._config.max_list_limit:
            raise AnalyticsValidationError(
                f"limit must be between 1 and {self._config.max_list_limit}",
                field_name="limit",
                value=limit,
            )


def analytics_group_daily_views(window: AnalyticsWindow, timestamps: Iterable[datetime]) -> list[DailyViewsEntry]:
    """Count timestamps per UTC calendar day across the whole window.

    Args:
        window: Resolved window defining the day range.
        timestamps: Offset-aware event timestamps.

    Returns:
        list[DailyViewsEntry]: One entry per day, zero-filled, in date order.
    """

    day_counts = Counter(timestamp.astimezone(timezone.utc).date() for timestamp in timestamps)
    return [DailyViewsEntry(day=day, value=day_counts.get(day, 0)) for day in window.analytics_calendar_days()]


__all__ = [
    "ANALYTICS_PAGE_VIEW_EVENT",
    "AnalyticsDashboardConfig",
    "AnalyticsDashboardService",
    "analytics_group_daily_views",
]
