"""Typed contracts for analytics-layer aggregations."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class DashboardOverview:
    """Headline dashboard counters.

    Attributes:
        total_views: Sum of published item view counts.
        unique_visitors: Distinct sessions (or IPs) seen in the window.
        page_views: `page_view` events in the window.
        total_portfolio_items: Items in any status.
        published_items: Published items.
        featured_items: Published and featured items.
        total_categories: Active categories.
    """

    total_views: int
    unique_visitors: int
    page_views: int
    total_portfolio_items: int
    published_items: int
    featured_items: int
    total_categories: int


@dataclass(frozen=True)
class TopContentEntry:
    """One ranked item of the top-content list."""

    portfolio_item_id: UUID
    title: str
    view_count: int
    category: str
    thumbnail_path: str | None
    created_at_utc: datetime


@dataclass(frozen=True)
class TrafficSourceEntry:
    """Event count for one traffic source."""

    source: str
    count: int


@dataclass(frozen=True)
class CategoryPerformanceEntry:
    """Published-item rollup for one active category."""

    category_id: UUID
    name: str
    slug: str
    item_count: int
    total_views: int


@dataclass(frozen=True)
class RecentActivityEntry:
    """One entry of the recent activity feed."""

    portfolio_item_id: UUID
    title: str
    action: str
    timestamp_utc: datetime
    category: str


@dataclass(frozen=True)
class DailyViewsEntry:
    """Page-view count for one UTC calendar day."""

    day: date
    value: int


@dataclass(frozen=True)
class TimeRangeStats:
    """Window bounds with event totals and the zero-filled daily series."""

    start_utc: datetime
    end_utc: datetime
    total_events: int
    daily_views: list[DailyViewsEntry]


@dataclass(frozen=True)
class DashboardSnapshot:
    """Complete dashboard snapshot, recomputed per request.

    Attributes:
        overview: Headline counters.
        top_content: Items ranked by view count, newest first on ties.
        traffic_sources: Busiest traffic sources.
        category_performance: Category rollups ranked by views.
        recent_activity: Recently published items.
        time_range_stats: Window totals and daily series.
    """

    overview: DashboardOverview
    top_content: list[TopContentEntry]
    traffic_sources: list[TrafficSourceEntry]
    category_performance: list[CategoryPerformanceEntry]
    recent_activity: list[RecentActivityEntry]
    time_range_stats: TimeRangeStats


@dataclass(frozen=True)
class EngagementMetrics:
    """Visitor engagement counters.

    Attributes:
        total_sessions: Distinct non-empty sessions across all events.
    """

    total_sessions: int


class AnalyticsPort(Protocol):
    """Port definition for dashboard computation consumed by the API layer."""

    def analytics_compute_dashboard(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        period: str | None = None,
    ) -> DashboardSnapshot:
        """Compute one dashboard snapshot for the requested window.

        Args:
            start_date: Optional explicit start bound.
            end_date: Optional explicit end bound.
            period: Optional symbolic period.

        Returns:
            DashboardSnapshot: Aggregated snapshot.

        Raises:
            AnalyticsValidationError: Raised when the window input is invalid.
            AnalyticsServiceError: Raised when the data store fails.
        """
