"""Analytics layer package for dashboard aggregation and event tracking."""

from .dashboard_service import (
    ANALYTICS_PAGE_VIEW_EVENT,
    AnalyticsDashboardConfig,
    AnalyticsDashboardService,
    analytics_group_daily_views,
)
from .date_window import ANALYTICS_PERIOD_DAYS, AnalyticsWindow, analytics_parse_datetime, analytics_resolve_window
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
from .traffic_sources import ANALYTICS_DIRECT_SOURCE, analytics_normalize_referrer, analytics_rank_traffic_sources

__all__ = [
    "ANALYTICS_DIRECT_SOURCE",
    "ANALYTICS_PAGE_VIEW_EVENT",
    "ANALYTICS_PERIOD_DAYS",
    "AnalyticsDashboardConfig",
    "AnalyticsDashboardService",
    "AnalyticsPort",
    "AnalyticsServiceError",
    "AnalyticsValidationError",
    "AnalyticsWindow",
    "CategoryPerformanceEntry",
    "DailyViewsEntry",
    "DashboardOverview",
    "DashboardSnapshot",
    "EngagementMetrics",
    "RecentActivityEntry",
    "TimeRangeStats",
    "TopContentEntry",
    "TrafficSourceEntry",
    "analytics_group_daily_views",
    "analytics_normalize_referrer",
    "analytics_parse_datetime",
    "analytics_rank_traffic_sources",
    "analytics_resolve_window",
]
