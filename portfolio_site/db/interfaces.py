"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from portfolio_site.domain import HealthStatus


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


@dataclass(frozen=True)
class AnalyticsEventRecord:
    """Analytics event fields consumed by dashboard aggregation.

    Attributes:
        event_type: Event type marker such as `page_view`.
        timestamp_utc: Event timestamp in UTC.
        session_id: Optional visitor session identifier.
        ip_address: Optional visitor IP address.
        referrer: Optional raw referrer string.
        portfolio_item_id: Optional associated content identifier.
    """

    event_type: str
    timestamp_utc: datetime
    session_id: str | None
    ip_address: str | None
    referrer: str | None
    portfolio_item_id: UUID | None = None


@dataclass(frozen=True)
class PortfolioItemCountersRecord:
    """Portfolio item counters computed over the whole item table.

    Attributes:
        total_items: Number of items in any status.
        published_items: Number of published items.
        featured_items: Number of published and featured items.
        total_views: Sum of view counts of published items.
    """

    total_items: int
    published_items: int
    featured_items: int
    total_views: int


@dataclass(frozen=True)
class PortfolioItemSummaryRecord:
    """Published portfolio item projection with resolved category name.

    Attributes:
        portfolio_item_id: Item identifier.
        title: Item title.
        view_count: Lifetime view counter.
        category_name: Optional category display name.
        thumbnail_path: Optional thumbnail path.
        created_at_utc: Creation timestamp in UTC.
    """

    portfolio_item_id: UUID
    title: str
    view_count: int
    category_name: str | None
    thumbnail_path: str | None
    created_at_utc: datetime


@dataclass(frozen=True)
class CategoryPerformanceRecord:
    """Active category row with published-item rollups.

    Attributes:
        category_id: Category identifier.
        name: Display name.
        slug: URL slug.
        sort_order: Configured display order.
        item_count: Number of published items in the category.
        total_views: Sum of view counts of published items in the category.
    """

    category_id: UUID
    name: str
    slug: str
    sort_order: int
    item_count: int
    total_views: int


@dataclass(frozen=True)
class AnalyticsDashboardSource:
    """All rows required for one dashboard aggregation, read together.

    Attributes:
        events: Events inside the inclusive time window, newest first.
        counters: Portfolio item counters.
        top_items: Published items ordered by views then recency.
        categories: Active categories ordered by sort order.
        recent_items: Recently created published items, newest first.
    """

    events: list[AnalyticsEventRecord]
    counters: PortfolioItemCountersRecord
    top_items: list[PortfolioItemSummaryRecord]
    categories: list[CategoryPerformanceRecord]
    recent_items: list[PortfolioItemSummaryRecord]


@dataclass(frozen=True)
class AnalyticsEventCreateRequest:
    """Insert payload for one analytics event.

    Attributes:
        event_type: Event type marker.
        page_url: Optional tracked page URL.
        referrer: Optional referrer string.
        user_agent: Optional client user agent.
        session_id: Optional visitor session identifier.
        ip_address: Optional visitor IP address.
        user_id: Optional authenticated user identifier.
        portfolio_item_id: Optional associated content identifier.
        event_data: Optional structured event payload stored as JSON.
    """

    event_type: str
    page_url: str | None = None
    referrer: str | None = None
    user_agent: str | None = None
    session_id: str | None = None
    ip_address: str | None = None
    user_id: str | None = None
    portfolio_item_id: UUID | None = None
    event_data: dict[str, Any] | None = None


class AnalyticsRepositoryPort(Protocol):
    """Port definition for analytics reads and event tracking writes."""

    def db_analytics_dashboard_source_load(
        self,
        window_start_utc: datetime,
        window_end_utc: datetime,
        recent_since_utc: datetime,
        top_content_limit: int,
        recent_activity_limit: int,
    ) -> AnalyticsDashboardSource:
        """Load all dashboard source rows on one connection.

        Args:
            window_start_utc: Inclusive lower event timestamp bound.
            window_end_utc: Inclusive upper event timestamp bound.
            recent_since_utc: Inclusive lower creation bound for recent items.
            top_content_limit: Max number of top items.
            recent_activity_limit: Max number of recent items.

        Returns:
            AnalyticsDashboardSource: Source rows for aggregation.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_analytics_event_insert(self, request: AnalyticsEventCreateRequest) -> UUID:
        """Persist one analytics event, bumping the linked published item's view count.

        Args:
            request: Event insert payload.

        Returns:
            UUID: Identifier of the inserted event.

        Raises:
            RuntimeError: Raised when database write fails.
        """

    def db_portfolio_popular_list(self, limit: int) -> list[PortfolioItemSummaryRecord]:
        """List published items by view count.

        Args:
            limit: Max rows to return.

        Returns:
            list[PortfolioItemSummaryRecord]: Ordered published items.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_portfolio_featured_list(self, limit: int) -> list[PortfolioItemSummaryRecord]:
        """List published featured items, newest first.

        Args:
            limit: Max rows to return.

        Returns:
            list[PortfolioItemSummaryRecord]: Featured items by creation time desc.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_analytics_session_count(self) -> int:
        """Count distinct non-null sessions across all events.

        Returns:
            int: Distinct session count.

        Raises:
            RuntimeError: Raised when database read fails.
        """
