"""Database service for analytics dashboard reads and event tracking writes."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from portfolio_site.db.interfaces import (
    AnalyticsDashboardSource,
    AnalyticsEventCreateRequest,
    AnalyticsEventRecord,
    AnalyticsRepositoryPort,
    CategoryPerformanceRecord,
    PortfolioItemCountersRecord,
    PortfolioItemSummaryRecord,
)
from portfolio_site.domain import PortfolioItemStatus


class SQLAlchemyAnalyticsRepository(AnalyticsRepositoryPort):
    """SQLAlchemy implementation for analytics DB operations."""

    _ITEM_SUMMARY_SELECT = (
        "SELECT "
        "p.portfolio_item_id, p.title, p.view_count, p.thumbnail_path, p.created_at_utc, "
        "c.name AS category_name "
        "FROM portfolio_item p "
        "LEFT JOIN category c ON c.category_id = p.category_id "
    )

    _EVENT_WINDOW_QUERY = (
        "SELECT event_type, timestamp_utc, session_id, ip_address, referrer, portfolio_item_id "
        "FROM analytics_event "
        "WHERE timestamp_utc >= :window_start_utc AND timestamp_utc <= :window_end_utc "
        "ORDER BY timestamp_utc desc, analytics_event_id asc"
    )

    _COUNTERS_QUERY = (
        "SELECT "
        "count(*) AS total_items, "
        "count(*) FILTER (WHERE status = :published_status) AS published_items, "
        "count(*) FILTER (WHERE status = :published_status AND featured) AS featured_items, "
        "COALESCE(sum(view_count) FILTER (WHERE status = :published_status), 0) AS total_views "
        "FROM portfolio_item"
    )

    _TOP_ITEMS_QUERY = (
        _ITEM_SUMMARY_SELECT
        + "WHERE p.status = :published_status "
        + "ORDER BY p.view_count desc, p.created_at_utc desc, p.portfolio_item_id asc LIMIT :limit"
    )

    _RECENT_ITEMS_QUERY = (
        _ITEM_SUMMARY_SELECT
        + "WHERE p.status = :published_status AND p.created_at_utc >= :recent_since_utc "
        + "ORDER BY p.created_at_utc desc, p.portfolio_item_id asc LIMIT :limit"
    )

    _FEATURED_ITEMS_QUERY = (
        _ITEM_SUMMARY_SELECT
        + "WHERE p.status = :published_status AND p.featured "
        + "ORDER BY p.created_at_utc desc, p.portfolio_item_id asc LIMIT :limit"
    )

    _VIEW_COUNT_INCREMENT = (
        "UPDATE portfolio_item SET view_count = view_count + 1 "
        "WHERE portfolio_item_id = :portfolio_item_id AND status = :published_status"
    )

    _CATEGORY_QUERY = (
        "SELECT "
        "c.category_id, c.name, c.slug, c.sort_order, "
        "count(p.portfolio_item_id) AS item_count, "
        "COALESCE(sum(p.view_count), 0) AS total_views "
        "FROM category c "
        "LEFT JOIN portfolio_item p ON p.category_id = c.category_id AND p.status = :published_status "
        "WHERE c.is_active "
        "GROUP BY c.category_id, c.name, c.slug, c.sort_order "
        "ORDER BY c.sort_order asc, c.name asc"
    )

    def __init__(self, engine: Engine):
        """Initialize analytics database service.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

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
            ValueError: Raised when bounds or limits are invalid.
            RuntimeError: Raised when database read fails.
        """

        if window_start_utc > window_end_utc:
            raise ValueError("window_start_utc must not be after window_end_utc")
        self._db_analytics_validate_limit(top_content_limit, "top_content_limit")
        self._db_analytics_validate_limit(recent_activity_limit, "recent_activity_limit")

        published_status = PortfolioItemStatus.PUBLISHED.value
        try:
            with self._engine.connect() as connection:
                event_rows = connection.execute(
                    text(self._EVENT_WINDOW_QUERY),
                    {"window_start_utc": window_start_utc, "window_end_utc": window_end_utc},
                ).mappings().all()
                counter_rows = connection.execute(
                    text(self._COUNTERS_QUERY),
                    {"published_status": published_status},
                ).mappings().all()
                top_rows = connection.execute(
                    text(self._TOP_ITEMS_QUERY),
                    {"published_status": published_status, "limit": top_content_limit},
                ).mappings().all()
                category_rows = connection.execute(
                    text(self._CATEGORY_QUERY),
                    {"published_status": published_status},
                ).mappings().all()
                recent_rows = connection.execute(
                    text(self._RECENT_ITEMS_QUERY),
                    {
                        "published_status": published_status,
                        "recent_since_utc": recent_since_utc,
                        "limit": recent_activity_limit,
                    },
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("analytics dashboard read failed") from error

        counters = counter_rows[0] if counter_rows else {}
        return AnalyticsDashboardSource(
            events=[
                AnalyticsEventRecord(
                    event_type=row["event_type"],
                    timestamp_utc=row["timestamp_utc"],
                    session_id=row["session_id"],
                    ip_address=row["ip_address"],
                    referrer=row["referrer"],
                    portfolio_item_id=row["portfolio_item_id"],
                )
                for row in event_rows
            ],
            counters=PortfolioItemCountersRecord(
                total_items=int(counters.get("total_items") or 0),
                published_items=int(counters.get("published_items") or 0),
                featured_items=int(counters.get("featured_items") or 0),
                total_views=int(counters.get("total_views") or 0),
            ),
            top_items=[self._db_analytics_map_item_summary(row) for row in top_rows],
            categories=[
                CategoryPerformanceRecord(
                    category_id=row["category_id"],
                    name=row["name"],
                    slug=row["slug"],
                    sort_order=int(row["sort_order"]),
                    item_count=int(row["item_count"] or 0),
                    total_views=int(row["total_views"] or 0),
                )
                for row in category_rows
            ],
            recent_items=[self._db_analytics_map_item_summary(row) for row in recent_rows],
        )

    def db_analytics_event_insert(self, request: AnalyticsEventCreateRequest) -> UUID:
        """Persist one analytics event.

        An event tied to a portfolio item also bumps that item's view count
        when it is published, in the same transaction.

        Args:
            request: Event insert payload.

        Returns:
            UUID: Identifier of the inserted event.

        Raises:
            ValueError: Raised when event type is blank.
            RuntimeError: Raised when database write fails.
        """

        normalized_event_type = request.event_type.strip()
        if not normalized_event_type:
            raise ValueError("event_type must not be blank")

        try:
            with self._engine.begin() as connection:
                inserted_id = connection.execute(
                    text(
                        "INSERT INTO analytics_event ("
                        "event_type, event_data, page_url, referrer, user_agent, session_id, ip_address, "
                        "user_id, portfolio_item_id"
                        ") VALUES ("
                        ":event_type, CAST(:event_data AS jsonb), :page_url, :referrer, :user_agent, :session_id, "
                        ":ip_address, :user_id, :portfolio_item_id"
                        ") RETURNING analytics_event_id"
                    ),
                    {
                        "event_type": normalized_event_type,
                        "event_data": None if request.event_data is None else json.dumps(request.event_data),
                        "page_url": request.page_url,
                        "referrer": request.referrer,
                        "user_agent": request.user_agent,
                        "session_id": request.session_id,
                        "ip_address": request.ip_address,
                        "user_id": request.user_id,
                        "portfolio_item_id": request.portfolio_item_id,
                    },
                ).scalar_one()
                if request.portfolio_item_id is not None:
                    connection.execute(
                        text(self._VIEW_COUNT_INCREMENT),
                        {
                            "portfolio_item_id": request.portfolio_item_id,
                            "published_status": PortfolioItemStatus.PUBLISHED.value,
                        },
                    )
        except SQLAlchemyError as error:
            raise RuntimeError("analytics event insert failed") from error

        return inserted_id

    def db_portfolio_popular_list(self, limit: int) -> list[PortfolioItemSummaryRecord]:
        """List published items by view count, newest first on ties.

        Args:
            limit: Max rows to return.

        Returns:
            list[PortfolioItemSummaryRecord]: Ordered published items.

        Raises:
            ValueError: Raised when limit is invalid.
            RuntimeError: Raised when database read fails.
        """

        self._db_analytics_validate_limit(limit, "limit")
        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(self._TOP_ITEMS_QUERY),
                    {"published_status": PortfolioItemStatus.PUBLISHED.value, "limit": limit},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("popular portfolio item read failed") from error

        return [self._db_analytics_map_item_summary(row) for row in rows]

    def db_portfolio_featured_list(self, limit: int) -> list[PortfolioItemSummaryRecord]:
        """List published featured items, newest first.

        Args:
            limit: Max rows to return.

        Returns:
            list[PortfolioItemSummaryRecord]: Featured items by creation time desc.

        Raises:
            ValueError: Raised when limit is invalid.
            RuntimeError: Raised when database read fails.
        """

        self._db_analytics_validate_limit(limit, "limit")
        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(self._FEATURED_ITEMS_QUERY),
                    {"published_status": PortfolioItemStatus.PUBLISHED.value, "limit": limit},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("featured portfolio item read failed") from error

        return [self._db_analytics_map_item_summary(row) for row in rows]

    def db_analytics_session_count(self) -> int:
        """Count distinct non-null sessions across all events.

        Returns:
            int: Distinct session count.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                session_count = connection.execute(
                    text(
                        "SELECT count(DISTINCT session_id) FROM analytics_event "
                        "WHERE session_id IS NOT NULL AND session_id <> ''"
                    )
                ).scalar_one()
        except SQLAlchemyError as error:
            raise RuntimeError("analytics session count read failed") from error

        return int(session_count or 0)

    @staticmethod
    def _db_analytics_map_item_summary(row: Any) -> PortfolioItemSummaryRecord:
        """Map one item summary row mapping to a typed record.

        Args:
            row: SQLAlchemy row mapping.

        Returns:
            PortfolioItemSummaryRecord: Typed item summary.
        """

        return PortfolioItemSummaryRecord(
            portfolio_item_id=row["portfolio_item_id"],
            title=row["title"],
            view_count=int(row["view_count"] or 0),
            category_name=row["category_name"],
            thumbnail_path=row["thumbnail_path"],
            created_at_utc=row["created_at_utc"],
        )

    @staticmethod
    def _db_analytics_validate_limit(value: int, field_name: str) -> None:
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ValueError(f"{field_name} must be a positive integer")

