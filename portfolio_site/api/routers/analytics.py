"""Analytics API router composition for dashboard reads and page-view tracking."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from portfolio_site.analytics import (
    AnalyticsDashboardService,
    AnalyticsServiceError,
    AnalyticsValidationError,
    DashboardSnapshot,
    TopContentEntry,
)
from portfolio_site.config import AppSettings

from .responses import api_error_response

API_FEATURED_DEFAULT_LIMIT = 6


class PageViewTrackRequest(BaseModel):
    """Request body for one tracked page view."""

    page_url: str = Field(min_length=1, max_length=2048)
    referrer: str | None = Field(default=None, max_length=2048)
    session_id: str | None = Field(default=None, max_length=255)
    user_id: str | None = Field(default=None, max_length=255)
    portfolio_item_id: UUID | None = None


def api_create_analytics_router(
    settings: AppSettings,
    analytics_service: AnalyticsDashboardService,
) -> APIRouter:
    """Create analytics router exposing dashboard, tracking and ranking endpoints.

    Args:
        settings: Runtime settings used for list limits.
        analytics_service: Analytics-layer dashboard service.

    Returns:
        APIRouter: Router exposing `/analytics` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if analytics_service is None:
        raise ValueError("analytics_service must not be None")

    router = APIRouter(prefix="/analytics", tags=["analytics"])

    @router.get("")
    def api_analytics_dashboard(
        period: str | None = Query(default=None),
        start_date: str | None = Query(default=None),
        end_date: str | None = Query(default=None),
    ) -> JSONResponse:
        """Return the dashboard snapshot for the requested window.

        Args:
            period: Optional symbolic period (`7d`, `30d`, `90d`, `1y`).
            start_date: Optional explicit ISO-8601 start bound.
            end_date: Optional explicit ISO-8601 end bound.

        Returns:
            JSONResponse: Snapshot payload, or an error envelope.
        """

        try:
            snapshot = analytics_service.analytics_compute_dashboard(
                start_date=start_date,
                end_date=end_date,
                period=period,
            )
        except AnalyticsValidationError as error:
            return api_error_response(
                code="INVALID_ANALYTICS_WINDOW",
                message=str(error),
                status_code=status.HTTP_400_BAD_REQUEST,
                field_name=error.field_name,
            )
        except AnalyticsServiceError as error:
            return api_error_response(
                code="ANALYTICS_UNAVAILABLE",
                message=str(error),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        payload = {"status": "ok", "data": api_serialize_dashboard_snapshot(snapshot)}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/events")
    def api_analytics_track_page_view(body: PageViewTrackRequest, request: Request) -> JSONResponse:
        """Record one page view, taking user agent and client address from the request.

        Args:
            body: Page view payload.
            request: Incoming request.

        Returns:
            JSONResponse: Created event id, or an error envelope.
        """

        try:
            event_id = analytics_service.analytics_track_page_view(
                page_url=body.page_url,
                referrer=body.referrer or request.headers.get("referer"),
                user_agent=request.headers.get("user-agent"),
                session_id=body.session_id,
                ip_address=None if request.client is None else request.client.host,
                user_id=body.user_id,
                portfolio_item_id=body.portfolio_item_id,
            )
        except AnalyticsValidationError as error:
            return api_error_response(
                code="INVALID_PAGE_VIEW",
                message=str(error),
                status_code=status.HTTP_400_BAD_REQUEST,
                field_name=error.field_name,
            )
        except AnalyticsServiceError as error:
            return api_error_response(
                code="ANALYTICS_UNAVAILABLE",
                message=str(error),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        payload = {"status": "created", "analytics_event_id": str(event_id)}
        return JSONResponse(content=payload, status_code=status.HTTP_201_CREATED)

    @router.get("/popular")
    def api_analytics_popular_items(limit: int = Query(default=settings.api_default_limit, ge=1)) -> JSONResponse:
        """Return the most viewed published items.

        Args:
            limit: Max rows requested; capped at the configured maximum.

        Returns:
            JSONResponse: Ranked item list envelope.
        """

        applied_limit = min(limit, settings.api_max_limit)
        try:
            popular_items = analytics_service.analytics_list_popular_items(limit=applied_limit)
        except AnalyticsServiceError as error:
            return api_error_response(
                code="ANALYTICS_UNAVAILABLE",
                message=str(error),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        payload = {
            "items": [api_serialize_top_content_entry(item) for item in popular_items],
            "page": {"limit": limit, "applied_limit": applied_limit, "returned": len(popular_items)},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/featured")
    def api_analytics_featured_items(limit: int = Query(default=API_FEATURED_DEFAULT_LIMIT, ge=1)) -> JSONResponse:
        """Return published featured items, newest first.

        Args:
            limit: Max rows requested; capped at the configured maximum.

        Returns:
            JSONResponse: Featured item list envelope.
        """

        applied_limit = min(limit, settings.api_max_limit)
        try:
            featured_items = analytics_service.analytics_list_featured_items(limit=applied_limit)
        except AnalyticsServiceError as error:
            return api_error_response(
                code="ANALYTICS_UNAVAILABLE",
                message=str(error),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        payload = {
            "items": [api_serialize_top_content_entry(item) for item in featured_items],
            "page": {"limit": limit, "applied_limit": applied_limit, "returned": len(featured_items)},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/engagement")
    def api_analytics_engagement() -> JSONResponse:
        """Return visitor engagement counters."""

        try:
            metrics = analytics_service.analytics_compute_engagement()
        except AnalyticsServiceError as error:
            return api_error_response(
                code="ANALYTICS_UNAVAILABLE",
                message=str(error),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return JSONResponse(content={"total_sessions": metrics.total_sessions}, status_code=status.HTTP_200_OK)

    return router


def api_serialize_top_content_entry(entry: TopContentEntry) -> dict[str, object]:
    """Serialize one ranked item to JSON payload."""

    return {
        "id": str(entry.portfolio_item_id),
        "title": entry.title,
        "view_count": entry.view_count,
        "category": entry.category,
        "thumbnail": entry.thumbnail_path,
        "created_at_utc": entry.created_at_utc.isoformat(),
    }


def api_serialize_dashboard_snapshot(snapshot: DashboardSnapshot) -> dict[str, object]:
    """Serialize one dashboard snapshot to JSON payload.

    Args:
        snapshot: Aggregated dashboard snapshot.

    Returns:
        dict[str, object]: JSON-serializable snapshot payload.
    """

    overview = snapshot.overview
    time_range_stats = snapshot.time_range_stats
    return {
        "overview": {
            "total_views": overview.total_views,
            "unique_visitors": overview.unique_visitors,
            "page_views": overview.page_views,
            "total_portfolio_items": overview.total_portfolio_items,
            "published_items": overview.published_items,
            "featured_items": overview.featured_items,
            "total_categories": overview.total_categories,
        },
        "top_content": [api_serialize_top_content_entry(entry) for entry in snapshot.top_content],
        "traffic_sources": [{"source": entry.source, "count": entry.count} for entry in snapshot.traffic_sources],
        "category_performance": [
            {
                "id": str(entry.category_id),
                "name": entry.name,
                "slug": entry.slug,
                "item_count": entry.item_count,
                "total_views": entry.total_views,
            }
            for entry in snapshot.category_performance
        ],
        "recent_activity": [
            {
                "id": str(entry.portfolio_item_id),
                "title": entry.title,
                "action": entry.action,
                "timestamp": entry.timestamp_utc.isoformat(),
                "category": entry.category,
            }
            for entry in snapshot.recent_activity
        ],
        "time_range_stats": {
            "start_date": time_range_stats.start_utc.isoformat(),
            "end_date": time_range_stats.end_utc.isoformat(),
            "total_events": time_range_stats.total_events,
            "daily_views": [
                {"date": entry.day.isoformat(), "value": entry.value} for entry in time_range_stats.daily_views
            ],
        },
    }


__all__ = [
    "API_FEATURED_DEFAULT_LIMIT",
    "PageViewTrackRequest",
    "api_create_analytics_router",
    "api_serialize_dashboard_snapshot",
    "api_serialize_top_content_entry",
]
