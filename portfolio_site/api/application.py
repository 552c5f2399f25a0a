"""FastAPI application factory for the portfolio back-office service."""

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request, Response

from portfolio_site.analytics import AnalyticsDashboardService
from portfolio_site.config import AppSettings
from portfolio_site.db import DatabaseHealthPort
from portfolio_site.layout import ImageMeasurePort, MasonryOptions

from .routers import api_create_analytics_router, api_create_health_router, api_create_layout_router

logger = logging.getLogger(__name__)

API_REQUEST_ID_HEADER = "x-request-id"


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    analytics_service: AnalyticsDashboardService,
    measure_service: ImageMeasurePort,
    masonry_options: MasonryOptions | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        analytics_service: Dashboard and tracking service for analytics endpoints.
        measure_service: Image measurement port for layout endpoints.
        masonry_options: Optional masonry options for layout endpoints.

    Returns:
        FastAPI: Framework application instance with all routers attached.
    """

    application = FastAPI(title="Portfolio Site Back-Office")

    @application.middleware("http")
    async def api_request_context(request: Request, call_next) -> Response:
        """Attach a request id and log method, path, status and duration."""

        request_id = request.headers.get(API_REQUEST_ID_HEADER) or str(uuid4())
        started = time.perf_counter()
        response = await call_next(request)
        response.headers[API_REQUEST_ID_HEADER] = request_id
        logger.info(
            "request_id=%s method=%s path=%s status=%d duration_ms=%.1f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service descriptor."""

        return {
            "service": "portfolio-site",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(api_create_analytics_router(settings=settings, analytics_service=analytics_service))
    application.include_router(api_create_layout_router(measure_service=measure_service, options=masonry_options))

    return application
