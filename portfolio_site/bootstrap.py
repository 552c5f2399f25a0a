"""Application bootstrap wiring for startup validation and dependency assembly."""

import logging

from fastapi import FastAPI

from portfolio_site.analytics import AnalyticsDashboardConfig, AnalyticsDashboardService
from portfolio_site.api import create_api_application
from portfolio_site.config import AppSettings, config_configure_logging, config_load_settings
from portfolio_site.db import SQLAlchemyAnalyticsRepository, SQLAlchemyDatabaseHealthService, db_create_engine
from portfolio_site.layout import PillowImageMeasureService

logger = logging.getLogger(__name__)


def bootstrap_build_dashboard_config(settings: AppSettings) -> AnalyticsDashboardConfig:
    """Translate runtime settings into dashboard aggregation limits.

    Args:
        settings: Validated runtime settings.

    Returns:
        AnalyticsDashboardConfig: Aggregation limits.
    """

    return AnalyticsDashboardConfig(
        default_period_days=settings.analytics_default_period_days,
        top_content_limit=settings.analytics_top_content_limit,
        traffic_source_limit=settings.analytics_traffic_source_limit,
        recent_activity_days=settings.analytics_recent_activity_days,
        recent_activity_limit=settings.analytics_recent_activity_limit,
        max_list_limit=settings.api_max_limit,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    config_configure_logging(resolved_settings)

    engine = db_create_engine(database_url=resolved_settings.database_url)
    analytics_service = AnalyticsDashboardService(
        repository=SQLAlchemyAnalyticsRepository(engine=engine),
        config=bootstrap_build_dashboard_config(resolved_settings),
    )
    logger.info(
        "application assembled environment=%s database=%s",
        resolved_settings.environment_name,
        engine.url.render_as_string(hide_password=True),
    )
    return create_api_application(
        settings=resolved_settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        analytics_service=analytics_service,
        measure_service=PillowImageMeasureService(media_root=resolved_settings.media_root),
    )
