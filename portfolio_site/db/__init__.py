"""Database layer package for all SQL and persistence boundaries."""

from .analytics_repository import SQLAlchemyAnalyticsRepository
from .engine import db_create_engine
from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
    AnalyticsDashboardSource,
    AnalyticsEventCreateRequest,
    AnalyticsEventRecord,
    AnalyticsRepositoryPort,
    CategoryPerformanceRecord,
    DatabaseHealthPort,
    PortfolioItemCountersRecord,
    PortfolioItemSummaryRecord,
)

__all__ = [
    "AnalyticsDashboardSource",
    "AnalyticsEventCreateRequest",
    "AnalyticsEventRecord",
    "AnalyticsRepositoryPort",
    "CategoryPerformanceRecord",
    "DatabaseHealthPort",
    "PortfolioItemCountersRecord",
    "PortfolioItemSummaryRecord",
    "SQLAlchemyAnalyticsRepository",
    "SQLAlchemyDatabaseHealthService",
    "db_create_engine",
]
