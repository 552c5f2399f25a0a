"""API router package for endpoint composition."""

from .analytics import api_create_analytics_router
from .health import api_create_health_router
from .layout import api_create_layout_router
from .responses import api_error_response

__all__ = [
    "api_create_analytics_router",
    "api_create_health_router",
    "api_create_layout_router",
    "api_error_response",
]
