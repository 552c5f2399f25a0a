"""Domain models used across application layer boundaries."""

from .models import HealthStatus, PortfolioItemStatus

__all__ = ["HealthStatus", "PortfolioItemStatus"]
