"""Typed domain models shared across runtime layers."""

from dataclasses import dataclass
from enum import Enum


class PortfolioItemStatus(str, Enum):
    """Publication lifecycle states stored on portfolio items."""

    DRAFT = "DRAFT"
    REVIEW = "REVIEW"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str
