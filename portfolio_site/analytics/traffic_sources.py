"""Referrer normalization for traffic-source breakdowns."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from urllib.parse import urlsplit

ANALYTICS_DIRECT_SOURCE = "Direct"
_ANALYTICS_RAW_SOURCE_MAX_LENGTH = 50


def analytics_normalize_referrer(referrer: str | None) -> str:
    """Map one raw referrer to its traffic-source label.

    Args:
        referrer: Raw referrer string, possibly missing.

    Returns:
        str: Hostname for absolute URLs, `Direct` for missing referrers, else
            the raw value truncated to 50 characters plus an ellipsis.
    """

    if referrer is None or not referrer.strip() or referrer.strip() == ANALYTICS_DIRECT_SOURCE:
        return ANALYTICS_DIRECT_SOURCE

    normalized_referrer = referrer.strip()
    try:
        hostname = urlsplit(normalized_referrer).hostname
    except ValueError:
        hostname = None
    if hostname and "://" in normalized_referrer:
        return hostname

    if len(normalized_referrer) > _ANALYTICS_RAW_SOURCE_MAX_LENGTH:
        return f"{normalized_referrer[:_ANALYTICS_RAW_SOURCE_MAX_LENGTH]}..."
    return normalized_referrer


def analytics_rank_traffic_sources(referrers: Iterable[str | None], limit: int) -> list[tuple[str, int]]:
    """Count referrers per source and keep the busiest ones.

    Args:
        referrers: Raw referrer values, one per event.
        limit: Max number of sources returned.

    Returns:
        list[tuple[str, int]]: `(source, count)` pairs by count desc, source asc.
    """

    source_counts = Counter(analytics_normalize_referrer(referrer) for referrer in referrers)
    ranked_sources = sorted(source_counts.items(), key=lambda entry: (-entry[1], entry[0]))
    return ranked_sources[:limit]


__all__ = ["ANALYTICS_DIRECT_SOURCE", "analytics_normalize_referrer", "analytics_rank_traffic_sources"]
