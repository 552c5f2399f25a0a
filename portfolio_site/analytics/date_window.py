"""Dashboard date-window parsing and resolution helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from .errors import AnalyticsValidationError

ANALYTICS_PERIOD_DAYS: dict[str, int] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "1y": 365,
}


@dataclass(frozen=True)
class AnalyticsWindow:
    """Resolved inclusive time window for one dashboard computation.

    Attributes:
        start_utc: Inclusive lower bound in UTC.
        end_utc: Inclusive upper bound in UTC.
        period: Symbolic period used to derive the window, if any.
    """

    start_utc: datetime
    end_utc: datetime
    period: str | None = None

    def analytics_calendar_days(self) -> list[date]:
        """Return every UTC calendar day touched by the window, in order.

        Returns:
            list[date]: Days from start date through end date inclusive.
        """

        first_day = self.start_utc.date()
        day_count = (self.end_utc.date() - first_day).days + 1
        return [first_day + timedelta(days=offset) for offset in range(day_count)]


def analytics_parse_datetime(value: str, field_name: str) -> datetime:
    """Parse one explicit window bound into an offset-aware UTC datetime.

    Args:
        value: ISO-8601 date or datetime text.
        field_name: Input field name used in validation errors.

    Returns:
        datetime: Parsed bound in UTC.

    Raises:
        AnalyticsValidationError: Raised when the value is blank or malformed.
    """

    if not isinstance(value, str) or not value.strip():
        raise AnalyticsValidationError(f"Invalid {field_name} format", field_name=field_name, value=value)

    normalized_value = value.strip()
    if normalized_value.endswith(("Z", "z")):
        normalized_value = f"{normalized_value[:-1]}+00:00"

    try:
        parsed_value = datetime.fromisoformat(normalized_value)
    except ValueError:
        try:
            parsed_value = datetime.combine(date.fromisoformat(normalized_value), time.min)
        except ValueError as error:
            raise AnalyticsValidationError(
                f"Invalid {field_name} format",
                field_name=field_name,
                value=value,
            ) from error

    if parsed_value.tzinfo is None or parsed_value.utcoffset() is None:
        return parsed_value.replace(tzinfo=timezone.utc)
    return parsed_value.astimezone(timezone.utc)


def analytics_resolve_window(
    now_utc: datetime,
    start_date: str | None = None,
    end_date: str | None = None,
    period: str | None = None,
    default_period_days: int = 30,
) -> AnalyticsWindow:
    """Resolve the dashboard window from explicit bounds or a symbolic period.

    Empty bound strings count as absent. A period applies only when neither
    explicit bound is given. Otherwise
    missing bounds default to `now` for the end and `end - default_period_days`
    for the start.

    Args:
        now_utc: Offset-aware reference time.
        start_date: Optional explicit start bound text.
        end_date: Optional explicit end bound text.
        period: Optional symbolic period (`7d`, `30d`, `90d`, `1y`).
        default_period_days: Window length when no bound or period is given.

    Returns:
        AnalyticsWindow: Resolved inclusive window.

    Raises:
        AnalyticsValidationError: Raised when a bound or period is invalid or
            the start is after the end.
    """

    if now_utc.tzinfo is None:
        raise ValueError("now_utc must be offset-aware")

    start_utc = analytics_parse_datetime(start_date, "start_date") if start_date else None
    end_utc = analytics_parse_datetime(end_date, "end_date") if end_date else None

    normalized_period = period.strip() if period is not None else None
    if normalized_period and start_utc is None and end_utc is None:
        period_days = ANALYTICS_PERIOD_DAYS.get(normalized_period)
        if period_days is None:
            raise AnalyticsValidationError("Invalid period value", field_name="period", value=period)
        resolved_end = now_utc.astimezone(timezone.utc)
        return AnalyticsWindow(
            start_utc=resolved_end - timedelta(days=period_days),
            end_utc=resolved_end,
            period=normalized_period,
        )

    resolved_end = end_utc if end_utc is not None else now_utc.astimezone(timezone.utc)
    resolved_start = start_utc if start_utc is not None else resolved_end - timedelta(days=default_period_days)
    if resolved_start > resolved_end:
        raise AnalyticsValidationError(
            "start_date must not be after end_date",
            field_name="start_date",
            value=start_date,
        )
    return AnalyticsWindow(start_utc=resolved_start, end_utc=resolved_end)


__all__ = [
    "ANALYTICS_PERIOD_DAYS",
    "AnalyticsWindow",
    "analytics_parse_datetime",
    "analytics_resolve_window",
]
