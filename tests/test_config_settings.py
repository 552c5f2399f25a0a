"""Tests for runtime settings validation and bootstrap translation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_site.bootstrap import bootstrap_build_dashboard_config
from portfolio_site.config import AppSettings, SettingsLoadError, config_load_database_url, config_load_settings


def test_app_settings_normalizes_log_level() -> None:
    """Uppercase supported log level names."""

    assert AppSettings(log_level=" debug ").log_level == "DEBUG"


def test_app_settings_rejects_invalid_values() -> None:
    """Reject unknown log levels and inverted list limits.

    Returns:
        None: Assertions validate settings validation.

    Raises:
        AssertionError: Raised when invalid settings are accepted.
    """

    with pytest.raises(ValidationError):
        AppSettings(log_level="chatty")
    with pytest.raises(ValidationError):
        AppSettings(api_default_limit=20, api_max_limit=10)


def test_config_load_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Surface environment validation failures as settings load errors."""

    monkeypatch.setenv("ANALYTICS_TOP_CONTENT_LIMIT", "0")

    with pytest.raises(SettingsLoadError):
        config_load_settings()


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Map uppercase environment variables onto settings fields."""

    monkeypatch.setenv("ANALYTICS_DEFAULT_PERIOD_DAYS", "90")
    monkeypatch.setenv("MEDIA_ROOT", "/srv/media")

    settings = config_load_settings()

    assert settings.analytics_default_period_days == 90
    assert settings.media_root == "/srv/media"


def test_config_load_database_url_rejects_blank_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reject whitespace-only database URLs for migration tooling."""

    monkeypatch.setenv("DATABASE_URL", "   ")

    with pytest.raises(SettingsLoadError):
        config_load_database_url()


def test_bootstrap_build_dashboard_config_maps_settings() -> None:
    """Translate settings into aggregation limits.

    Returns:
        None: Assertions validate field mapping.

    Raises:
        AssertionError: Raised when a limit is mapped incorrectly.
    """

    config = bootstrap_build_dashboard_config(
        AppSettings(
            analytics_default_period_days=14,
            analytics_top_content_limit=3,
            analytics_traffic_source_limit=4,
            analytics_recent_activity_days=2,
            analytics_recent_activity_limit=6,
            api_max_limit=40,
        )
    )

    assert config.default_period_days == 14
    assert config.top_content_limit == 3
    assert config.traffic_source_limit == 4
    assert config.recent_activity_days == 2
    assert config.recent_activity_limit == 6
    assert config.max_list_limit == 40
