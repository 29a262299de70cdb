"""Tests for client dashboard configuration and settings."""

import pytest

from scrapewatch.config import DEFAULT_BACKEND_URL, Settings
from scrapewatch.dashboard import get_dashboard_config


class TestDashboardConfig:
    """Tests for dashboard configuration."""

    def test_get_dashboard_config(self):
        """Test getting dashboard config."""
        config = get_dashboard_config()

        assert config["theme"] == "dark"
        assert config["palette"]["primary"] == "#22d3ee"
        assert config["palette"]["accent"] == "#3b82f6"

    def test_clock_interval(self):
        """The clock re-renders once a second."""
        assert get_dashboard_config()["clockInterval"] == 1000

    def test_particles(self):
        particles = get_dashboard_config()["particles"]
        assert particles["count"] == 100
        assert particles["minSize"] < particles["maxSize"]

    def test_page_size_options(self):
        assert get_dashboard_config()["pageSizeOptions"] == [5, 10, 20, 50]


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for var in ("BACKEND_URL", "RECORD_ENDPOINTS", "FETCH_TIMEOUT", "ADMIN_EMAIL"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)

        assert settings.backend_url == DEFAULT_BACKEND_URL
        assert settings.fetch_timeout == 5.0
        assert settings.admin_email == "admin@dashboard.com"
        assert settings.route_guard is True
        assert settings.candidate_endpoints == [DEFAULT_BACKEND_URL]

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BACKEND_URL", "http://backend:9000/logs")
        monkeypatch.setenv("RECORD_ENDPOINTS", '["http://a/logs", "http://b/logs"]')
        monkeypatch.setenv("FETCH_TIMEOUT", "2.5")
        monkeypatch.setenv("ROUTE_GUARD", "false")
        settings = Settings(_env_file=None)

        assert settings.backend_url == "http://backend:9000/logs"
        assert settings.candidate_endpoints == ["http://a/logs", "http://b/logs"]
        assert settings.fetch_timeout == 2.5
        assert settings.route_guard is False

    def test_field_names_accepted(self):
        settings = Settings(_env_file=None, fetch_timeout=0.5, default_page_size=10)
        assert settings.fetch_timeout == 0.5
        assert settings.default_page_size == 10

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, fetch_timeout=0)


pytestmark = pytest.mark.dashboard
