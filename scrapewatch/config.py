"""Configuration settings for the monitoring dashboard.

Uses Pydantic Settings to load environment variables for the upstream
backend, the record fetcher, the sign-in credential pair and logging.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BACKEND_URL = "http://localhost:8000/api/v1/scraping-logs"


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    host: str = Field("127.0.0.1", alias="HOST")
    port: int = Field(3000, alias="PORT")

    # Upstream records API
    backend_url: str = Field(DEFAULT_BACKEND_URL, alias="BACKEND_URL")
    record_endpoints: list[str] = Field(default_factory=list, alias="RECORD_ENDPOINTS")
    fetch_timeout: float = Field(5.0, gt=0, alias="FETCH_TIMEOUT")

    # Session gate
    admin_email: str = Field("admin@dashboard.com", alias="ADMIN_EMAIL")
    admin_password: str = Field("P@ssword!!!111", alias="ADMIN_PASSWORD")
    route_guard: bool = Field(True, alias="ROUTE_GUARD")

    # Dashboard view
    default_page_size: int = Field(5, ge=1, le=100, alias="DEFAULT_PAGE_SIZE")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def candidate_endpoints(self) -> list[str]:
        """Endpoints the record fetcher tries, in order."""
        return list(self.record_endpoints) or [self.backend_url]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_BACKEND_URL", "Settings", "get_settings"]
