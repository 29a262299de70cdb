"""Data models for monitoring records and dashboard responses."""

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

TRUTHY_STRINGS = frozenset({"true", "t", "1", "yes", "y", "on", "success", "ok"})


class MonitoringRecord(BaseModel):
    """One logged run of an external data-collection job.

    Accepts the backend's snake_case wire names plus the camelCase variants
    some feeds emit, and always serializes back to snake_case.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    id: str
    timestamp: datetime = Field(
        validation_alias=AliasChoices("date_time", "timestamp", "dateTime"),
        serialization_alias="date_time",
    )
    source: str
    total_records: int = Field(
        ge=0,
        validation_alias=AliasChoices("total_records", "totalRecords"),
    )
    success_status: bool = Field(
        validation_alias=AliasChoices("success_status", "successStatus"),
    )
    error_message: str = Field(
        "",
        validation_alias=AliasChoices("error_message", "errorMessage"),
    )
    created_at: datetime | None = Field(
        None,
        validation_alias=AliasChoices("created_at", "createdAt"),
    )

    @field_validator("success_status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY_STRINGS
        return value

    @field_validator("error_message", mode="before")
    @classmethod
    def _blank_error(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def sort_key(self) -> datetime:
        """Timestamp as naive UTC, so aware and naive values compare."""
        if self.timestamp.tzinfo is None:
            return self.timestamp
        return self.timestamp.astimezone(timezone.utc).replace(tzinfo=None)


_RECORD_LIST = TypeAdapter(list[MonitoringRecord])


def parse_records(payload: Any) -> list[MonitoringRecord]:
    """Validate a decoded JSON payload as a list of records.

    Raises:
        pydantic.ValidationError: If the payload is not a list of records
    """
    return _RECORD_LIST.validate_python(payload)


class RunSummary(BaseModel):
    """Aggregate values shown above the records table."""

    last_run_success: bool = False
    last_run_date: str = "N/A"
    total_records: int = 0
    record_count: int = 0


class PageInfo(BaseModel):
    """Pagination state of a dashboard response."""

    number: int
    page_size: int
    total_pages: int
    total_items: int
    has_previous: bool
    has_next: bool
    label: str


class DashboardResponse(BaseModel):
    """JSON rendition of the dashboard view."""

    summary: RunSummary
    sources: list[str]
    selected_source: str
    page: PageInfo
    records: list[MonitoringRecord]
    live: bool
    endpoint: str | None = None
    fetched_at: datetime


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    backend: str
    timestamp: datetime


class ProxyErrorResponse(BaseModel):
    """Error body returned by the proxy endpoints."""

    error: str
