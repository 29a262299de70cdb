__version__ = "0.1.0"

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from scrapewatch.dashboard.models import MonitoringRecord, RunSummary
    from scrapewatch.fetcher import FetchOutcome, RecordFetcher
    from scrapewatch.pipeline import DashboardView, Page, Paginator
    from scrapewatch.session import Credentials, SessionGate, SessionState


# Lazy import mapping
_LAZY_IMPORTS = {
    "MonitoringRecord": ("scrapewatch.dashboard.models", "MonitoringRecord"),
    "RunSummary": ("scrapewatch.dashboard.models", "RunSummary"),
    "create_app": ("scrapewatch.dashboard.api", "create_app"),
    # Fetcher
    "RecordFetcher": ("scrapewatch.fetcher", "RecordFetcher"),
    "FetchOutcome": ("scrapewatch.fetcher", "FetchOutcome"),
    "sample_records": ("scrapewatch.fetcher", "sample_records"),
    # Pipeline
    "ALL_SOURCES": ("scrapewatch.pipeline", "ALL_SOURCES"),
    "DashboardView": ("scrapewatch.pipeline", "DashboardView"),
    "Page": ("scrapewatch.pipeline", "Page"),
    "Paginator": ("scrapewatch.pipeline", "Paginator"),
    "build_view": ("scrapewatch.pipeline", "build_view"),
    "filter_by_source": ("scrapewatch.pipeline", "filter_by_source"),
    "list_sources": ("scrapewatch.pipeline", "list_sources"),
    "paginate": ("scrapewatch.pipeline", "paginate"),
    "sort_records": ("scrapewatch.pipeline", "sort_records"),
    "summarize": ("scrapewatch.pipeline", "summarize"),
    # Session
    "Credentials": ("scrapewatch.session", "Credentials"),
    "SessionGate": ("scrapewatch.session", "SessionGate"),
    "SessionState": ("scrapewatch.session", "SessionState"),
}
__all__ = list(_LAZY_IMPORTS)


def __getattr__(name: str) -> Any:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = __import__(module_path, fromlist=[attr_name])
        return getattr(module, attr_name)
    else:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    """Support for dir() and autocomplete."""
    return sorted(__all__ + ["config", "dashboard", "fetcher", "pipeline", "session", "__version__"])
