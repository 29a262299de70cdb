"""Logging utilities for the dashboard and its record fetcher.

Centralizes logging configuration so the app factory, the proxy and the
fetcher share one format. Standard library logging with a human-readable
formatter by default and an optional JSON formatter for structured logs.

Usage:
    from scrapewatch.dashboard.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=False)
    log = get_logger(__name__)
    log.info("message", extra={"endpoint": "localhost:8000"})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any
from urllib.parse import urlparse

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

_fetch_log = logging.getLogger("scrapewatch.fetcher")


CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; fields passed via `extra=` become keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _RESERVED_ATTRS
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _logging_config(level: str, formatter: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": CONSOLE_DATEFMT},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "stream": {"class": "logging.StreamHandler", "formatter": formatter},
        },
        "root": {"handlers": ["stream"], "level": level},
    }


def configure_logging(level: str = "INFO", json_logs: bool = False, force: bool = True) -> None:
    """Attach a single stream handler to the root logger.

    Args:
        level: Level name, case-insensitive ("debug", "INFO", ...)
        json_logs: Emit JSON lines instead of the console format
        force: Replace existing root handlers; when False an already
            configured root logger is left untouched
    """
    if not force and logging.getLogger().handlers:
        return
    logging.config.dictConfig(_logging_config(level.upper(), "json" if json_logs else "console"))


def get_logger(name: str | None = None) -> logging.Logger:
    """Module logger; the root logger when `name` is None."""
    return logging.getLogger(name)


def _extract_host(url: str) -> str:
    """Extract host[:port] from URL, or the path for relative URLs."""
    if not url:
        return "unknown"
    parsed = urlparse(url)
    return parsed.netloc or parsed.path or "unknown"


def log_fetch_attempt(url: str) -> None:
    """Log the start of a fetch attempt."""
    _fetch_log.info("Attempting to fetch from: %s", url, extra={"endpoint": _extract_host(url)})


def log_fetch_success(url: str, count: int, duration_ms: float) -> None:
    """Log a successful fetch."""
    _fetch_log.info(
        "Successfully fetched %d records from: %s",
        count,
        url,
        extra={"endpoint": _extract_host(url), "duration_ms": round(duration_ms, 1)},
    )


def log_fetch_failure(url: str, reason: str, duration_ms: float) -> None:
    """Log a failed fetch attempt."""
    _fetch_log.warning(
        "Error fetching from %s: %s",
        url,
        reason,
        extra={"endpoint": _extract_host(url), "duration_ms": round(duration_ms, 1)},
    )


def log_fallback(attempted: int) -> None:
    """Log that every candidate failed and sample data is served."""
    _fetch_log.warning(
        "All %d fetch attempts failed, using sample data",
        attempted,
        extra={"attempted": attempted},
    )


__all__ = [
    "CONSOLE_FORMAT",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
    "log_fallback",
    "log_fetch_attempt",
    "log_fetch_failure",
    "log_fetch_success",
]
