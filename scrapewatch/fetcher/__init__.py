"""Record Fetcher - sequential endpoint attempts with a sample-data fallback.

The fetcher walks an ordered list of candidate endpoints, giving each one a
fixed time budget. The first endpoint that answers with a 2xx status and a
valid list of monitoring records wins. When every candidate fails the
built-in sample dataset is returned instead of an error.

Example:
    >>> fetcher = RecordFetcher(["/api/v1/scraping-logs", "http://localhost:8000/api/v1/scraping-logs"])
    >>> outcome = await fetcher.fetch()
    >>> print(outcome.used_fallback, len(outcome.records))
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Sequence

import httpx

from scrapewatch.dashboard.logging import (
    log_fallback,
    log_fetch_attempt,
    log_fetch_failure,
    log_fetch_success,
)
from scrapewatch.dashboard.models import MonitoringRecord, parse_records

DEFAULT_TIMEOUT = 5.0

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Recorded runs served when no endpoint answers.
SAMPLE_RECORDS: tuple[dict[str, Any], ...] = (
    {
        "id": "e9916034-eae4-4785-8ae1-a6cbbe459205",
        "date_time": "2025-05-12T13:36:33.464778",
        "source": "Greene Tax",
        "total_records": 6,
        "success_status": True,
        "error_message": "",
        "created_at": "2025-05-12T17:36:34.157838Z",
    },
    {
        "id": "c75dc165-840b-4938-b836-7d62c0629136",
        "date_time": "2025-05-12T13:45:37.793851",
        "source": "Greene Foreclosure",
        "total_records": 42,
        "success_status": True,
        "error_message": "",
        "created_at": "2025-05-12T17:45:38.472565Z",
    },
    {
        "id": "00263ccd-9f0c-43ac-a217-d158040fdc14",
        "date_time": "2025-05-12T14:00:49.418941",
        "source": "Greene Divorce",
        "total_records": 79,
        "success_status": True,
        "error_message": "",
        "created_at": "2025-05-12T18:00:50.031483Z",
    },
    {
        "id": "0282f400-f9c9-4296-8445-551c61a9ea7f",
        "date_time": "2025-05-12T14:14:18.929696",
        "source": "Greene Probate",
        "total_records": 201,
        "success_status": True,
        "error_message": "",
        "created_at": "2025-05-12T18:14:21.050049Z",
    },
    {
        "id": "321d5bf1-0c69-4cbc-ab50-cefddbdb5c4e",
        "date_time": "2025-05-12T15:22:00",
        "source": "Montgomery Divorce",
        "total_records": 0,
        "success_status": False,
        "error_message": "No data",
        "created_at": "2025-05-12T19:22:04.260760Z",
    },
    {
        "id": "da14d3ef-b0e6-443e-b904-3114f04dca54",
        "date_time": "2025-05-12T15:23:37.571954",
        "source": "Montgomery Foreclosure",
        "total_records": 1,
        "success_status": True,
        "error_message": "",
        "created_at": "2025-05-12T19:23:38.242827Z",
    },
)


def sample_records() -> list[MonitoringRecord]:
    """Return the built-in sample dataset."""
    return parse_records(list(SAMPLE_RECORDS))


class FetchAttemptError(Exception):
    """An endpoint answered, but not with a usable response.

    Attributes:
        url: The endpoint that was tried
        status_code: HTTP status of the response
    """

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Server responded with status: {status_code}")


@dataclass
class FetchAttempt:
    """One try against one candidate endpoint.

    Attributes:
        url: Endpoint that was tried
        ok: Whether records were obtained from it
        status_code: HTTP status, when a response arrived
        error: Failure reason, when the attempt failed
        duration_ms: Wall time spent on the attempt
    """
    url: str
    ok: bool
    status_code: int | None = None
    error: str | None = None
    duration_ms: float = 0.0


@dataclass
class FetchOutcome:
    """Result of a fetch cycle.

    Attributes:
        records: Records from the winning endpoint, or the sample dataset
        endpoint: Winning endpoint, None when the fallback was used
        attempts: Every attempt made, in order
        fetched_at: When the cycle finished
    """
    records: list[MonitoringRecord]
    endpoint: str | None = None
    attempts: list[FetchAttempt] = field(default_factory=list)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def used_fallback(self) -> bool:
        """Whether the records are the sample dataset."""
        return self.endpoint is None


class RecordFetcher:
    """Fetch monitoring records from the first endpoint that answers.

    Example:
        >>> fetcher = RecordFetcher(["http://localhost:8000/api/v1/scraping-logs"], timeout=5.0)
        >>> outcome = await fetcher.fetch()
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        timeout: float = DEFAULT_TIMEOUT,
        fallback: Sequence[MonitoringRecord] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            endpoints: Candidate URLs, tried in order
            timeout: Seconds allowed per attempt, from request to parsed body
            fallback: Records returned when all candidates fail
                (defaults to the sample dataset)
            transport: Optional httpx transport, for tests or custom routing
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.endpoints = list(endpoints)
        self.timeout = timeout
        self._fallback = list(fallback) if fallback is not None else None
        self._transport = transport

    def fallback_records(self) -> list[MonitoringRecord]:
        """Records served when no endpoint answers."""
        if self._fallback is not None:
            return list(self._fallback)
        return sample_records()

    async def _attempt(self, client: httpx.AsyncClient, url: str) -> tuple[int, list[MonitoringRecord]]:
        response = await client.get(url, headers=JSON_HEADERS)
        if not response.is_success:
            raise FetchAttemptError(url, response.status_code)
        return response.status_code, parse_records(response.json())

    async def fetch(self) -> FetchOutcome:
        """Try each endpoint in turn and return the first usable records.

        Returns:
            FetchOutcome with the winning endpoint, or the fallback records
            when every attempt failed
        """
        attempts: list[FetchAttempt] = []

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            for url in self.endpoints:
                log_fetch_attempt(url)
                start = time.perf_counter()
                try:
                    status_code, records = await asyncio.wait_for(self._attempt(client, url), timeout=self.timeout)
                except asyncio.TimeoutError:
                    duration = (time.perf_counter() - start) * 1000
                    reason = f"timed out after {self.timeout:g}s"
                    attempts.append(FetchAttempt(url, ok=False, error=reason, duration_ms=duration))
                    log_fetch_failure(url, reason, duration)
                    continue
                except FetchAttemptError as e:
                    duration = (time.perf_counter() - start) * 1000
                    attempts.append(
                        FetchAttempt(url, ok=False, status_code=e.status_code, error=str(e), duration_ms=duration)
                    )
                    log_fetch_failure(url, str(e), duration)
                    continue
                except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
                    # ValueError covers undecodable JSON and pydantic validation errors
                    duration = (time.perf_counter() - start) * 1000
                    reason = str(e) or type(e).__name__
                    attempts.append(FetchAttempt(url, ok=False, error=reason, duration_ms=duration))
                    log_fetch_failure(url, reason, duration)
                    continue

                duration = (time.perf_counter() - start) * 1000
                attempts.append(FetchAttempt(url, ok=True, status_code=status_code, duration_ms=duration))
                log_fetch_success(url, len(records), duration)
                return FetchOutcome(records=records, endpoint=url, attempts=attempts)

        log_fallback(len(attempts))
        return FetchOutcome(records=self.fallback_records(), attempts=attempts)


__all__ = [
    "DEFAULT_TIMEOUT",
    "FetchAttempt",
    "FetchAttemptError",
    "FetchOutcome",
    "JSON_HEADERS",
    "RecordFetcher",
    "SAMPLE_RECORDS",
    "sample_records",
]
