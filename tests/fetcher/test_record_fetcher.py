"""Tests for the sequential record fetcher and its sample-data fallback."""

import asyncio
import logging

import httpx
import pytest

from scrapewatch.fetcher import (
    SAMPLE_RECORDS,
    FetchAttemptError,
    RecordFetcher,
    sample_records,
)

PROXY = "http://dashboard.local/api/v1/scraping-logs"
BACKEND = "http://backend.local/api/v1/scraping-logs"

PAYLOAD = [
    {
        "id": "1",
        "date_time": "2025-05-12T14:00:00",
        "source": "A",
        "total_records": 10,
        "success_status": True,
        "error_message": "",
    },
    {
        "id": "2",
        "date_time": "2025-05-12T13:00:00",
        "source": "B",
        "total_records": 5,
        "success_status": False,
        "error_message": "timeout",
    },
]


def routed(routes):
    """MockTransport answering per-URL from a dict of url -> handler."""
    seen = []

    async def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        seen.append(url)
        return await routes[url](request)

    transport = httpx.MockTransport(handler)
    transport.seen = seen
    return transport


async def ok(request):
    return httpx.Response(200, json=PAYLOAD)


async def server_error(request):
    return httpx.Response(503, json={"error": "down"})


async def refused(request):
    raise httpx.ConnectError("connection refused", request=request)


async def hang(request):
    await asyncio.sleep(5)
    return httpx.Response(200, json=PAYLOAD)


async def not_json(request):
    return httpx.Response(200, text="<html>oops</html>")


async def wrong_shape(request):
    return httpx.Response(200, json={"records": PAYLOAD})


class TestSampleRecords:
    def test_sample_dataset(self):
        records = sample_records()
        assert len(records) == len(SAMPLE_RECORDS) == 6
        failed = [r for r in records if not r.success_status]
        assert [r.source for r in failed] == ["Montgomery Divorce"]
        assert failed[0].error_message == "No data"


class TestRecordFetcher:
    """Tests for RecordFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_first_endpoint_wins(self):
        transport = routed({PROXY: ok, BACKEND: ok})
        fetcher = RecordFetcher([PROXY, BACKEND], transport=transport)

        outcome = await fetcher.fetch()

        assert outcome.endpoint == PROXY
        assert not outcome.used_fallback
        assert [r.id for r in outcome.records] == ["1", "2"]
        assert transport.seen == [PROXY]
        assert len(outcome.attempts) == 1
        assert outcome.attempts[0].ok
        assert outcome.attempts[0].status_code == 200

    @pytest.mark.asyncio
    async def test_non_success_status_moves_on(self):
        transport = routed({PROXY: server_error, BACKEND: ok})
        outcome = await RecordFetcher([PROXY, BACKEND], transport=transport).fetch()

        assert outcome.endpoint == BACKEND
        assert transport.seen == [PROXY, BACKEND]
        first = outcome.attempts[0]
        assert not first.ok
        assert first.status_code == 503
        assert first.error == "Server responded with status: 503"

    @pytest.mark.asyncio
    async def test_transport_error_moves_on(self):
        transport = routed({PROXY: refused, BACKEND: ok})
        outcome = await RecordFetcher([PROXY, BACKEND], transport=transport).fetch()

        assert outcome.endpoint == BACKEND
        assert "connection refused" in outcome.attempts[0].error

    @pytest.mark.asyncio
    async def test_timeout_moves_on(self):
        transport = routed({PROXY: hang, BACKEND: ok})
        fetcher = RecordFetcher([PROXY, BACKEND], timeout=0.05, transport=transport)

        outcome = await fetcher.fetch()

        assert outcome.endpoint == BACKEND
        assert outcome.attempts[0].error.startswith("timed out")
        assert outcome.attempts[0].duration_ms < 2000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", [not_json, wrong_shape])
    async def test_unusable_body_moves_on(self, bad):
        transport = routed({PROXY: bad, BACKEND: ok})
        outcome = await RecordFetcher([PROXY, BACKEND], transport=transport).fetch()

        assert outcome.endpoint == BACKEND
        assert not outcome.attempts[0].ok

    @pytest.mark.asyncio
    async def test_all_fail_returns_sample_data(self, caplog):
        transport = routed({PROXY: server_error, BACKEND: refused})
        fetcher = RecordFetcher([PROXY, BACKEND], transport=transport)

        with caplog.at_level(logging.WARNING, logger="scrapewatch.fetcher"):
            outcome = await fetcher.fetch()

        assert outcome.used_fallback
        assert outcome.endpoint is None
        assert outcome.records == sample_records()
        assert [a.url for a in outcome.attempts] == [PROXY, BACKEND]
        assert "using sample data" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_fallback(self):
        transport = routed({PROXY: refused})
        fallback = sample_records()[:1]
        outcome = await RecordFetcher([PROXY], fallback=fallback, transport=transport).fetch()

        assert outcome.records == fallback

    @pytest.mark.asyncio
    async def test_no_endpoints(self):
        outcome = await RecordFetcher([]).fetch()

        assert outcome.used_fallback
        assert outcome.attempts == []

    @pytest.mark.asyncio
    async def test_empty_list_is_a_success(self):
        async def empty(request):
            return httpx.Response(200, json=[])

        outcome = await RecordFetcher([PROXY], transport=routed({PROXY: empty})).fetch()

        assert outcome.endpoint == PROXY
        assert outcome.records == []

    @pytest.mark.asyncio
    async def test_sends_json_headers(self):
        captured = {}

        async def capture(request):
            captured.update(request.headers)
            return httpx.Response(200, json=PAYLOAD)

        await RecordFetcher([PROXY], transport=routed({PROXY: capture})).fetch()

        assert captured["accept"] == "application/json"
        assert captured["content-type"] == "application/json"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            RecordFetcher([PROXY], timeout=0)


def test_fetch_attempt_error_message():
    error = FetchAttemptError(PROXY, 404)
    assert error.status_code == 404
    assert str(error) == "Server responded with status: 404"
