import asyncio

import httpx
import pytest
from cricket_scores.fetch.base import ScorePayloadError
from cricket_scores.fetch.controller import FetchController
from cricket_scores.fetch.http_source import HttpScoreSource
from cricket_scores.schemas import ErrorKind, FetchConfig, FetchFailure, FetchSuccess, ScoreRecord

TEST_URL = "https://scores.test/api/cric-scores/"

class TestHttpScoreSource:
    """HTTP source against a mocked transport"""

    def test_parses_json_array(self, mock_http_source):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[["England", 23], ["Sri Lanka", 99]])

        result = asyncio.run(mock_http_source(handler).fetch())

        assert result == [
            ScoreRecord(country="England", score=23),
            ScoreRecord(country="Sri Lanka", score=99),
        ]
        request = seen[0]
        assert request.method == "GET"
        assert str(request.url) == TEST_URL
        assert request.headers["accept"] == "application/json"
        assert request.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert request.headers["pragma"] == "no-cache"
        assert request.headers["user-agent"] == "pytest"

    def test_non_2xx_raises_status_error(self, mock_http_source):
        source = mock_http_source(lambda request: httpx.Response(404, text="not found"))
        with pytest.raises(httpx.HTTPStatusError) as info:
            asyncio.run(source.fetch())
        assert info.value.response.status_code == 404

    def test_html_body_is_payload_error(self, mock_http_source):
        source = mock_http_source(lambda request: httpx.Response(200, text="<html></html>"))
        with pytest.raises(ScorePayloadError):
            asyncio.run(source.fetch())

    def test_defaults_come_from_settings(self):
        source = HttpScoreSource()
        assert source.url == TEST_URL
        assert source.user_agent

class TestHttpAcquisition:
    """Controller driving the HTTP source end to end"""

    def test_server_errors_retried_until_success(self, mock_http_source, recording_sleep):
        responses = iter([
            httpx.Response(503),
            httpx.Response(500),
            httpx.Response(200, json=[["India", 3], ["India", 71]]),
        ])
        source = mock_http_source(lambda request: next(responses))
        controller = FetchController(source, sleep=recording_sleep)

        outcome = asyncio.run(controller.acquire(FetchConfig(max_retries=3)))

        assert isinstance(outcome, FetchSuccess)
        assert outcome.attempts == 3
        assert recording_sleep.delays_ms == [1000, 2000]

    def test_always_404_fails_without_retry(self, mock_http_source, recording_sleep):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        controller = FetchController(mock_http_source(handler), sleep=recording_sleep)
        outcome = asyncio.run(controller.acquire(FetchConfig(max_retries=3)))

        assert isinstance(outcome, FetchFailure)
        assert outcome.reason is ErrorKind.HTTP_ERROR
        assert outcome.status_code == 404
        assert outcome.attempts == 1
        assert len(calls) == 1

    def test_connection_refused_exhausts_retries(self, mock_http_source, recording_sleep):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        controller = FetchController(mock_http_source(handler), sleep=recording_sleep)
        outcome = asyncio.run(controller.acquire(FetchConfig(max_retries=2)))

        assert outcome.reason is ErrorKind.NETWORK_ERROR
        assert outcome.attempts == 3
        assert "connection refused" in outcome.last_message

    def test_wrong_shape_is_parse_failure(self, mock_http_source, recording_sleep):
        source = mock_http_source(lambda request: httpx.Response(200, json={"scores": []}))
        controller = FetchController(source, sleep=recording_sleep)
        outcome = asyncio.run(controller.acquire(FetchConfig(max_retries=3)))

        assert outcome.reason is ErrorKind.PARSE_ERROR
        assert outcome.attempts == 1
        assert recording_sleep.delays_ms == []
