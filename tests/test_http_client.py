from __future__ import annotations

import httpx
import pytest

from snow_monitor.models import Unavailable
from snow_monitor.scrapers.resort_status import fetch_status

from .conftest import STATUS_URL


def test_redirect_loop_is_unavailable(resort, make_fetcher) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        return httpx.Response(302, headers={"Location": STATUS_URL})

    with make_fetcher(handler, max_redirects=3) as fetcher:
        result = fetch_status(resort, fetcher)

    assert isinstance(result, Unavailable)
    assert result.source == "status"
    assert len(calls) == 4


def test_transport_errors_are_retried(make_fetcher) -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url)
        raise httpx.ConnectError("connection refused", request=request)

    with make_fetcher(handler, max_attempts=3) as fetcher:
        with pytest.raises(httpx.ConnectError):
            fetcher.fetch(STATUS_URL)

    assert len(attempts) == 3


def test_http_errors_are_not_retried(make_fetcher) -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url)
        return httpx.Response(500)

    with make_fetcher(handler, max_attempts=3) as fetcher:
        with pytest.raises(httpx.HTTPStatusError):
            fetcher.fetch(STATUS_URL)

    assert len(attempts) == 1


def test_redirect_is_followed(make_fetcher) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": STATUS_URL})
        return httpx.Response(200, text="ok")

    with make_fetcher(handler) as fetcher:
        assert fetcher.fetch_text("https://tonale.test/old") == "ok"
