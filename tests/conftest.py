from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from snow_monitor.config import AppConfig, AvalancheConfig, HttpConfig
from snow_monitor.http_client import HttpFetcher
from snow_monitor.models import ResortConfig

FIXTURES = Path(__file__).parent / "fixtures"

STATUS_URL = "https://tonale.test/status"
SCHEDULE_URL = "https://tonale.test/orari"
LIVE_MAP_URL = "https://map.tonale.test/live.json"
BULLETIN_URL = "https://bulletins.test/latest.json"

Handler = Callable[[httpx.Request], httpx.Response]


def fixture_text(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def resort() -> ResortConfig:
    return ResortConfig(
        id="passo-tonale",
        name="Passo Tonale",
        area="Pontedilegno-Tonale",
        latitude=46.2597,
        longitude=10.5817,
        elevations={"top": 3000, "bottom": 1880},
        status_url=STATUS_URL,
        schedule_url=SCHEDULE_URL,
        live_map_url=LIVE_MAP_URL,
    )


@pytest.fixture
def app_config(resort: ResortConfig) -> AppConfig:
    return AppConfig(
        resorts=(resort,),
        http=HttpConfig(max_attempts=1, backoff_factor=0, max_workers=1, max_redirects=3),
        avalanche=AvalancheConfig(url=BULLETIN_URL, source="avalanche.test"),
    )


@pytest.fixture
def make_fetcher() -> Callable[..., HttpFetcher]:
    def _make(handler: Handler, *, max_attempts: int = 1, max_redirects: int = 3) -> HttpFetcher:
        client = httpx.Client(transport=httpx.MockTransport(handler), max_redirects=max_redirects)
        return HttpFetcher(
            client=client,
            config=HttpConfig(max_attempts=max_attempts, backoff_factor=0, max_redirects=max_redirects),
        )

    return _make


def source_handler(*, forecast_ok: bool = True, status_ok: bool = True, others_ok: bool = True) -> Handler:
    """Serve the fixture pages; any source can be switched to a 503."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = request.url
        if url.host == "api.open-meteo.com":
            if not forecast_ok:
                return httpx.Response(503, text="maintenance")
            if url.params.get("elevation") == "3000":
                return httpx.Response(200, text=fixture_text("forecast_top.json"))
            return httpx.Response(500, text="station failure")
        if str(url) == STATUS_URL:
            return httpx.Response(200, text=fixture_text("status_page.html")) if status_ok else httpx.Response(404)
        if not others_ok:
            return httpx.Response(503)
        if str(url) == SCHEDULE_URL:
            return httpx.Response(200, text=fixture_text("schedule.html"))
        if str(url) == LIVE_MAP_URL:
            return httpx.Response(200, text=fixture_text("live_map.json"))
        if str(url) == BULLETIN_URL:
            return httpx.Response(200, text=fixture_text("bulletin.json"))
        return httpx.Response(404)

    return handler
