from __future__ import annotations

import json
from datetime import date

import httpx

from snow_monitor.config import ForecastConfig
from snow_monitor.models import StationReading, Unavailable
from snow_monitor.scrapers.forecast import build_params, fetch_forecast, next_hours_snowfall, parse_station

from .conftest import fixture_text, source_handler


def test_parse_station() -> None:
    reading = parse_station(fixture_text("forecast_top.json"), "top", 3000)

    assert reading.station == "top"
    assert reading.elevation == 3000
    assert reading.temperature == -8.4
    assert reading.feels_like == -15.2
    assert reading.snow_depth_cm == 142.0
    assert reading.weather_code == 73
    assert reading.wind_gusts == 51.8
    assert reading.humidity == 93.0
    assert reading.snowfall_now == 0.7
    assert reading.snow_next_24h == 3.2
    assert len(reading.daily) == 10
    assert reading.daily[0].date == date(2026, 1, 12)
    assert reading.daily[1].snowfall is None


def test_missing_current_block_leaves_fields_unknown() -> None:
    payload = json.loads(fixture_text("forecast_top.json"))
    del payload["current"]

    reading = parse_station(payload, "mid", 2600)

    assert reading.temperature is None
    assert reading.snow_depth_cm is None
    assert len(reading.daily) == 10


def test_build_params(resort) -> None:
    params = build_params(resort, 3000, ForecastConfig(past_days=2, forecast_days=5), "Europe/Rome")

    assert params["elevation"] == 3000
    assert params["past_days"] == 2
    assert params["forecast_days"] == 5
    assert "snowfall_sum" in params["daily"]
    assert params["hourly"] == "snowfall"
    assert "relative_humidity_2m" in params["current"]
    assert "snow_depth" in params["current"]


def test_failed_station_is_omitted(resort, make_fetcher) -> None:
    with make_fetcher(source_handler()) as fetcher:
        result = fetch_forecast(resort, fetcher, config=ForecastConfig(), timezone="Europe/Rome")

    assert isinstance(result, tuple)
    assert [reading.station for reading in result] == ["top"]
    assert isinstance(result[0], StationReading)


def test_all_stations_failing_is_unavailable(resort, make_fetcher) -> None:
    with make_fetcher(lambda request: httpx.Response(503)) as fetcher:
        result = fetch_forecast(resort, fetcher, config=ForecastConfig(), timezone="Europe/Rome")

    assert result == Unavailable("forecast", "all stations failed")


def test_next_hours_snowfall_window() -> None:
    hourly = {
        "time": [f"2026-01-15T{hour:02d}:00" for hour in range(24)] + [f"2026-01-16T{hour:02d}:00" for hour in range(24)],
        "snowfall": [1.0] * 10 + [None, 0.5] + [0.0] * 36,
    }

    assert next_hours_snowfall(hourly, "2026-01-15T09:15") == 1.5
    assert next_hours_snowfall(hourly) == 10.5
    assert next_hours_snowfall(hourly, "2026-01-17T00:00") is None
    assert next_hours_snowfall({}, "2026-01-15T09:00") is None


def test_missing_hourly_block_leaves_new_snow_unknown() -> None:
    payload = json.loads(fixture_text("forecast_top.json"))
    del payload["hourly"]

    assert parse_station(payload, "top", 3000).snow_next_24h is None
