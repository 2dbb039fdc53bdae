"""Open-Meteo forecast fetcher.

Source: https://api.open-meteo.com/v1/forecast

One request per configured elevation station. Open-Meteo reports snow depth
in metres and snowfall sums in centimetres.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import ForecastConfig
from ..http_client import HttpFetcher
from ..logging import get_logger
from ..models import DailyForecast, ResortConfig, StationReading, Unavailable
from .base import SourceResult, fetch_source, is_available

logger = get_logger(__name__)

SOURCE = "forecast"

CURRENT_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "snowfall",
    "relative_humidity_2m",
    "snow_depth",
    "weather_code",
    "wind_speed_10m",
    "wind_gusts_10m",
)
DAILY_FIELDS = ("weather_code", "temperature_2m_max", "temperature_2m_min", "snowfall_sum")
HOURLY_FIELDS = ("snowfall",)
NEXT_HOURS = 24


def build_params(resort: ResortConfig, elevation: int, config: ForecastConfig, timezone: str) -> Dict[str, Any]:
    return {
        "latitude": resort.latitude,
        "longitude": resort.longitude,
        "elevation": elevation,
        "current": ",".join(CURRENT_FIELDS),
        "hourly": ",".join(HOURLY_FIELDS),
        "daily": ",".join(DAILY_FIELDS),
        "past_days": config.past_days,
        "forecast_days": config.forecast_days,
        "timezone": timezone,
    }


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    return float(value)


def _code(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    return int(value)


def _column(daily: Mapping[str, Any], key: str, index: int) -> Any:
    values: Sequence[Any] = daily.get(key) or ()
    return values[index] if index < len(values) else None


def parse_daily(daily: Mapping[str, Any]) -> Tuple[DailyForecast, ...]:
    days: List[DailyForecast] = []
    for index, raw_date in enumerate(daily.get("time") or ()):
        days.append(
            DailyForecast(
                date=date.fromisoformat(str(raw_date)[:10]),
                weather_code=_code(_column(daily, "weather_code", index)),
                temp_min=_number(_column(daily, "temperature_2m_min", index)),
                temp_max=_number(_column(daily, "temperature_2m_max", index)),
                snowfall=_number(_column(daily, "snowfall_sum", index)),
            )
        )
    return tuple(days)


def next_hours_snowfall(hourly: Mapping[str, Any], current_time: Any = None) -> Optional[float]:
    """Sum hourly snowfall over the next 24 hours, counting missing hours as 0.

    The window starts at the hour of ``current_time`` (ISO ``YYYY-MM-DDTHH:MM``),
    or at the first hourly value when the current time is unknown.
    """
    values: Sequence[Any] = hourly.get("snowfall") or ()
    if not values:
        return None
    times: Sequence[Any] = hourly.get("time") or ()
    start = 0
    if current_time and times:
        hour = str(current_time)[:13]
        start = next((index for index, raw in enumerate(times) if str(raw)[:13] >= hour), len(times))
    window = values[start:start + NEXT_HOURS]
    if not window:
        return None
    return round(sum(_number(value) or 0.0 for value in window), 1)


def parse_station(payload: str | Mapping[str, Any], station: str, elevation: int) -> StationReading:
    """Turn an Open-Meteo response into a :class:`StationReading`."""
    data = json.loads(payload) if isinstance(payload, str) else payload
    if not isinstance(data, Mapping):
        raise ValueError("forecast response is not a JSON object")
    if data.get("error"):
        raise ValueError(str(data.get("reason") or "forecast error"))

    current = data.get("current") or {}
    depth_m = _number(current.get("snow_depth"))
    return StationReading(
        station=station,
        elevation=elevation,
        temperature=_number(current.get("temperature_2m")),
        feels_like=_number(current.get("apparent_temperature")),
        snow_depth_cm=round(depth_m * 100, 1) if depth_m is not None else None,
        weather_code=_code(current.get("weather_code")),
        wind_speed=_number(current.get("wind_speed_10m")),
        wind_gusts=_number(current.get("wind_gusts_10m")),
        humidity=_number(current.get("relative_humidity_2m")),
        snowfall_now=_number(current.get("snowfall")),
        snow_next_24h=next_hours_snowfall(data.get("hourly") or {}, current.get("time")),
        daily=parse_daily(data.get("daily") or {}),
    )


def fetch_forecast(
    resort: ResortConfig,
    fetcher: HttpFetcher,
    *,
    config: ForecastConfig,
    timezone: str,
    trace_id: str | None = None,
) -> SourceResult:
    """Fetch every configured station; failed stations are omitted.

    Returns a tuple of readings in top/mid/bottom order, or ``Unavailable``
    when no station could be fetched.
    """

    stations = resort.stations()
    if not stations:
        return Unavailable(SOURCE, "no stations configured")

    readings: List[StationReading] = []
    for station, elevation in stations:
        result = fetch_source(
            f"{SOURCE}.{station}",
            config.url,
            fetcher,
            lambda text, station=station, elevation=elevation: parse_station(text, station, elevation),
            params=build_params(resort, elevation, config, timezone),
            trace_id=trace_id,
            resort_id=resort.id,
        )
        if is_available(result):
            readings.append(result)

    if not readings:
        return Unavailable(SOURCE, "all stations failed")
    return tuple(readings)
