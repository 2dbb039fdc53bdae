from __future__ import annotations

from typing import Dict, Optional, Tuple

# WMO weather interpretation codes used by Open-Meteo.
WMO_CODES: Dict[int, Tuple[str, str]] = {
    0: ("Clear sky", "☀️"),
    1: ("Mainly clear", "\U0001f324️"),
    2: ("Partly cloudy", "⛅"),
    3: ("Overcast", "☁️"),
    45: ("Fog", "\U0001f32b️"),
    48: ("Rime fog", "\U0001f32b️"),
    51: ("Light drizzle", "\U0001f327️"),
    53: ("Drizzle", "\U0001f327️"),
    55: ("Heavy drizzle", "\U0001f327️"),
    56: ("Freezing drizzle", "\U0001f327️❄️"),
    57: ("Heavy freezing drizzle", "\U0001f327️❄️"),
    61: ("Light rain", "\U0001f327️"),
    63: ("Rain", "\U0001f327️"),
    65: ("Heavy rain", "\U0001f327️"),
    66: ("Freezing rain", "\U0001f327️❄️"),
    67: ("Heavy freezing rain", "\U0001f327️❄️"),
    71: ("Light snow", "\U0001f328️"),
    73: ("Snow", "\U0001f328️"),
    75: ("Heavy snow", "❄️"),
    77: ("Snow grains", "❄️"),
    80: ("Light showers", "\U0001f326️"),
    81: ("Showers", "\U0001f326️"),
    82: ("Heavy showers", "\U0001f326️"),
    85: ("Light snow showers", "\U0001f328️"),
    86: ("Heavy snow showers", "❄️"),
    95: ("Thunderstorm", "⛈️"),
    96: ("Thunderstorm + hail", "⛈️"),
    99: ("Thunderstorm + heavy hail", "⛈️"),
}

UNKNOWN_WEATHER = ("Unknown", "❓")


def describe_weather(code: Optional[int]) -> Tuple[str, str]:
    """Return ``(description, emoji)`` for a WMO weather code."""
    if code is None:
        return UNKNOWN_WEATHER
    return WMO_CODES.get(int(code), UNKNOWN_WEATHER)
