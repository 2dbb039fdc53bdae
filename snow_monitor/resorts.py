from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from snow_monitor.models import STATION_ORDER, ResortConfig


class ConfigError(ValueError):
    """Raised when the resort list or configuration cannot be used."""


def _require_str(entry: Mapping[str, Any], key: str, index: int) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"resorts[{index}].{key} must be a non-empty string")
    return value.strip()


def _optional_url(entry: Mapping[str, Any], key: str, index: int) -> Optional[str]:
    value = entry.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigError(f"resorts[{index}].{key} must be a string")
    return value.strip()


def _coordinate(entry: Mapping[str, Any], key: str, index: int) -> float:
    value = entry.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"resorts[{index}].{key} must be a number")
    return float(value)


def _elevations(entry: Mapping[str, Any], index: int) -> Dict[str, Optional[int]]:
    raw = entry.get("elevations") or {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"resorts[{index}].elevations must be a mapping")
    unknown = set(raw) - set(STATION_ORDER)
    if unknown:
        raise ConfigError(
            f"resorts[{index}].elevations has unknown stations: {', '.join(sorted(map(str, unknown)))}"
        )
    elevations: Dict[str, Optional[int]] = {}
    for station in STATION_ORDER:
        value = raw.get(station)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"resorts[{index}].elevations.{station} must be a number")
        elevations[station] = int(value)
    return elevations


def parse_resort(entry: Any, index: int = 0) -> ResortConfig:
    if not isinstance(entry, Mapping):
        raise ConfigError(f"resorts[{index}] must be a mapping")
    return ResortConfig(
        id=_require_str(entry, "id", index),
        name=_require_str(entry, "name", index),
        area=str(entry.get("area") or ""),
        latitude=_coordinate(entry, "lat", index),
        longitude=_coordinate(entry, "lon", index),
        elevations=_elevations(entry, index),
        status_url=_optional_url(entry, "status_url", index),
        schedule_url=_optional_url(entry, "schedule_url", index),
        live_map_url=_optional_url(entry, "live_map_url", index),
    )


def parse_resorts(data: Any) -> Tuple[ResortConfig, ...]:
    """Validate the configured resort list.

    The list must be present and non-empty and resort ids must be unique;
    anything else raises :class:`ConfigError` since there is nothing valid
    to process.
    """

    if data is None:
        raise ConfigError("resort list is missing")
    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise ConfigError("resort list must be a sequence of mappings")
    resorts = tuple(parse_resort(entry, index) for index, entry in enumerate(data))
    if not resorts:
        raise ConfigError("resort list is empty")

    seen = set()
    for resort in resorts:
        if resort.id in seen:
            raise ConfigError(f"duplicate resort id: {resort.id}")
        seen.add(resort.id)
    return resorts
