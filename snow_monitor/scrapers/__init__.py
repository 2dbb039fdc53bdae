"""Per-source fetchers.

Every fetcher returns a typed partial record, or :class:`Unavailable` when
the source could not be fetched or parsed.
"""
from __future__ import annotations

from .avalanche import fetch_avalanche, parse_bulletin
from .base import SourceResult, fetch_source, is_available
from .forecast import fetch_forecast, parse_station
from .lift_schedule import fetch_schedule, parse_schedule
from .live_map import fetch_live_map, parse_live_map
from .resort_status import fetch_status

__all__ = [
    "SourceResult",
    "fetch_avalanche",
    "fetch_forecast",
    "fetch_live_map",
    "fetch_schedule",
    "fetch_source",
    "fetch_status",
    "is_available",
    "parse_bulletin",
    "parse_live_map",
    "parse_schedule",
    "parse_station",
]
