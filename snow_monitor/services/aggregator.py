"""Combines a resort's per-source partial records into one :class:`ResortView`."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional, Tuple

from snow_monitor.matching import match
from snow_monitor.models import (
    AvalancheAssessment,
    DailyForecast,
    LiftSchedule,
    LiftStatus,
    LiftView,
    LiveMapReport,
    OperatingHours,
    ResortConfig,
    ResortView,
    StationReading,
    StatusReport,
    Unavailable,
    format_minutes,
)
from snow_monitor.services.snowfall import summarize_snowfall

FORECAST_DAYS = 3


def _not_fetched(source: str) -> Unavailable:
    return Unavailable(source, "not fetched")


@dataclass
class ResortSources:
    """Partial records gathered for one resort, one slot per source."""

    weather: Any = field(default_factory=lambda: _not_fetched("forecast"))
    status: Any = field(default_factory=lambda: _not_fetched("status"))
    live_map: Any = field(default_factory=lambda: _not_fetched("live_map"))
    schedule: Any = field(default_factory=lambda: _not_fetched("schedule"))

    def unavailable(self) -> Tuple[str, ...]:
        return tuple(
            result.source
            for result in (self.weather, self.status, self.live_map, self.schedule)
            if isinstance(result, Unavailable)
        )


def _available(result: Any, kind: type) -> Optional[Any]:
    return result if isinstance(result, kind) else None


def _count_open(entries) -> Tuple[Optional[int], Optional[int]]:
    if not entries:
        return None, None
    return sum(1 for entry in entries if entry.status is LiftStatus.OPEN), len(entries)


def _upcoming(stations: Tuple[StationReading, ...], today: date) -> Tuple[DailyForecast, ...]:
    if not stations:
        return ()
    # stations are ordered top first
    return tuple(day for day in stations[0].daily if day.date >= today)[:FORECAST_DAYS]


def _operating_hours(schedule: Optional[LiftSchedule]) -> Optional[OperatingHours]:
    if schedule is None or schedule.earliest_open is None or schedule.latest_close is None:
        return None
    return OperatingHours(
        opens=format_minutes(schedule.earliest_open),
        closes=format_minutes(schedule.latest_close),
        scheduled_lifts=len(schedule.entries),
    )


def build_resort_view(
    resort: ResortConfig,
    sources: ResortSources,
    *,
    today: date,
    avalanche: Optional[AvalancheAssessment] = None,
) -> ResortView:
    stations: Tuple[StationReading, ...] = ()
    if isinstance(sources.weather, tuple):
        stations = tuple(reading for reading in sources.weather if isinstance(reading, StationReading))

    status = _available(sources.status, StatusReport) or StatusReport()
    live_map = _available(sources.live_map, LiveMapReport)
    schedule = _available(sources.schedule, LiftSchedule)

    lifts: List[LiftView] = []
    if live_map is not None:
        entries = schedule.entries if schedule is not None else {}
        for lift in live_map.lifts:
            outcome = match(lift.name, entries)
            lifts.append(LiftView(name=lift.name, status=lift.status, schedule=outcome.entry))

    lifts_open, lifts_total = status.lifts_open, status.lifts_total
    runs_open, runs_total = status.runs_open, status.runs_total
    if live_map is not None:
        if lifts_open is None and lifts_total is None:
            lifts_open, lifts_total = _count_open(live_map.lifts)
        if runs_open is None and runs_total is None:
            runs_open, runs_total = _count_open(live_map.pistes)

    snowfall = None
    if stations:
        snowfall = summarize_snowfall(stations[0].snowfall_series(), today)

    return ResortView(
        id=resort.id,
        name=resort.name,
        area=resort.area,
        stations=stations,
        forecast=_upcoming(stations, today),
        snowfall=snowfall,
        lifts_open=lifts_open,
        lifts_total=lifts_total,
        runs_open=runs_open,
        runs_total=runs_total,
        km_open=status.km_open,
        base_depth_cm=status.base_depth_cm,
        summit_depth_cm=status.summit_depth_cm,
        base_condition=status.base_condition,
        summit_condition=status.summit_condition,
        lifts=tuple(lifts),
        pistes=live_map.pistes if live_map is not None else (),
        operating_hours=_operating_hours(schedule),
        avalanche=avalanche,
        unavailable=sources.unavailable(),
    )
