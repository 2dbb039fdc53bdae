from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

STATION_ORDER: Tuple[str, ...] = ("top", "mid", "bottom")


@dataclass(frozen=True)
class ResortConfig:
    """Static description of a resort as supplied by configuration."""

    id: str
    name: str
    area: str
    latitude: float
    longitude: float
    elevations: Mapping[str, Optional[int]] = field(default_factory=dict)
    status_url: Optional[str] = None
    schedule_url: Optional[str] = None
    live_map_url: Optional[str] = None

    def stations(self) -> Tuple[Tuple[str, int], ...]:
        """Configured stations in top/mid/bottom order, skipping unset ones."""
        return tuple(
            (station, int(self.elevations[station]))
            for station in STATION_ORDER
            if self.elevations.get(station) is not None
        )


@dataclass(frozen=True)
class Unavailable:
    """Marks a source whose data could not be fetched or parsed."""

    source: str
    reason: str = ""


@dataclass(frozen=True)
class DailyForecast:
    date: date
    weather_code: Optional[int] = None
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    snowfall: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "weather_code": self.weather_code,
            "temp_min": self.temp_min,
            "temp_max": self.temp_max,
            "snowfall": self.snowfall,
        }


@dataclass(frozen=True)
class StationReading:
    """Current conditions and daily series for one elevation station.

    Temperatures are in °C, wind in km/h, humidity in % and depths/snowfall
    in cm. ``snow_next_24h`` sums the hourly snowfall from the current hour on.
    """

    station: str
    elevation: int
    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    snow_depth_cm: Optional[float] = None
    weather_code: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_gusts: Optional[float] = None
    humidity: Optional[float] = None
    snowfall_now: Optional[float] = None
    snow_next_24h: Optional[float] = None
    daily: Tuple[DailyForecast, ...] = ()

    def snowfall_series(self) -> Tuple[Tuple[date, Optional[float]], ...]:
        return tuple((day.date, day.snowfall) for day in self.daily)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "station": self.station,
            "elevation": self.elevation,
            "temperature": self.temperature,
            "feels_like": self.feels_like,
            "snow_depth_cm": self.snow_depth_cm,
            "weather_code": self.weather_code,
            "wind_speed": self.wind_speed,
            "wind_gusts": self.wind_gusts,
            "humidity": self.humidity,
            "snowfall_now": self.snowfall_now,
            "snow_next_24h": self.snow_next_24h,
            "daily": [day.to_dict() for day in self.daily],
        }


class LiftStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    EVALUATING = "evaluating"


@dataclass(frozen=True)
class LiftStatusEntry:
    name: str
    status: LiftStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class PisteStatusEntry:
    name: str
    status: LiftStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "status": self.status.value}


def format_minutes(minutes: int) -> str:
    """Render a minute-of-day as ``H:MM``."""
    return f"{minutes // 60}:{minutes % 60:02d}"


@dataclass(frozen=True)
class LiftScheduleEntry:
    name: str
    open_minute: int
    close_minute: int

    @property
    def opens(self) -> str:
        return format_minutes(self.open_minute)

    @property
    def closes(self) -> str:
        return format_minutes(self.close_minute)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "opens": self.opens, "closes": self.closes}


@dataclass(frozen=True)
class LiftSchedule:
    entries: Mapping[str, LiftScheduleEntry] = field(default_factory=dict)
    earliest_open: Optional[int] = None
    latest_close: Optional[int] = None


@dataclass(frozen=True)
class StatusReport:
    """Facts extracted from a resort status page; ``None`` means unknown."""

    lifts_open: Optional[int] = None
    lifts_total: Optional[int] = None
    runs_open: Optional[int] = None
    runs_total: Optional[int] = None
    km_open: Optional[int] = None
    base_depth_cm: Optional[int] = None
    summit_depth_cm: Optional[int] = None
    base_condition: Optional[str] = None
    summit_condition: Optional[str] = None


@dataclass(frozen=True)
class LiveMapReport:
    lifts: Tuple[LiftStatusEntry, ...] = ()
    pistes: Tuple[PisteStatusEntry, ...] = ()


@dataclass(frozen=True)
class AvalancheAssessment:
    level: int
    label: str
    color: str
    emoji: str
    valid_from: Optional[str] = None
    valid_until: Optional[str] = None
    source: Optional[str] = None
    ratings_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "label": self.label,
            "color": self.color,
            "emoji": self.emoji,
            "valid_from": self.valid_from,
            "valid_until": self.valid_until,
            "source": self.source,
            "ratings_count": self.ratings_count,
        }


@dataclass(frozen=True)
class SnowfallSummary:
    past: float = 0.0
    next_3_days: float = 0.0
    next_7_days: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "past": self.past,
            "next_3_days": self.next_3_days,
            "next_7_days": self.next_7_days,
        }


@dataclass(frozen=True)
class LiftView:
    name: str
    status: LiftStatus
    schedule: Optional[LiftScheduleEntry] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "opens": self.schedule.opens if self.schedule else None,
            "closes": self.schedule.closes if self.schedule else None,
        }


@dataclass(frozen=True)
class OperatingHours:
    opens: str
    closes: str
    scheduled_lifts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opens": self.opens,
            "closes": self.closes,
            "scheduled_lifts": self.scheduled_lifts,
        }


@dataclass(frozen=True)
class ResortView:
    """Fully reconciled presentation data for one resort."""

    id: str
    name: str
    area: str
    stations: Tuple[StationReading, ...] = ()
    forecast: Tuple[DailyForecast, ...] = ()
    snowfall: Optional[SnowfallSummary] = None
    lifts_open: Optional[int] = None
    lifts_total: Optional[int] = None
    runs_open: Optional[int] = None
    runs_total: Optional[int] = None
    km_open: Optional[int] = None
    base_depth_cm: Optional[int] = None
    summit_depth_cm: Optional[int] = None
    base_condition: Optional[str] = None
    summit_condition: Optional[str] = None
    lifts: Tuple[LiftView, ...] = ()
    pistes: Tuple[PisteStatusEntry, ...] = ()
    operating_hours: Optional[OperatingHours] = None
    avalanche: Optional[AvalancheAssessment] = None
    unavailable: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "area": self.area,
            "stations": [station.to_dict() for station in self.stations],
            "forecast": [day.to_dict() for day in self.forecast],
            "snowfall": self.snowfall.to_dict() if self.snowfall else None,
            "lifts_open": self.lifts_open,
            "lifts_total": self.lifts_total,
            "runs_open": self.runs_open,
            "runs_total": self.runs_total,
            "km_open": self.km_open,
            "base_depth_cm": self.base_depth_cm,
            "summit_depth_cm": self.summit_depth_cm,
            "base_condition": self.base_condition,
            "summit_condition": self.summit_condition,
            "lifts": [lift.to_dict() for lift in self.lifts],
            "pistes": [piste.to_dict() for piste in self.pistes],
            "operating_hours": self.operating_hours.to_dict() if self.operating_hours else None,
            "avalanche": self.avalanche.to_dict() if self.avalanche else None,
            "unavailable": list(self.unavailable),
        }


@dataclass(frozen=True)
class Snapshot:
    generated_at: datetime
    resorts: Tuple[ResortView, ...] = ()
    avalanche: Optional[AvalancheAssessment] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "avalanche": self.avalanche.to_dict() if self.avalanche else None,
            "resorts": [resort.to_dict() for resort in self.resorts],
        }
