"""Renders a :class:`Snapshot` into the static HTML page.

Unknown values are left out of the page rather than shown as zero.
"""
from __future__ import annotations

from html import escape as html_esc
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from .models import AvalancheAssessment, LiftStatus, ResortView, Snapshot, StationReading
from .services.weather import describe_weather

STATUS_BADGES = {
    LiftStatus.OPEN: ("open", "\U0001f7e2"),
    LiftStatus.CLOSED: ("closed", "\U0001f534"),
    LiftStatus.EVALUATING: ("evaluating", "\U0001f7e1"),
}

STYLE = """
  :root { --bg: #0f1923; --card: #1a2733; --text: #e0e6ed; --accent: #4fc3f7; --border: #2a3a4a; }
  * { box-sizing: border-box; margin: 0; padding: 0; }
  body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: var(--bg); color: var(--text); min-height: 100vh; padding: 20px; }
  .container { max-width: 900px; margin: 0 auto; }
  header { text-align: center; margin-bottom: 30px; }
  header h1 { font-size: 2em; color: var(--accent); margin-bottom: 4px; }
  .updated { color: #8899aa; font-size: 0.85em; }
  .avalanche { border-radius: 12px; padding: 14px 20px; margin-bottom: 24px; font-weight: 600; border: 1px solid var(--border); }
  .resort-card { background: var(--card); border-radius: 12px; padding: 24px; margin-bottom: 24px; border: 1px solid var(--border); }
  .resort-card h2 { color: var(--accent); margin-bottom: 16px; font-size: 1.4em; }
  .resort-card h2 .area { color: #8899aa; font-size: 0.65em; font-weight: normal; }
  .resort-card h3 { color: #aab; margin: 20px 0 10px; font-size: 1em; }
  .facts { display: flex; flex-wrap: wrap; gap: 10px; margin-bottom: 12px; }
  .fact { background: rgba(255,255,255,0.04); border-radius: 8px; padding: 8px 12px; }
  .fact span { display: block; color: #8899aa; font-size: 0.75em; text-transform: uppercase; }
  table { width: 100%; border-collapse: collapse; }
  th { text-align: left; color: #8899aa; font-size: 0.8em; text-transform: uppercase; letter-spacing: 0.5px; padding: 8px 12px; border-bottom: 1px solid var(--border); }
  td { padding: 10px 12px; border-bottom: 1px solid rgba(255,255,255,0.05); }
  .sub { color: #8899aa; font-size: 0.8em; }
  .missing { color: #8899aa; font-size: 0.8em; margin-top: 10px; }
  @media (max-width: 640px) {
    body { padding: 10px; }
    .resort-card { padding: 14px; }
    table { font-size: 0.85em; }
    th, td { padding: 6px 6px; }
  }
"""


def _num(value: Optional[float], unit: str = "", digits: int = 0) -> str:
    if value is None:
        return ""
    text = f"{value:.{digits}f}" if digits else f"{round(value):d}"
    return f"{text}{unit}"


def _fact(label: str, value: str) -> str:
    if not value:
        return ""
    return f'<div class="fact"><span>{html_esc(label)}</span>{html_esc(value)}</div>'


def _ratio(open_count: Optional[int], total: Optional[int]) -> str:
    if open_count is None:
        return ""
    return f"{open_count}/{total}" if total is not None else str(open_count)


def avalanche_banner(assessment: Optional[AvalancheAssessment]) -> str:
    if assessment is None:
        return '<div class="avalanche">No avalanche info</div>'
    text_color = "#fff" if assessment.level in (4, 5) else "#111"
    validity = ""
    if assessment.valid_from and assessment.valid_until:
        validity = f' <span class="sub">valid {html_esc(assessment.valid_from)} – {html_esc(assessment.valid_until)}</span>'
    source = f' <span class="sub">({html_esc(assessment.source)})</span>' if assessment.source else ""
    return (
        f'<div class="avalanche" style="background:{html_esc(assessment.color)};color:{text_color}">'
        f"{assessment.emoji} Avalanche danger {assessment.level} – {html_esc(assessment.label)}"
        f"{validity}{source}</div>"
    )


def _station_row(reading: StationReading) -> str:
    desc, emoji = describe_weather(reading.weather_code)
    feels = f'<br><span class="sub">Feels {_num(reading.feels_like, "°C", 1)}</span>' if reading.feels_like is not None else ""
    gusts = f'<br><span class="sub">Gusts {_num(reading.wind_gusts)}</span>' if reading.wind_gusts is not None else ""
    humidity = f'<br><span class="sub">Humidity {_num(reading.humidity, "%")}</span>' if reading.humidity is not None else ""
    weather = f"{emoji} {html_esc(desc)}" if reading.weather_code is not None else ""
    return (
        "<tr>"
        f'<td>{html_esc(reading.station.capitalize())}<br><span class="sub">{reading.elevation}m</span></td>'
        f"<td>{_num(reading.temperature, '°C', 1)}{feels}{humidity}</td>"
        f"<td>{_num(reading.snow_depth_cm, 'cm')}</td>"
        f"<td>{_num(reading.snow_next_24h, 'cm', 1)}</td>"
        f"<td>{weather}</td>"
        f"<td>{_num(reading.wind_speed, ' km/h')}{gusts}</td>"
        "</tr>"
    )


def _stations_table(stations: Iterable[StationReading]) -> str:
    rows = "".join(_station_row(reading) for reading in stations)
    if not rows:
        return ""
    return (
        '<table class="stations"><thead><tr><th>Station</th><th>Temp</th><th>Snow depth</th>'
        f"<th>New snow (24h)</th><th>Weather</th><th>Wind</th></tr></thead><tbody>{rows}</tbody></table>"
    )


def _forecast_table(view: ResortView) -> str:
    rows: List[str] = []
    for day in view.forecast:
        desc, emoji = describe_weather(day.weather_code)
        temps = ""
        if day.temp_min is not None and day.temp_max is not None:
            temps = f"{_num(day.temp_min)}° / {_num(day.temp_max)}°"
        rows.append(
            f"<tr><td>{day.date.strftime('%a %d %b')}</td><td>{emoji} {html_esc(desc)}</td>"
            f"<td>{temps}</td><td>{_num(day.snowfall, 'cm', 1)}</td></tr>"
        )
    if not rows:
        return ""
    return (
        "<h3>Forecast</h3><table class=\"forecast\"><thead><tr><th>Day</th><th>Weather</th>"
        f"<th>Temp</th><th>Snowfall</th></tr></thead><tbody>{''.join(rows)}</tbody></table>"
    )


def _lifts_table(view: ResortView) -> str:
    rows: List[str] = []
    for lift in view.lifts:
        label, emoji = STATUS_BADGES[lift.status]
        hours = f"{lift.schedule.opens} – {lift.schedule.closes}" if lift.schedule else ""
        rows.append(f"<tr><td>{html_esc(lift.name)}</td><td>{emoji} {label}</td><td>{hours}</td></tr>")
    if not rows:
        return ""
    return (
        "<h3>Lifts</h3><table class=\"lifts\"><thead><tr><th>Lift</th><th>Status</th><th>Hours</th>"
        f"</tr></thead><tbody>{''.join(rows)}</tbody></table>"
    )


def _resort_card(view: ResortView) -> str:
    facts = [
        _fact("Lifts open", _ratio(view.lifts_open, view.lifts_total)),
        _fact("Runs open", _ratio(view.runs_open, view.runs_total)),
        _fact("Pistes", _num(view.km_open, " km")),
        _fact("Base", " ".join(filter(None, [_num(view.base_depth_cm, "cm"), view.base_condition or ""]))),
        _fact("Summit", " ".join(filter(None, [_num(view.summit_depth_cm, "cm"), view.summit_condition or ""]))),
    ]
    if view.snowfall is not None:
        facts.extend(
            [
                _fact("Past snow", _num(view.snowfall.past, "cm", 1)),
                _fact("Next 3 days", _num(view.snowfall.next_3_days, "cm", 1)),
                _fact("Next 7 days", _num(view.snowfall.next_7_days, "cm", 1)),
            ]
        )
    if view.operating_hours is not None:
        facts.append(_fact("Hours", f"{view.operating_hours.opens} – {view.operating_hours.closes}"))

    facts_html = "".join(facts)
    area = f' <span class="area">{html_esc(view.area)}</span>' if view.area else ""
    missing = ""
    if view.unavailable:
        missing = f'<p class="missing">Unavailable: {html_esc(", ".join(view.unavailable))}</p>'
    return (
        f'<div class="resort-card" id="{html_esc(view.id)}"><h2>{html_esc(view.name)}{area}</h2>'
        f'<div class="facts">{facts_html}</div>'
        f"{_stations_table(view.stations)}{_forecast_table(view)}{_lifts_table(view)}{missing}</div>"
    )


def render_html(snapshot: Snapshot, *, timezone: str = "Europe/Rome") -> str:
    updated = snapshot.generated_at.astimezone(ZoneInfo(timezone)).strftime("%A %d %B %Y, %H:%M")
    cards = "\n".join(_resort_card(view) for view in snapshot.resorts)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Snow Monitor</title>
<style>{STYLE}</style>
</head>
<body>
<div class="container">
  <header>
    <h1>\U0001f3d4️ Snow Monitor</h1>
    <p class="updated">Updated: {html_esc(updated)} ({html_esc(timezone)})</p>
  </header>
  {avalanche_banner(snapshot.avalanche)}
  {cards}
  <footer style="text-align:center;color:#556;font-size:0.75em;margin-top:30px;">
    Weather data from <a href="https://open-meteo.com" style="color:#4fc3f7">Open-Meteo</a>
  </footer>
</div>
</body>
</html>
"""
