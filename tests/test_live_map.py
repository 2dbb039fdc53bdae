from __future__ import annotations

import httpx
import pytest

from snow_monitor.models import LiftStatus, Unavailable
from snow_monitor.scrapers.live_map import fetch_live_map, normalize_status, parse_live_map

from .conftest import fixture_text


def test_json_overlay() -> None:
    report = parse_live_map(fixture_text("live_map.json"))

    lifts = {entry.name: entry.status for entry in report.lifts}
    assert lifts == {
        "Tonale-Paradiso": LiftStatus.OPEN,
        "Seggiovia Valena": LiftStatus.CLOSED,
        "Paradiso Presena Funifor": LiftStatus.EVALUATING,
        "Baby": LiftStatus.OPEN,
    }
    assert [entry.name for entry in report.pistes] == ["Alpino", "Bleis", "Contrabbandieri"]


def test_html_overlay() -> None:
    report = parse_live_map(fixture_text("live_map.html"))

    lifts = {entry.name: entry.status for entry in report.lifts}
    assert lifts == {
        "Tonale-Paradiso": LiftStatus.OPEN,
        "Seggiovia Valena": LiftStatus.CLOSED,
        "Baby": LiftStatus.EVALUATING,
    }
    assert {entry.name: entry.status for entry in report.pistes} == {
        "Alpino": LiftStatus.OPEN,
        "Bleis": LiftStatus.CLOSED,
    }


def test_custom_selectors() -> None:
    html = '<div class="impianto" title="Valena" data-state="aperto"></div>'
    selectors = {"lifts": ".impianto", "pistes": "", "name_attr": "title", "status_attr": "data-state"}

    report = parse_live_map(html, selectors=selectors)

    assert report.pistes == ()
    assert report.lifts[0].name == "Valena"
    assert report.lifts[0].status is LiftStatus.OPEN


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("OPEN", LiftStatus.OPEN),
        ("Chiuso", LiftStatus.CLOSED),
        ("in_valutazione", LiftStatus.EVALUATING),
        ("on-hold", LiftStatus.EVALUATING),
        ("sideways", None),
        (None, None),
    ],
)
def test_normalize_status(raw, expected) -> None:
    assert normalize_status(raw) is expected


def test_overlay_without_entries_is_rejected() -> None:
    with pytest.raises(ValueError):
        parse_live_map('{"lifts": [], "pistes": []}')


def test_fetch_live_map_degrades_on_empty_overlay(resort, make_fetcher) -> None:
    with make_fetcher(lambda request: httpx.Response(200, text="<html><body></body></html>")) as fetcher:
        result = fetch_live_map(resort, fetcher)

    assert isinstance(result, Unavailable)
    assert result.source == "live_map"
