from __future__ import annotations

import json
from datetime import date, timedelta

from snow_monitor.models import SnowfallSummary
from snow_monitor.services.snowfall import summarize_snowfall

from .conftest import fixture_text

TODAY = date(2026, 1, 15)


def test_fixture_windows() -> None:
    daily = json.loads(fixture_text("forecast_top.json"))["daily"]
    series = list(zip(daily["time"], daily["snowfall_sum"]))

    summary = summarize_snowfall(series, TODAY)

    assert summary == SnowfallSummary(past=5.5, next_3_days=5.2, next_7_days=13.2)


def test_missing_and_zero_values_sum_to_zero() -> None:
    series = [(TODAY + timedelta(days=offset), None if offset % 2 else 0.0) for offset in range(-3, 7)]

    summary = summarize_snowfall(series, TODAY)

    assert summary == SnowfallSummary(past=0.0, next_3_days=0.0, next_7_days=0.0)


def test_today_counts_as_forecast_not_past() -> None:
    summary = summarize_snowfall([(TODAY, 4.0), (TODAY - timedelta(days=1), 1.0)], TODAY)

    assert summary.past == 1.0
    assert summary.next_3_days == 4.0
    assert summary.next_7_days == 4.0


def test_days_beyond_the_extended_window_are_ignored() -> None:
    summary = summarize_snowfall([(TODAY + timedelta(days=7), 10.0)], TODAY)

    assert summary.next_7_days == 0.0


def test_empty_series() -> None:
    assert summarize_snowfall([], TODAY) == SnowfallSummary()
