from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Tuple, Union

from snow_monitor.models import SnowfallSummary

DateLike = Union[date, str]

NEAR_TERM_DAYS = 3
EXTENDED_DAYS = 7


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def summarize_snowfall(
    series: Iterable[Tuple[DateLike, Optional[float]]],
    today: date,
) -> SnowfallSummary:
    """Sum daily snowfall into past, next-3-day and next-7-day windows.

    The past window covers every date strictly before ``today``; the forward
    windows include ``today``. Missing daily values count as 0. The series is
    taken as given, without sorting or de-duplication.
    """

    near_end = today + timedelta(days=NEAR_TERM_DAYS - 1)
    extended_end = today + timedelta(days=EXTENDED_DAYS - 1)

    past = near = extended = 0.0
    for raw_day, amount in series:
        day = _as_date(raw_day)
        value = float(amount) if amount is not None else 0.0
        if day < today:
            past += value
            continue
        if day <= near_end:
            near += value
        if day <= extended_end:
            extended += value

    return SnowfallSummary(
        past=round(past, 1),
        next_3_days=round(near, 1),
        next_7_days=round(extended, 1),
    )
