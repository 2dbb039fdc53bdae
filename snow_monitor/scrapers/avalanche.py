"""Avalanche bulletin fetcher.

Bulletins follow the EAWS CAAMLv6 layout: a list of bulletins, each with
``dangerRatings`` (``mainValue`` in low..very_high) and a ``validTime``
window. Non-JSON bulletins (CAAML XML) are scanned by pattern for the same
keys.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ..http_client import HttpFetcher
from ..models import AvalancheAssessment
from ..services.avalanche import aggregate_danger
from .base import SourceResult, fetch_source, try_json

SOURCE = "avalanche"

_MAIN_VALUE_RE = re.compile(r"mainValue[^A-Za-z_]{1,5}([A-Za-z_]+)")
_START_RE = re.compile(r"startTime[^0-9]{1,5}([0-9][0-9T:.+\-Z]+)")
_END_RE = re.compile(r"endTime[^0-9]{1,5}([0-9][0-9T:.+\-Z]+)")


def _timed(values: Iterable[str]) -> List[Tuple[datetime, str]]:
    timed = []
    for raw in values:
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        timed.append((parsed, raw))
    return timed


def _window(starts: Iterable[str], ends: Iterable[str]) -> Tuple[Optional[str], Optional[str]]:
    timed_starts = _timed(starts)
    timed_ends = _timed(ends)
    valid_from = min(timed_starts)[1] if timed_starts else None
    valid_until = max(timed_ends)[1] if timed_ends else None
    return valid_from, valid_until


def _bulletins(payload: Any) -> List[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        if isinstance(payload.get("bulletins"), list):
            payload = payload["bulletins"]
        else:
            payload = [payload]
    if not isinstance(payload, list):
        raise ValueError("unexpected bulletin layout")
    return [bulletin for bulletin in payload if isinstance(bulletin, Mapping)]


def parse_bulletin(text: str, *, source: Optional[str] = None) -> AvalancheAssessment:
    payload = try_json(text)
    ratings: List[str] = []
    starts: List[str] = []
    ends: List[str] = []

    if payload is not None:
        for bulletin in _bulletins(payload):
            for rating in bulletin.get("dangerRatings") or ():
                if isinstance(rating, Mapping) and rating.get("mainValue"):
                    ratings.append(str(rating["mainValue"]))
            valid_time = bulletin.get("validTime") or {}
            if isinstance(valid_time, Mapping):
                if valid_time.get("startTime"):
                    starts.append(str(valid_time["startTime"]))
                if valid_time.get("endTime"):
                    ends.append(str(valid_time["endTime"]))
    else:
        ratings = _MAIN_VALUE_RE.findall(text)
        starts = _START_RE.findall(text)
        ends = _END_RE.findall(text)

    valid_from, valid_until = _window(starts, ends)
    return aggregate_danger(ratings, valid_from=valid_from, valid_until=valid_until, source=source)


def fetch_avalanche(
    url: Optional[str],
    fetcher: HttpFetcher,
    *,
    source: Optional[str] = None,
    trace_id: str | None = None,
) -> SourceResult:
    return fetch_source(
        SOURCE,
        url,
        fetcher,
        lambda text: parse_bulletin(text, source=source),
        trace_id=trace_id,
    )
