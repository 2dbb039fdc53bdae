"""Lift schedule page fetcher.

The page repeats a label paragraph naming a lift, followed by a list of daily
time ranges::

    <p>Chairlift Bella Vista (weekends only)</p>
    <ul><li>8.30 – 16.30</li></ul>

Only labels starting with a lift-type prefix are scheduled.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Tuple

from ..http_client import HttpFetcher
from ..logging import get_logger
from ..models import LiftSchedule, LiftScheduleEntry, ResortConfig
from .base import SourceResult, create_soup, fetch_source

logger = get_logger(__name__)

SOURCE = "schedule"

LIFT_TYPE_PREFIXES: Tuple[str, ...] = (
    "people-mover",
    "people mover",
    "chairlift",
    "cableway",
    "funicular",
    "funifor",
    "gondola",
)

_PREFIX_RE = re.compile(
    r"^\s*(?:%s)\b[\s:\-–—]*" % "|".join(re.escape(prefix) for prefix in LIFT_TYPE_PREFIXES),
    re.IGNORECASE,
)
_QUALIFIER_RE = re.compile(r"\s*\([^()]*\)\s*$")
_RANGE_RE = re.compile(r"(\d{1,2})\s*[:.]\s*(\d{2})\s*[-–—]\s*(\d{1,2})\s*[:.]\s*(\d{2})")
_SPACE_RE = re.compile(r"\s+")


def canonical_lift_name(label: str) -> Optional[str]:
    """Strip the lift-type prefix and trailing qualifier; ``None`` if not a lift."""
    label = _SPACE_RE.sub(" ", label or "").strip()
    match = _PREFIX_RE.match(label)
    if not match:
        return None
    name = label[match.end():]
    name = _QUALIFIER_RE.sub("", name).strip()
    return name.upper() or None


def _minute_of_day(hours: str, minutes: str) -> Optional[int]:
    h, m = int(hours), int(minutes)
    if h > 24 or m > 59 or (h == 24 and m):
        return None
    return h * 60 + m


def parse_time_range(text: str) -> Optional[Tuple[int, int]]:
    """Parse the first ``H[:.]MM – H[:.]MM`` range into minute-of-day values."""
    match = _RANGE_RE.search(text or "")
    if not match:
        return None
    opens = _minute_of_day(match.group(1), match.group(2))
    closes = _minute_of_day(match.group(3), match.group(4))
    if opens is None or closes is None:
        return None
    return opens, closes


def parse_schedule(html: str) -> LiftSchedule:
    soup = create_soup(html)
    entries: Dict[str, LiftScheduleEntry] = {}
    earliest: Optional[int] = None
    latest: Optional[int] = None

    for label_node in soup.find_all("p"):
        name = canonical_lift_name(label_node.get_text(" ", strip=True))
        if name is None:
            continue
        listing = label_node.find_next_sibling()
        if listing is None or listing.name not in ("ul", "ol"):
            logger.debug("schedule.missing_ranges", lift=name)
            continue
        window = parse_time_range(listing.get_text(" ", strip=True))
        if window is None:
            logger.debug("schedule.unparsable_range", lift=name)
            continue
        opens, closes = window
        earliest = opens if earliest is None else min(earliest, opens)
        latest = closes if latest is None else max(latest, closes)
        # the general window spans every parsed block; per-lift hours keep the first
        if name not in entries:
            entries[name] = LiftScheduleEntry(name=name, open_minute=opens, close_minute=closes)

    return LiftSchedule(entries=entries, earliest_open=earliest, latest_close=latest)


def fetch_schedule(resort: ResortConfig, fetcher: HttpFetcher, *, trace_id: str | None = None) -> SourceResult:
    return fetch_source(
        SOURCE,
        resort.schedule_url,
        fetcher,
        parse_schedule,
        trace_id=trace_id,
        resort_id=resort.id,
    )
