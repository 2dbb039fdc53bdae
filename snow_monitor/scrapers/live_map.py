"""Live-map overlay fetcher.

The overlay exposes the current status of every named lift and piste. It is
served either as JSON (``{"lifts": [...], "pistes": [...]}``) or as HTML whose
entries carry the name and status in attributes picked by CSS selectors.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Tuple

from ..http_client import HttpFetcher
from ..logging import get_logger
from ..models import LiftStatus, LiftStatusEntry, LiveMapReport, PisteStatusEntry, ResortConfig
from .base import SourceResult, create_soup, fetch_source, try_json

logger = get_logger(__name__)

SOURCE = "live_map"

DEFAULT_SELECTORS: MutableMapping[str, str] = {
    "lifts": "[data-kind='lift']",
    "pistes": "[data-kind='piste']",
    "name_attr": "data-name",
    "status_attr": "data-status",
}

_STATUS_ALIASES: Dict[str, LiftStatus] = {
    "open": LiftStatus.OPEN,
    "opened": LiftStatus.OPEN,
    "running": LiftStatus.OPEN,
    "o": LiftStatus.OPEN,
    "1": LiftStatus.OPEN,
    "true": LiftStatus.OPEN,
    "aperto": LiftStatus.OPEN,
    "aperta": LiftStatus.OPEN,
    "closed": LiftStatus.CLOSED,
    "close": LiftStatus.CLOSED,
    "c": LiftStatus.CLOSED,
    "0": LiftStatus.CLOSED,
    "false": LiftStatus.CLOSED,
    "chiuso": LiftStatus.CLOSED,
    "chiusa": LiftStatus.CLOSED,
    "evaluating": LiftStatus.EVALUATING,
    "evaluation": LiftStatus.EVALUATING,
    "in evaluation": LiftStatus.EVALUATING,
    "pending": LiftStatus.EVALUATING,
    "hold": LiftStatus.EVALUATING,
    "on hold": LiftStatus.EVALUATING,
    "in valutazione": LiftStatus.EVALUATING,
    "e": LiftStatus.EVALUATING,
}

_PISTE_KEYS = ("pistes", "slopes", "runs")


def normalize_status(raw: Any) -> Optional[LiftStatus]:
    if raw is None:
        return None
    key = " ".join(str(raw).replace("_", " ").replace("-", " ").split()).lower()
    return _STATUS_ALIASES.get(key)


def _entries_from_json(items: Iterable[Any], kind: str) -> List[Tuple[str, LiftStatus]]:
    entries: List[Tuple[str, LiftStatus]] = []
    for item in items or ():
        if not isinstance(item, Mapping):
            continue
        name = str(item.get("name") or "").strip()
        raw_status = item.get("status", item.get("state"))
        status = normalize_status(raw_status)
        if not name:
            continue
        if status is None:
            logger.warning("live_map.unknown_status", kind=kind, name=name, status=raw_status)
            continue
        entries.append((name, status))
    return entries


def _entries_from_html(soup, selector: str, name_attr: str, status_attr: str, kind: str) -> List[Tuple[str, LiftStatus]]:
    entries: List[Tuple[str, LiftStatus]] = []
    if not selector:
        return entries
    for node in soup.select(selector):
        name = " ".join(str(node.get(name_attr) or node.get_text(" ", strip=True)).split())
        raw_status = node.get(status_attr)
        status = normalize_status(raw_status)
        if not name:
            continue
        if status is None:
            logger.warning("live_map.unknown_status", kind=kind, name=name, status=raw_status)
            continue
        entries.append((name, status))
    return entries


def parse_live_map(text: str, *, selectors: Mapping[str, str] | None = None) -> LiveMapReport:
    """Parse a live-map payload into lift and piste status entries."""
    payload = try_json(text)
    if isinstance(payload, Mapping):
        lifts = _entries_from_json(payload.get("lifts") or (), "lift")
        pistes_raw = next((payload[key] for key in _PISTE_KEYS if payload.get(key)), ())
        pistes = _entries_from_json(pistes_raw, "piste")
    else:
        active: Dict[str, str] = {**DEFAULT_SELECTORS, **(selectors or {})}
        soup = create_soup(text)
        lifts = _entries_from_html(soup, active["lifts"], active["name_attr"], active["status_attr"], "lift")
        pistes = _entries_from_html(soup, active["pistes"], active["name_attr"], active["status_attr"], "piste")

    if not lifts and not pistes:
        raise ValueError("live map contains no lift or piste entries")

    return LiveMapReport(
        lifts=tuple(LiftStatusEntry(name, status) for name, status in lifts),
        pistes=tuple(PisteStatusEntry(name, status) for name, status in pistes),
    )


def fetch_live_map(
    resort: ResortConfig,
    fetcher: HttpFetcher,
    *,
    selectors: Mapping[str, str] | None = None,
    trace_id: str | None = None,
) -> SourceResult:
    return fetch_source(
        SOURCE,
        resort.live_map_url,
        fetcher,
        lambda text: parse_live_map(text, selectors=selectors),
        trace_id=trace_id,
        resort_id=resort.id,
    )
