"""Resort status page fetcher.

The page is free-form HTML; lift/run occupancy, km open, snow depths and the
surface condition are pulled out with the named patterns in
:mod:`snow_monitor.extraction`.
"""
from __future__ import annotations

from ..extraction import parse_status_page
from ..http_client import HttpFetcher
from ..models import ResortConfig
from .base import SourceResult, fetch_source

SOURCE = "status"


def fetch_status(resort: ResortConfig, fetcher: HttpFetcher, *, trace_id: str | None = None) -> SourceResult:
    return fetch_source(
        SOURCE,
        resort.status_url,
        fetcher,
        parse_status_page,
        trace_id=trace_id,
        resort_id=resort.id,
    )
