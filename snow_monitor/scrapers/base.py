"""Shared helpers for the per-source fetchers."""
from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional, TypeVar, Union

import httpx
from bs4 import BeautifulSoup

from ..http_client import HttpFetcher
from ..logging import get_logger
from ..models import Unavailable

logger = get_logger(__name__)

T = TypeVar("T")

SourceResult = Union[T, Unavailable]

# Errors a source may raise while fetching or parsing; anything here degrades
# the source to ``Unavailable`` instead of failing the resort.
SOURCE_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError)


def create_soup(html: str) -> BeautifulSoup:
    """Create a BeautifulSoup parser from HTML content."""
    return BeautifulSoup(html, "lxml")


def try_json(text: str) -> Optional[Any]:
    """Decode ``text`` as JSON when it looks like a JSON document."""
    stripped = text.lstrip()
    if not stripped or stripped[0] not in "[{":
        return None
    try:
        return json.loads(stripped)
    except ValueError:
        return None


def fetch_source(
    source: str,
    url: Optional[str],
    fetcher: HttpFetcher,
    parser: Callable[[str], T],
    *,
    params: Optional[Mapping[str, Any]] = None,
    trace_id: str | None = None,
    resort_id: str | None = None,
) -> SourceResult:
    """Fetch ``url`` and parse it, converting any failure into ``Unavailable``."""
    if not url:
        return Unavailable(source, "not configured")

    logger.info("fetch.request", trace_id=trace_id, resort_id=resort_id, source=source, url=url)
    try:
        text = fetcher.fetch_text(url, params=params, trace_id=trace_id)
        result = parser(text)
    except SOURCE_ERRORS as exc:
        logger.warning(
            "fetch.unavailable",
            trace_id=trace_id,
            resort_id=resort_id,
            source=source,
            url=url,
            error=f"{type(exc).__name__}: {exc}",
        )
        return Unavailable(source, str(exc) or type(exc).__name__)

    logger.info("fetch.success", trace_id=trace_id, resort_id=resort_id, source=source, url=url)
    return result


def is_available(result: object) -> bool:
    return not isinstance(result, Unavailable)
