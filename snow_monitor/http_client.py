from __future__ import annotations

import time
from typing import Any, Dict, Mapping, Optional

import httpx

from .config import HttpConfig
from .logging import get_logger

logger = get_logger(__name__)


class HttpFetcher:
    """HTTP client wrapper with redirects, timeouts and retry/backoff.

    Only transport errors (timeouts, refused connections) are retried. HTTP
    error statuses and redirect loops fail immediately.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        config: Optional[HttpConfig] = None,
    ) -> None:
        config = config or HttpConfig()
        self.client = client or httpx.Client(
            timeout=config.timeout,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
            max_redirects=config.max_redirects,
        )
        self.max_attempts = max(1, config.max_attempts)
        self.backoff_factor = config.backoff_factor

    def fetch(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
        trace_id: str | None = None,
    ) -> httpx.Response:
        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.debug("http.fetch", trace_id=trace_id, url=url, attempt=attempt)
                response = self.client.get(
                    url,
                    params=params,
                    headers=extra_headers,
                    follow_redirects=True,
                )
                response.raise_for_status()
                return response
            except httpx.TransportError as exc:
                logger.warning(
                    "http.fetch.retry",
                    trace_id=trace_id,
                    url=url,
                    attempt=attempt,
                    error=str(exc),
                )
                if attempt == self.max_attempts:
                    raise
                time.sleep(self.backoff_factor * (2 ** (attempt - 1)))
        raise RuntimeError("Unexpected fetch state")

    def fetch_text(self, url: str, **kwargs: Any) -> str:
        return self.fetch(url, **kwargs).text

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
