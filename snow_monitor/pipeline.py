"""Runs fetch → aggregate for every configured resort.

Each resort moves through a fixed sequence of stages. A failed fetch stage
leaves ``Unavailable`` in its slot and the resort moves on, so a run always
yields a best-effort view for every resort.
"""
from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from .config import AppConfig
from .http_client import HttpFetcher
from .logging import get_logger
from .models import AvalancheAssessment, ResortConfig, ResortView, Snapshot, Unavailable
from .resorts import ConfigError
from .scrapers import fetch_avalanche, fetch_forecast, fetch_live_map, fetch_schedule, fetch_status
from .services import ResortSources, build_resort_view

logger = get_logger(__name__)


class Stage(str, Enum):
    PENDING = "pending"
    FETCHING_WEATHER = "fetching_weather"
    FETCHING_STATUS = "fetching_status"
    FETCHING_LIVE_MAP = "fetching_live_map"
    FETCHING_SCHEDULE = "fetching_schedule"
    AGGREGATING = "aggregating"
    DONE = "done"


class ResortPipeline:
    """Drives one resort through its fetch stages and aggregation."""

    def __init__(
        self,
        resort: ResortConfig,
        fetcher: HttpFetcher,
        config: AppConfig,
        *,
        today: date,
        avalanche: Optional[AvalancheAssessment] = None,
        trace_id: str | None = None,
    ) -> None:
        self.resort = resort
        self.fetcher = fetcher
        self.config = config
        self.today = today
        self.avalanche = avalanche
        self.trace_id = trace_id or uuid.uuid4().hex
        self.sources = ResortSources()
        self.stage = Stage.PENDING

    def _advance(self, stage: Stage) -> None:
        self.stage = stage
        logger.debug("pipeline.stage", trace_id=self.trace_id, resort_id=self.resort.id, stage=stage.value)

    def _fetch(self, stage: Stage, source: str, fetch: Callable[[], object]) -> object:
        self._advance(stage)
        try:
            return fetch()
        except Exception as exc:
            # known source errors never reach here; fetchers degrade them
            logger.exception(
                "pipeline.stage_failed",
                trace_id=self.trace_id,
                resort_id=self.resort.id,
                stage=stage.value,
                error=str(exc),
            )
            return Unavailable(source, f"{type(exc).__name__}: {exc}")

    def run(self) -> ResortView:
        resort, fetcher, trace_id = self.resort, self.fetcher, self.trace_id
        logger.info("pipeline.resort.start", trace_id=trace_id, resort_id=resort.id)

        self.sources.weather = self._fetch(
            Stage.FETCHING_WEATHER,
            "forecast",
            lambda: fetch_forecast(
                resort,
                fetcher,
                config=self.config.forecast,
                timezone=self.config.timezone,
                trace_id=trace_id,
            ),
        )
        self.sources.status = self._fetch(
            Stage.FETCHING_STATUS,
            "status",
            lambda: fetch_status(resort, fetcher, trace_id=trace_id),
        )
        self.sources.live_map = self._fetch(
            Stage.FETCHING_LIVE_MAP,
            "live_map",
            lambda: fetch_live_map(resort, fetcher, selectors=self.config.live_map, trace_id=trace_id),
        )
        self.sources.schedule = self._fetch(
            Stage.FETCHING_SCHEDULE,
            "schedule",
            lambda: fetch_schedule(resort, fetcher, trace_id=trace_id),
        )

        self._advance(Stage.AGGREGATING)
        view = build_resort_view(resort, self.sources, today=self.today, avalanche=self.avalanche)

        self._advance(Stage.DONE)
        logger.info(
            "pipeline.resort.done",
            trace_id=trace_id,
            resort_id=resort.id,
            unavailable=list(view.unavailable),
        )
        return view


def local_today(tz_name: str, now: Optional[datetime] = None) -> date:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).date()


def run_snapshot(
    config: AppConfig,
    *,
    fetcher: Optional[HttpFetcher] = None,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
    resorts: Optional[Sequence[ResortConfig]] = None,
) -> Snapshot:
    """Fetch and aggregate every resort into a fresh :class:`Snapshot`.

    Raises :class:`ConfigError` when there are no resorts to process.
    Source failures never propagate; they show up as unknown fields.
    """

    resorts = tuple(config.resorts if resorts is None else resorts)
    if not resorts:
        raise ConfigError("no resorts configured")

    now = now or datetime.now(timezone.utc)
    today = today or local_today(config.timezone, now)
    run_id = uuid.uuid4().hex
    owns_fetcher = fetcher is None
    fetcher = fetcher or HttpFetcher(config=config.http)

    logger.info("pipeline.start", trace_id=run_id, resorts=len(resorts), today=today.isoformat())
    try:
        bulletin = fetch_avalanche(
            config.avalanche.url,
            fetcher,
            source=config.avalanche.source or None,
            trace_id=run_id,
        )
        avalanche = bulletin if isinstance(bulletin, AvalancheAssessment) else None

        def process(resort: ResortConfig) -> ResortView:
            return ResortPipeline(resort, fetcher, config, today=today, avalanche=avalanche).run()

        workers = max(1, min(int(config.http.max_workers), len(resorts)))
        if workers == 1:
            views = [process(resort) for resort in resorts]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                views = list(executor.map(process, resorts))
    finally:
        if owns_fetcher:
            fetcher.close()

    logger.info("pipeline.complete", trace_id=run_id, resorts=len(views))
    return Snapshot(generated_at=now, resorts=tuple(views), avalanche=avalanche)
