"""Command line entry point: ``snow-monitor run`` and ``snow-monitor watch``."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from snow_monitor.config import AppConfig, load_config
from snow_monitor.logging import get_logger, setup_logging
from snow_monitor.pipeline import run_snapshot
from snow_monitor.rendering import render_html
from snow_monitor.resorts import ConfigError
from snow_monitor.scheduler import build_scheduler
from snow_monitor.storage import SnapshotStore

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_store(config: AppConfig, output: Optional[str] = None) -> SnapshotStore:
    return SnapshotStore(
        Path(output or config.output.directory),
        html_name=config.output.html_name,
        data_name=config.output.data_name,
    )


def refresh(config: AppConfig, store: SnapshotStore) -> None:
    """Run one full pass and publish it; nothing is written if the pass fails."""
    snapshot = run_snapshot(config)
    html = render_html(snapshot, timezone=config.timezone)
    store.publish(snapshot, html)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snow-monitor", description="Ski resort conditions snapshot")
    parser.add_argument("--config", help="YAML file merged over the packaged defaults")
    parser.add_argument("--output", help="directory for index.html and data.json")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("run", help="fetch every source once and publish the snapshot")
    sub.add_parser("watch", help="refresh the snapshot on the configured cron schedule")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parser().parse_args(argv)
    command = args.command or "run"

    try:
        config = load_config(config_path=args.config)
    except ConfigError as exc:
        setup_logging()
        logger.error("config.invalid", error=str(exc))
        return EXIT_CONFIG

    setup_logging(config.logging, force=True)
    store = build_store(config, args.output)

    if command == "watch":
        scheduler = build_scheduler(
            lambda: _safe_refresh(config, store),
            config.scheduler,
            timezone=config.timezone,
        )
        if scheduler is None:
            return EXIT_CONFIG
        _safe_refresh(config, store)
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("scheduler.stop")
        return EXIT_OK

    try:
        refresh(config, store)
    except ConfigError as exc:
        logger.error("config.invalid", error=str(exc))
        return EXIT_CONFIG
    except Exception as exc:
        logger.exception("snapshot.failed", error=str(exc))
        return EXIT_FAILED
    return EXIT_OK


def _safe_refresh(config: AppConfig, store: SnapshotStore) -> None:
    try:
        refresh(config, store)
    except Exception as exc:  # pragma: no cover - previous snapshot stays published
        logger.exception("snapshot.failed", error=str(exc))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
