from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from snow_monitor import cli
from snow_monitor import config as config_module
from snow_monitor.config import AppConfig, SchedulerConfig
from snow_monitor.logging import SERVICE_NAME, add_service
from snow_monitor.models import ResortView, Snapshot
from snow_monitor.scheduler import REFRESH_JOB_ID, build_scheduler


def _snapshot(config, **_) -> Snapshot:
    views = tuple(ResortView(id=resort.id, name=resort.name, area=resort.area) for resort in config.resorts)
    return Snapshot(generated_at=datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc), resorts=views)


def test_run_publishes_snapshot(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "run_snapshot", _snapshot)

    exit_code = cli.main(["--output", str(tmp_path), "run"])

    assert exit_code == cli.EXIT_OK
    data = json.loads((tmp_path / "data.json").read_text(encoding="utf-8"))
    assert [resort["id"] for resort in data["resorts"]][0] == "passo-tonale"
    assert "Passo Tonale" in (tmp_path / "index.html").read_text(encoding="utf-8")


def test_failed_run_publishes_nothing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(config, **_):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "run_snapshot", explode)

    assert cli.main(["--output", str(tmp_path)]) == cli.EXIT_FAILED
    assert not (tmp_path / "data.json").exists()


def test_bad_config_exit_code(tmp_path: Path) -> None:
    assert cli.main(["--config", str(tmp_path / "missing.yaml"), "run"]) == cli.EXIT_CONFIG


def test_scheduler_registers_refresh_job() -> None:
    scheduler = build_scheduler(lambda: None, SchedulerConfig(cron="*/5 * * * *"), timezone="Europe/Rome")

    jobs = scheduler.get_jobs()
    assert [job.id for job in jobs] == [REFRESH_JOB_ID]
    assert str(jobs[0].trigger.timezone) == "Europe/Rome"


def test_disabled_scheduler() -> None:
    assert build_scheduler(lambda: None, SchedulerConfig(enabled=False)) is None


def test_bad_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SNOWMONITOR_CONFIG_PATH", str(tmp_path / "missing.yaml"))

    assert config_module._default_config() == AppConfig()
    assert cli.main(["--output", str(tmp_path), "run"]) == cli.EXIT_CONFIG
    assert not (tmp_path / "data.json").exists()


def test_log_events_carry_service_name() -> None:
    assert add_service(None, "info", {"event": "snapshot.published"})["service"] == SERVICE_NAME
    assert add_service(None, "info", {"service": "other"})["service"] == "other"
