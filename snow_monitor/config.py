from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

from snow_monitor.models import ResortConfig
from snow_monitor.resorts import ConfigError, parse_resorts

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config" / "defaults.yaml"
load_dotenv()

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SnowMonitor/1.0)"


def _bool_from_env(value: str | None) -> Optional[bool]:
    if value is None:
        return None
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return None


def _merge_dicts(base: Dict, overrides: Mapping) -> Dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            merged[key] = _merge_dicts(base[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path, *, required: bool = False) -> Dict:
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"config file {path} must contain a mapping")
    return dict(data)


@dataclass
class SchedulerConfig:
    cron: str = "*/15 * * * *"
    enabled: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = True


@dataclass
class HttpConfig:
    timeout: float = 15.0
    max_redirects: int = 5
    max_attempts: int = 2
    backoff_factor: float = 0.5
    max_workers: int = 4
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class ForecastConfig:
    url: str = "https://api.open-meteo.com/v1/forecast"
    past_days: int = 3
    forecast_days: int = 7


@dataclass
class AvalancheConfig:
    url: str = ""
    source: str = ""


@dataclass
class OutputConfig:
    directory: str = "docs"
    html_name: str = "index.html"
    data_name: str = "data.json"


@dataclass
class AppConfig:
    resorts: Tuple[ResortConfig, ...] = ()
    timezone: str = "Europe/Rome"
    http: HttpConfig = field(default_factory=HttpConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    avalanche: AvalancheConfig = field(default_factory=AvalancheConfig)
    live_map: Dict[str, str] = field(default_factory=dict)
    output: OutputConfig = field(default_factory=OutputConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _section(cls, data: Any, name: str):
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigError(f"{name} section must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"unknown keys in {name} section: {', '.join(sorted(unknown))}")
    return cls(**data)


def _apply_http_env(http_data: Dict[str, Any], env: Mapping[str, str]) -> None:
    prefix = "SNOWMONITOR_HTTP_"
    numeric = {f.name: f.type for f in fields(HttpConfig) if f.name != "user_agent"}
    for key, value in env.items():
        if not key.startswith(prefix):
            continue
        field_name = key.removeprefix(prefix).lower()
        if field_name not in numeric:
            continue
        try:
            number = float(value)
        except ValueError:
            continue
        http_data[field_name] = number if numeric[field_name] == "float" else int(number)


def load_config(*, config_path: str | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    env = dict(os.environ if env is None else env)
    data = _load_yaml(_DEFAULT_CONFIG_PATH)

    explicit_path = config_path or env.get("SNOWMONITOR_CONFIG_PATH")
    if explicit_path:
        data = _merge_dicts(data, _load_yaml(Path(explicit_path), required=True))

    scheduler_data = dict(data.get("scheduler") or {})
    cron_override = env.get("SNOWMONITOR_SCHEDULER_CRON")
    if cron_override:
        scheduler_data["cron"] = cron_override
    enabled_override = _bool_from_env(env.get("SNOWMONITOR_SCHEDULER_ENABLED"))
    if enabled_override is not None:
        scheduler_data["enabled"] = enabled_override

    logging_data = dict(data.get("logging") or {})
    level_override = env.get("SNOWMONITOR_LOG_LEVEL")
    if level_override:
        logging_data["level"] = level_override
    json_override = _bool_from_env(env.get("SNOWMONITOR_LOG_JSON"))
    if json_override is not None:
        logging_data["json"] = json_override

    output_data = dict(data.get("output") or {})
    output_override = env.get("SNOWMONITOR_OUTPUT_DIR")
    if output_override:
        output_data["directory"] = output_override

    http_data = dict(data.get("http") or {})
    _apply_http_env(http_data, env)

    live_map = data.get("live_map") or {}
    if not isinstance(live_map, Mapping):
        raise ConfigError("live_map section must be a mapping")

    return AppConfig(
        resorts=parse_resorts(data.get("resorts")),
        timezone=env.get("SNOWMONITOR_TIMEZONE") or data.get("timezone") or "Europe/Rome",
        http=_section(HttpConfig, http_data, "http"),
        forecast=_section(ForecastConfig, data.get("forecast"), "forecast"),
        avalanche=_section(AvalancheConfig, data.get("avalanche"), "avalanche"),
        live_map={str(key): str(value) for key, value in live_map.items()},
        output=_section(OutputConfig, output_data, "output"),
        scheduler=_section(SchedulerConfig, scheduler_data, "scheduler"),
        logging=_section(LoggingConfig, logging_data, "logging"),
    )


def _default_config() -> AppConfig:
    # a broken local file is reported by the CLI; importers get plain defaults
    try:
        return load_config()
    except ConfigError:
        return AppConfig()


app_config = _default_config()
