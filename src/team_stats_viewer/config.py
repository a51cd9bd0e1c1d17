from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from team_stats_viewer.domain.schedule import MonthOrder
from team_stats_viewer.ingest.stats_api_source import DEFAULT_BASE_URL


class ConfigError(Exception):
    """Raised when a configuration value cannot be used."""


_DEFAULTS: dict[str, object] = {
    "api": {
        "base_url": DEFAULT_BASE_URL,
        "timeout": 30.0,
        "connect_timeout": 10.0,
    },
    "display": {
        # Empty: show each game in the UTC offset the service sent.
        "timezone": "",
    },
    "schedule": {
        "order": "ascending",
    },
}


@dataclass(frozen=True)
class ApiSettings:
    base_url: str
    timeout: float
    connect_timeout: float


@dataclass(frozen=True)
class DisplaySettings:
    timezone: tzinfo | None
    schedule_order: MonthOrder


def create_config(
    yaml_path: str = "config.yaml",
    env_prefix: str = "TEAMSTATS",
    defaults: dict[str, object] | None = None,
    *,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file. A missing file is ignored.
        env_prefix: Prefix for environment variables, e.g. ``TEAMSTATS__API__BASE_URL``.
        defaults: Default configuration values.
        overrides: Values that win over every other layer (CLI flags).
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def _seconds(cfg: ConfigurationSet, key: str) -> float:
    raw = cfg[key]
    try:
        value = float(str(raw))
    except ValueError:
        raise ConfigError(f"{key} must be a number of seconds, got '{raw}'") from None
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def load_api_settings(cfg: ConfigurationSet | None = None) -> ApiSettings:
    if cfg is None:
        cfg = create_config()
    return ApiSettings(
        base_url=str(cfg["api.base_url"]),
        timeout=_seconds(cfg, "api.timeout"),
        connect_timeout=_seconds(cfg, "api.connect_timeout"),
    )


def parse_timezone(name: str) -> tzinfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Unknown time zone '{name}'") from None


def parse_month_order(raw: str) -> MonthOrder:
    try:
        return MonthOrder(raw.strip().lower())
    except ValueError:
        raise ConfigError(f"schedule.order must be 'ascending' or 'descending', got '{raw}'") from None


def load_display_settings(cfg: ConfigurationSet | None = None) -> DisplaySettings:
    if cfg is None:
        cfg = create_config()
    return DisplaySettings(
        timezone=parse_timezone(str(cfg["display.timezone"])),
        schedule_order=parse_month_order(str(cfg["schedule.order"])),
    )
