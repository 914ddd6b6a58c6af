"""
Typed settings derived from the loaded configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from filerelease.config.loader import Config
from filerelease.core.categories import Category
from filerelease.exceptions import ConfigurationError
from filerelease.service.cron_parser import CronParseError, parse_cron

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class ScheduleSettings:
    """Cron schedule of one category."""

    category: Category
    cron: str
    timezone: str = DEFAULT_TIMEZONE
    enabled: bool = True

    def as_dict(self) -> dict[str, Any]:
        return {"cron": self.cron, "timezone": self.timezone, "enabled": self.enabled}


@dataclass(frozen=True)
class ReleaseSettings:
    """Everything the releaser, scheduler and HTTP service need."""

    staging_dir: Path
    publish_dir: Path
    schedules: dict[Category, ScheduleSettings] = field(default_factory=dict)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_config(cls, config: Config) -> ReleaseSettings:
        """
        Build settings from a Config.

        Raises:
            ConfigurationError: On missing directories, malformed sections,
                unknown categories or invalid cron expressions
        """
        filesystem = config.section("filesystem")
        staging_dir = _require_path(filesystem, "staging_dir", config.project_dir)
        publish_dir = _require_path(filesystem, "publish_dir", config.project_dir)

        service = config.section("service")
        try:
            port = int(service.get("port", DEFAULT_PORT))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"service.port must be an integer, got {service.get('port')!r}") from e

        return cls(
            staging_dir=staging_dir,
            publish_dir=publish_dir,
            schedules=_parse_schedules(config.section("scheduling")),
            host=str(service.get("host", DEFAULT_HOST)),
            port=port,
        )


def _require_path(section: dict[str, Any], key: str, project_dir: Path | None) -> Path:
    value = section.get(key)
    if not value:
        raise ConfigurationError(
            f"Missing required setting 'filesystem.{key}'",
            details={"setting": f"filesystem.{key}"},
        )
    path = Path(str(value)).expanduser()
    if not path.is_absolute() and project_dir is not None:
        path = project_dir / path
    return path


def _parse_schedules(scheduling: dict[str, Any]) -> dict[Category, ScheduleSettings]:
    default_tz = str(scheduling.get("timezone") or DEFAULT_TIMEZONE)
    schedules: dict[Category, ScheduleSettings] = {}

    for key, value in scheduling.items():
        if key == "timezone":
            continue
        try:
            category = Category.parse(key)
        except ValueError as e:
            raise ConfigurationError(str(e), details={"setting": f"scheduling.{key}"}) from e

        # Shorthand: `redemption: "0 */5 * * * *"`
        if isinstance(value, str):
            value = {"cron": value}
        if not isinstance(value, dict) or not value.get("cron"):
            raise ConfigurationError(
                f"scheduling.{key} must be a cron string or a mapping with a 'cron' key",
                details={"setting": f"scheduling.{key}"},
            )

        cron = str(value["cron"])
        timezone = str(value.get("timezone") or default_tz)
        try:
            parse_cron(cron, timezone=timezone)
        except CronParseError as e:
            raise ConfigurationError(
                f"Invalid cron for scheduling.{key}: {e}",
                details={"setting": f"scheduling.{key}", "cron": cron},
            ) from e

        schedules[category] = ScheduleSettings(
            category=category,
            cron=cron,
            timezone=timezone,
            enabled=_parse_bool(value.get("enabled", True), f"scheduling.{key}.enabled"),
        )

    return schedules


def _parse_bool(value: Any, setting: str) -> bool:
    """Accept YAML booleans and the strings left behind by ``${VAR}`` substitution."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise ConfigurationError(f"{setting} must be a boolean, got {value!r}", details={"setting": setting})
