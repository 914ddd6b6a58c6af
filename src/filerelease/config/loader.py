"""
Configuration file loading.

Loads ``config.yaml`` from the project directory, overlays
``config.{env}.yaml`` when an environment is given, then substitutes
``${VAR_NAME}`` environment variables and the ``{env}`` placeholder.
"""

import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from filerelease.exceptions import ConfigurationError

CONFIG_FILENAME = "config.yaml"

_ENV_VAR_PATTERN = re.compile(r"\${([^}]+)}")


class Config:
    """Configuration container with dict-like and dot-notation access."""

    def __init__(self, data: dict[str, Any], project_dir: Path | None = None):
        self.data = data
        self.project_dir = project_dir

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (``filesystem.staging_dir``)."""
        value: Any = self.data
        for k in key.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(k)
            if value is None:
                return default
        return value

    def section(self, key: str) -> dict[str, Any]:
        """
        Return a top-level section as a dict (empty if absent).

        Raises:
            ConfigurationError: If the section exists but is not a mapping
        """
        value = self.data.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ConfigurationError(
                f"Configuration '{key}' must be a mapping, got {type(value).__name__}",
                details={"section": key},
            )
        return value

    def __getitem__(self, key: str) -> Any:
        if "." in key:
            value = self.get(key)
            if value is None:
                raise KeyError(f"Config key '{key}' not found")
            return value
        if key in self.data:
            value = self.data[key]
            if isinstance(value, dict):
                return Config(value, self.project_dir)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        value: Any = self.data
        for k in key.split("."):
            if not isinstance(value, dict) or k not in value:
                return False
            value = value[k]
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def keys(self):
        return self.data.keys()

    def items(self):
        return self.data.items()


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load filerelease configuration.

    Args:
        project_path: Directory holding ``config.yaml`` (default: current directory)
        env: Environment name; ``config.{env}.yaml`` is merged over the base file

    Returns:
        Config with merged and resolved data

    Raises:
        ConfigurationError: If the file is missing, unreadable, or not valid YAML
    """
    if project_path is None:
        project_path = Path.cwd()
    project_path = Path(project_path)

    base_config_path = project_path / CONFIG_FILENAME
    if not base_config_path.is_file():
        raise ConfigurationError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a {CONFIG_FILENAME} file in your project root",
            details={"path": str(base_config_path)},
        )

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = project_path / f"config.{env}.yaml"
        if env_config_path.is_file():
            _merge_dict(config_data, _read_yaml(env_config_path))

    config_data = _resolve_value(config_data, env or "dev")

    return Config(config_data, project_dir=project_path)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            raise ConfigurationError(
                f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                f"  {e}\n"
                f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes",
                details={"path": str(path)},
            ) from e
        raise ConfigurationError(f"Error parsing {path.name}: {e}", details={"path": str(path)}) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{path.name} must contain a mapping, got {type(data).__name__}",
            details={"path": str(path)},
        )
    return data


def _merge_dict(base: dict, override: dict) -> None:
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value


def _resolve_value(value: Any, env: str) -> Any:
    """Substitute ``${VAR}`` (left as-is when unset) and ``{env}`` in every string."""
    if isinstance(value, dict):
        return {k: _resolve_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_value(item, env) for item in value]
    if isinstance(value, str):
        result = _ENV_VAR_PATTERN.sub(lambda m: os.getenv(m.group(1), m.group(0)), value)
        return result.replace("{env}", env)
    return value
