"""
Configuration management.

YAML loading with environment overlays, and the typed settings built from it.
"""

from filerelease.config.loader import Config, load_config
from filerelease.config.settings import ReleaseSettings, ScheduleSettings

__all__ = [
    "load_config",
    "Config",
    "ReleaseSettings",
    "ScheduleSettings",
]
