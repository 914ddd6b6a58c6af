"""
filerelease - releases staged export files into a publish directory.

Files are grouped into categories by filename prefix and moved on demand
(HTTP API or CLI) or on a per-category cron schedule.
"""

__version__ = "0.1.0"

# Core engine
from filerelease.core.categories import Category
from filerelease.core.discovery import list_by_prefix
from filerelease.core.relocator import move_all
from filerelease.core.result import MoveError, OperationResult

# Exceptions
from filerelease.exceptions import ConfigurationError, FileReleaseError, FileSystemError

# Triggers
from filerelease.service.releaser import FileReleaser, ScheduledRun

# Logging utilities
from filerelease.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    # Core
    "Category",
    "list_by_prefix",
    "move_all",
    "MoveError",
    "OperationResult",
    # Triggers
    "FileReleaser",
    "ScheduledRun",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "FileReleaseError",
    "ConfigurationError",
    "FileSystemError",
]
