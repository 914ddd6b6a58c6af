"""
filerelease exception hierarchy.

All domain-specific exceptions inherit from FileReleaseError, so callers can
catch any framework error with a single base class while the triggers still
handle the filesystem faults separately.

Hierarchy::

    FileReleaseError
    ├── ConfigurationError   - config loading, parsing, validation
    └── FileSystemError      - staging dir unusable, publish dir not creatable

Per-file move failures are not exceptions: they are recorded in the
OperationResult returned by the relocator.
"""

from __future__ import annotations

from pathlib import Path


class FileReleaseError(Exception):
    """Base exception for all filerelease errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(FileReleaseError):
    """Raised when configuration loading, parsing, or validation fails."""


# --- Filesystem --------------------------------------------------------------


class FileSystemError(FileReleaseError):
    """Raised when a directory-level fault aborts a whole discovery or move call.

    Covers a staging path that is not a directory, a staging directory that
    cannot be listed, and a publish directory that cannot be created.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        prefix: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        details: dict = {}
        if path is not None:
            details["path"] = str(path)
        if prefix is not None:
            details["prefix"] = prefix
        super().__init__(message, details=details)
        self.path = Path(path) if path is not None else None
        self.prefix = prefix
        if cause is not None:
            self.__cause__ = cause
