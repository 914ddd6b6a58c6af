"""
Outcome of one relocation pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class MoveError:
    """A single file that could not be moved."""

    file_name: str
    error_message: str


@dataclass(frozen=True)
class OperationResult:
    """
    Partial-success report of a relocation pass.

    Successes are kept in input order, failures in encounter order. A file
    name never appears in both sequences, and ``attempted`` equals the number
    of files handed to the relocator.
    """

    successful_files: tuple[str, ...] = field(default_factory=tuple)
    errors: tuple[MoveError, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> OperationResult:
        return cls()

    @property
    def success_count(self) -> int:
        return len(self.successful_files)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def attempted(self) -> int:
        return self.success_count + self.error_count

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def is_fully_successful(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view used by the CLI and the logs."""
        return {
            "successful_files": list(self.successful_files),
            "errors": [{"file_name": e.file_name, "error_message": e.error_message} for e in self.errors],
            "success_count": self.success_count,
            "error_count": self.error_count,
        }
