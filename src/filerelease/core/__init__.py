"""
Core discovery-and-move engine.
"""

from filerelease.core.categories import Category
from filerelease.core.discovery import list_by_prefix
from filerelease.core.relocator import ensure_directory, move_all
from filerelease.core.result import MoveError, OperationResult

__all__ = [
    "Category",
    "list_by_prefix",
    "move_all",
    "ensure_directory",
    "MoveError",
    "OperationResult",
]
