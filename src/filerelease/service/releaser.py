"""
Trigger adapters around the discovery-and-move engine.

``FileReleaser.release`` is the on-demand path used by the HTTP API and the
CLI: it always runs discovery and the move, and lets a FileSystemError reach
the caller. ``FileReleaser.run_scheduled`` is the path used by the scheduler:
it skips the move when nothing is staged and never raises.

Releases of the same category are serialized inside one process. A scheduled
firing that finds its category busy is skipped; the next firing picks the
files up.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from filerelease.config.settings import ReleaseSettings
from filerelease.core.categories import Category
from filerelease.core.discovery import list_by_prefix
from filerelease.core.relocator import move_all
from filerelease.core.result import OperationResult
from filerelease.observability.structured_logging import log_context
from filerelease.utils.logging import get_logger

logger = get_logger("filerelease.service.releaser")

MANUAL_OPERATION = "manual_file_export"


@dataclass(frozen=True)
class ScheduledRun:
    """What happened on one scheduled firing."""

    category: Category
    status: str  # "completed" | "no_files" | "skipped" | "failed"
    started_at: datetime
    result: OperationResult | None = None
    error: str | None = None


class FileReleaser:
    """Releases staged files of a category into the publish directory."""

    def __init__(self, settings: ReleaseSettings):
        self.settings = settings
        self._locks: dict[Category, threading.Lock] = {category: threading.Lock() for category in Category}

    @property
    def staging_dir(self) -> Path:
        return self.settings.staging_dir

    @property
    def publish_dir(self) -> Path:
        return self.settings.publish_dir

    def list_files(self, category: Category) -> list[Path]:
        return list_by_prefix(self.staging_dir, category.prefix)

    def move_files(self, paths: Iterable[Path]) -> OperationResult:
        return move_all(paths, self.publish_dir)

    def is_running(self, category: Category) -> bool:
        return self._locks[category].locked()

    def release(self, category: Category, *, correlation_id: str | None = None) -> OperationResult:
        """
        Move every staged file of ``category`` now.

        Waits for a release of the same category that is already in progress.

        Raises:
            FileSystemError: If the staging directory is unusable or the
                publish directory cannot be created
        """
        with log_context(correlation_id, operation=MANUAL_OPERATION, category=category.name):
            with self._locks[category]:
                logger.info(f"Manual export triggered for category={category.name}")
                files = self.list_files(category)
                result = self.move_files(files)
                logger.info(
                    f"Manual export completed for category={category.name} "
                    f"successful={result.success_count} errors={result.error_count}"
                )
                return result

    def run_scheduled(self, category: Category) -> ScheduledRun:
        """
        Scheduled release of ``category``. Never raises.

        Per-file failures and run-level failures are logged; the outcome is
        returned for scheduler bookkeeping.
        """
        started_at = datetime.now(UTC)
        with log_context(operation=f"EXPORT_{category.name}", category=category.name):
            lock = self._locks[category]
            if not lock.acquire(blocking=False):
                logger.warning("Skipping scheduled processing, a release of this category is already running")
                return ScheduledRun(category, "skipped", started_at)

            try:
                logger.info("Starting scheduled processing")

                files = self.list_files(category)
                if not files:
                    logger.info("No files found")
                    return ScheduledRun(category, "no_files", started_at)

                result = self.move_files(files)
                logger.info(
                    f"Completed scheduled processing successful={result.success_count} errors={result.error_count}"
                )
                for error in result.errors:
                    logger.warning(f"File move error: fileName={error.file_name} error={error.error_message}")
                return ScheduledRun(category, "completed", started_at, result=result)
            except Exception as e:
                logger.error(f"Failed scheduled processing error={e}", exc_info=True)
                return ScheduledRun(category, "failed", started_at, error=str(e))
            finally:
                lock.release()
