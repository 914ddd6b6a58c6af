"""
Relocation of discovered files into the publish directory.
"""

from __future__ import annotations

import errno
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from filerelease.core.result import MoveError, OperationResult
from filerelease.exceptions import FileSystemError
from filerelease.utils.logging import get_logger

logger = get_logger("filerelease.core.relocator")


def ensure_directory(path: str | Path) -> Path:
    """
    Create ``path`` (with missing parents) unless it already exists.

    Raises:
        FileSystemError: If the directory cannot be created
    """
    directory = Path(path)
    if directory.is_dir():
        return directory
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"failed to create directory path={directory} error={e}", exc_info=True)
        raise FileSystemError(
            f"Failed to create publish directory: {directory}",
            path=directory,
            cause=e,
        ) from e
    logger.info(f"created directory path={directory}")
    return directory


def _move_file(source: Path, destination: Path) -> None:
    """Rename ``source`` over ``destination``, copying then deleting across devices."""
    try:
        os.replace(source, destination)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        shutil.copy2(source, destination)
        source.unlink()


def move_all(files: Iterable[str | Path], publish_dir: str | Path) -> OperationResult:
    """
    Move every file in ``files`` into ``publish_dir``, keeping its base name.

    An existing file of the same name in the publish directory is overwritten.
    A failure on one file is recorded and the remaining files are still
    attempted.

    Args:
        files: Candidate file paths, usually from ``list_by_prefix``
        publish_dir: Destination directory, created if missing

    Returns:
        OperationResult with one entry per input file

    Raises:
        FileSystemError: If the publish directory cannot be created; no file
            is touched in that case
    """
    destination_dir = ensure_directory(publish_dir)

    moved: list[str] = []
    failed: list[MoveError] = []

    for source in files:
        source_path = Path(source)
        file_name = source_path.name
        destination = destination_dir / file_name

        try:
            _move_file(source_path, destination)
        except OSError as e:
            failed.append(MoveError(file_name=file_name, error_message=str(e)))
            logger.error(f"failed to move file filename={file_name} error={e}")
            continue

        moved.append(file_name)
        logger.info(f"filename={file_name} from={source_path} to={destination}")

    if moved or failed:
        result = OperationResult(successful_files=tuple(moved), errors=tuple(failed))
    else:
        result = OperationResult.empty()
    logger.info(f"moved={result.success_count} errors={result.error_count}")
    return result
