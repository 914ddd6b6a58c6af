"""
Candidate file discovery in the staging directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from filerelease.exceptions import FileSystemError
from filerelease.utils.logging import get_logger

logger = get_logger("filerelease.core.discovery")


def list_by_prefix(staging_dir: str | Path, prefix: str) -> list[Path]:
    """
    List the plain files directly inside ``staging_dir`` whose name starts with ``prefix``.

    Only immediate children are considered. Directories, symbolic links and
    special files are skipped; the prefix comparison is case-sensitive. The
    order of the returned paths follows the directory listing and must not be
    relied upon.

    Args:
        staging_dir: Directory to scan
        prefix: Literal filename prefix, must be non-empty

    Returns:
        Matching file paths; empty if the staging directory does not exist

    Raises:
        ValueError: If ``prefix`` is empty
        FileSystemError: If the path is not a directory or cannot be listed
    """
    if not prefix:
        raise ValueError("prefix must be a non-empty string")

    staging_path = Path(staging_dir)

    try:
        if not staging_path.exists():
            logger.warning(f"staging directory does not exist path={staging_path}")
            return []

        if not staging_path.is_dir():
            raise FileSystemError(
                f"Failed to list files with prefix: {prefix} - path is not a directory: {staging_path}",
                path=staging_path,
                prefix=prefix,
            )

        with os.scandir(staging_path) as entries:
            matching = [
                Path(entry.path)
                for entry in entries
                if entry.name.startswith(prefix) and entry.is_file(follow_symlinks=False)
            ]
    except OSError as e:
        logger.error(f"failed to list files prefix={prefix} error={e}", exc_info=True)
        raise FileSystemError(
            f"Failed to list files with prefix: {prefix}",
            path=staging_path,
            prefix=prefix,
            cause=e,
        ) from e

    logger.info(f"prefix={prefix} count={len(matching)}")
    return matching
