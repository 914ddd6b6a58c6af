"""
Logging configuration for filerelease.

Console output goes through Rich when it is requested and installed, otherwise
through a plain stream handler using the human-readable formatter. An optional
file handler writes every record with full exception detail.
"""

import logging
import sys
from pathlib import Path
from typing import Any

try:
    import importlib.util

    RICH_AVAILABLE = importlib.util.find_spec("rich.logging") is not None
except Exception:
    RICH_AVAILABLE = False

ROOT_LOGGER_NAME = "filerelease"


class FileFormatter(logging.Formatter):
    """Formatter for file logs - clean and parseable."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s [%(cid)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with the active correlation id ('-' outside a context)."""
        from filerelease.observability.structured_logging import get_correlation_id

        record.cid = get_correlation_id() or "-"
        return super().format(record)


# Map string level names to logging constants
LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(level: str | int) -> int:
    """
    Parse logging level from string or int.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level_upper = level.upper()
        if level_upper in LEVEL_MAP:
            return LEVEL_MAP[level_upper]
    return logging.INFO


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    json_format: bool = False,
    file_mode: str = "a",
    console_enabled: bool = True,
    use_rich: bool = True,
    stream: Any = None,
) -> logging.Logger:
    """
    Setup logging for the ``filerelease`` logger tree.

    Args:
        level: Logging level as string (DEBUG, INFO, etc.) or int (default: INFO)
        log_file: Optional file path to write logs to (default: None, console only)
        json_format: Emit JSON lines on the console instead of human-readable text
        file_mode: 'a' to append to the log file, 'w' to overwrite
        console_enabled: Whether to attach a console handler at all
        use_rich: Use RichHandler for the console when available (ignored for JSON)
        stream: Console stream for the non-Rich handler (default: stderr)

    Returns:
        The configured ``filerelease`` logger
    """
    from filerelease.observability.structured_logging import HumanReadableFormatter, StructuredFormatter

    logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Only clear handlers from this logger, not root or child loggers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    level_int = _parse_level(level)
    logger.setLevel(level_int)

    if console_enabled:
        if use_rich and RICH_AVAILABLE and not json_format:
            from rich.logging import RichHandler

            rich_handler = RichHandler(
                level=level_int,
                show_time=True,
                show_path=False,
                rich_tracebacks=True,
                tracebacks_show_locals=False,
                log_time_format="[%X]",
            )
            logger.addHandler(rich_handler)
        else:
            console_handler = logging.StreamHandler(stream or sys.stderr)
            console_handler.setLevel(level_int)
            formatter: logging.Formatter = StructuredFormatter() if json_format else HumanReadableFormatter()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode=file_mode)
        # File captures everything the logger lets through
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        logger.addHandler(file_handler)

    if not logger.handlers:
        # Keeps warnings off the lastResort stderr handler when output is disabled
        logger.addHandler(logging.NullHandler())

    logger.propagate = True

    return logger


def setup_logging_from_config(
    config: dict[str, Any],
    project_dir: Path | None = None,
    use_rich: bool = True,
    console_enabled: bool | None = None,
) -> logging.Logger:
    """
    Setup logging from the ``logging`` section of the configuration.

    Recognised keys: ``level``, ``json``, ``file``, ``file_enabled``,
    ``file_mode``, ``console_enabled``, ``console_type`` ("rich" or "plain").
    A relative ``file`` is resolved against ``project_dir``. A non-None
    ``console_enabled`` argument overrides the configured value.
    """
    logging_config = config.get("logging") or {}

    level = logging_config.get("level", logging.INFO)
    json_format = bool(logging_config.get("json", False))
    file_mode = logging_config.get("file_mode", "a")
    if console_enabled is None:
        console_enabled = logging_config.get("console_enabled", True)
    console_type = logging_config.get("console_type", "rich")

    log_file = None
    if logging_config.get("file_enabled", True):
        log_file = logging_config.get("file")

    if log_file and project_dir:
        log_file = Path(log_file)
        if not log_file.is_absolute():
            log_file = project_dir / log_file

    return setup_logging(
        level=level,
        log_file=log_file,
        json_format=json_format,
        file_mode=file_mode,
        console_enabled=console_enabled,
        use_rich=use_rich and console_type == "rich",
    )


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name, normally a dotted child of ``filerelease``

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    # Child loggers hand their records to the filerelease handlers
    logger.propagate = True
    return logger
