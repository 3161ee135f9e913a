"""Logger configuration for the session timeline engine."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> "
    "<dim>{extra}</dim>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def _engine_only(record: dict) -> bool:
    return record["name"].startswith("session_timeline")


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str | None = "zip",
    *,
    engine_only: bool = False,
    json_file: bool = False,
) -> None:
    """Configure loguru with a console sink and an optional rotating file sink.

    The engine never calls this on import; a host application calls it once at
    startup, usually with ``settings.log_level``.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only console logging.
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
        compression: Archive format applied when a log file is closed (None keeps plain text)
        engine_only: Drop records that do not come from ``session_timeline``
        json_file: Write the file sink as one JSON object per line
    """
    logger.remove()

    record_filter = _engine_only if engine_only else None

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=True,
        filter=record_filter,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            filter=record_filter,
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=json_file,
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Timeline logger initialized with level={level}", log_file=log_file)
