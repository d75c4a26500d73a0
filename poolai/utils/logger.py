"""
Centralized logging setup using loguru.

Call setup_logger() once from an entry point (the evaluator, a game server
embedding the planner) and use get_logger() everywhere else. Library code
never configures handlers itself, so importing the planner stays silent
beyond loguru's default stderr sink.

Example usage:
    from poolai.utils.logger import setup_logger, get_logger
    setup_logger(console_level="INFO", log_to_file=False)
    log = get_logger()
    log.info("Planner ready")
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def setup_logger(
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_to_file: bool = True,
    log_dir: str = "logs",
    log_filename: str = "planner.log",
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str = "zip",
    format_string: Optional[str] = None,
    diagnose: bool = True,
) -> None:
    """
    Configure the loguru logger.

    Args:
        console_level: Logging level for console output
        file_level: Logging level for file output
        log_to_file: Whether to log to a file in addition to the console
        log_dir: Directory to store log files
        log_filename: Name of the log file
        rotation: When to rotate the log file (e.g., "10 MB", "1 day")
        retention: How long to keep old log files (e.g., "7 days")
        compression: Compression format for rotated logs (e.g., "zip")
        format_string: Custom format string for log messages
        diagnose: Whether to include variable values in tracebacks
    """
    logger.remove()

    if format_string is None:
        format_string = DEFAULT_FORMAT

    logger.add(
        sys.stderr,
        format=format_string,
        level=console_level,
        colorize=True,
        diagnose=diagnose,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / log_filename,
            format=format_string,
            level=file_level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            diagnose=diagnose,
        )

    logger.info(
        f"Logger initialized: console_level={console_level}, "
        f"file_level={file_level}, log_to_file={log_to_file}, "
        f"log_dir={log_dir}, log_filename={log_filename}"
    )


def get_logger():
    """Return the shared loguru logger instance."""
    return logger
