"""
Logging setup for neatdrive applications.

The library logs through loguru's global logger and never configures sinks
itself; applications (and the bundled examples) call 'setup_logger()' once.
"""

import sys

from loguru import logger


def setup_logger(level: str = "INFO", log_file: str | None = None, enable_colors: bool = True) -> None:
    """
    Configure console output, and optionally a log file.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of a file that also receives all messages, or None
        enable_colors: Whether to enable colored console output
    """
    # Remove any existing handlers to avoid duplicates
    logger.remove()

    colorize = enable_colors and sys.stderr.isatty()
    if colorize:
        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<blue>{function}</blue> | "
            "<level>{message}</level>"
        )
    else:
        console_format = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} | {message}"

    logger.add(sys.stderr, level=level, format=console_format, colorize=colorize)

    if log_file is not None:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
            encoding="utf-8",
        )

    logger.debug("Logger configured at level {}", level)
