"""
Logging configuration for galion.

Console output goes through rich; while the terminal UI owns the screen
only the file handler is installed.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "galion"

FILE_FORMAT = "%(asctime)s [%(levelname)-8s] %(threadName)s %(name)s: %(message)s"

# Map string level names to logging constants
LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_level(level: str | int) -> int:
    """
    Parse logging level from string or int.

    Defaults to INFO for unknown names.
    """
    if isinstance(level, int):
        return level
    return LEVEL_MAP.get(level.upper(), logging.INFO)


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    *,
    console: Optional[Console] = None,
    console_enabled: bool = True,
) -> logging.Logger:
    """
    Configure the galion logger.

    Args:
        level: Logging level as name or constant.
        log_file: Optional file receiving every record.
        console: Rich console for the console handler (stderr if not given).
        console_enabled: Install the rich console handler.

    Returns:
        The galion logger.
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Only clear this logger's handlers, setup may run more than once
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level_int = parse_level(level)
    # The file handler records everything down to DEBUG
    logger.setLevel(logging.DEBUG if log_file else level_int)
    logger.propagate = False

    if console_enabled:
        logger.addHandler(
            RichHandler(
                console=console or Console(stderr=True),
                level=level_int,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
                log_time_format="[%X]",
            )
        )

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
