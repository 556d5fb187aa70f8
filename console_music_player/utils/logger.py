"""Logging configuration for Console Music Player."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import coloredlogs

# Module loggers (logging.getLogger(__name__)) inside the package propagate here
LOGGER_NAME = "console_music_player"

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def _file_handler(log_file: Path, max_size_mb: int, backup_count: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def _console_handler() -> logging.Handler:
    # stderr keeps log lines apart from the player's own output on stdout
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(coloredlogs.ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    return handler


def setup_logger(
    name: str = LOGGER_NAME,
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_size_mb: int = 10,
    backup_count: int = 5,
    console: bool = False
) -> logging.Logger:
    """Configure the player logger.

    Args:
        name: Logger name
        log_file: Path to the rotating log file (if None, no file logging)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_size_mb: Maximum log file size in MB before rotation
        backup_count: Number of rotated files to keep
        console: Also log to stderr (off while the interactive console
            owns the terminal)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()
    logger.propagate = False

    if log_file:
        logger.addHandler(_file_handler(log_file, max_size_mb, backup_count))

    if console:
        logger.addHandler(_console_handler())

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
