"""Logging configuration and utilities."""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import LoggingConfig


DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config: Optional[LoggingConfig] = None, name: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with console and rotating file handlers.

    Args:
        config: Logging settings (defaults are used when omitted)
        name: Logger name (defaults to root logger)

    Returns:
        Configured logger instance
    """
    config = config or LoggingConfig()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.level))

    # Clear existing handlers
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    simple_formatter = logging.Formatter('%(levelname)s - %(name)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, config.level))
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    if config.file_enabled:
        log_path = Path(config.directory)
        log_path.mkdir(parents=True, exist_ok=True)

        date = datetime.now().strftime('%Y-%m-%d')
        prefix = name or 'ticketkeeper'

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{prefix}_{date}.log",
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

        # Separate file for errors only
        error_handler = logging.handlers.RotatingFileHandler(
            log_path / f"{prefix}_errors_{date}.log",
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        logger.addHandler(error_handler)

    setup_discord_logger()
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after it."""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(f"ticketkeeper.{self.__class__.__name__}")


def setup_discord_logger():
    """Set up Discord.py's logger to reduce noise."""
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("discord.gateway").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
