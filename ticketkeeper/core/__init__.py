"""
Core module for ticketkeeper
Contains shared infrastructure: config, logger, database, exceptions
"""

from .config import Config, get_config, load_config
from .exceptions import TicketKeeperError
from .logger import get_logger, setup_logging

__all__ = [
    'Config',
    'get_config',
    'load_config',
    'get_logger',
    'setup_logging',
    'TicketKeeperError',
]
