"""Core systems - config, logging"""

from .config import Config
from .logging import setup_logging, setup_logging_from_config, get_logger

__all__ = ["Config", "setup_logging", "setup_logging_from_config", "get_logger"]
