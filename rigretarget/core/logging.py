"""Logging system with colored output and file logging"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


ROOT_LOGGER_NAME = "rigretarget"


class ColoredFormatter(logging.Formatter):
    """Colored log output for terminal."""
    
    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    
    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so the file handler never sees escape codes
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        record.name = f"\033[34m{record.name}{self.RESET}"
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs"
) -> logging.Logger:
    """
    Setup package-wide logging.
    
    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file name (a timestamp is appended)
        log_dir: Directory for log files
    
    Returns:
        Package root logger
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    
    if root_logger.handlers:
        return root_logger
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_format = ColoredFormatter(
        "%(asctime)s │ %(levelname)-8s │ %(name)-24s │ %(message)s",
        datefmt="%H:%M:%S"
    )
    console_handler.setFormatter(console_format)
    root_logger.addHandler(console_handler)
    
    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = log_path / f"{log_file}_{timestamp}.log"
        
        file_handler = logging.FileHandler(file_path)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_format)
        root_logger.addHandler(file_handler)
        
        root_logger.info(f"Logging to file: {file_path}")
    
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger under the rigretarget namespace.
    
    Args:
        name: Module name (e.g., "algebra.quat", "pose", "automap")
    
    Returns:
        Logger instance
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging_from_config(config, level: Optional[str] = None) -> logging.Logger:
    """
    Setup logging from the ``app`` and ``logging`` sections of a Config.
    
    ``logging.log_file: true`` logs to ``<log_dir>/rigretarget_<timestamp>.log``.
    ``logging.levels`` maps subsystem names (``automap``, ``retarget.additive``)
    to their own levels, e.g. to trace the auto-mapper without flooding the
    console with pose debug output.
    
    Args:
        config: Loaded Config
        level: Overrides ``app.log_level`` (e.g. from ``--debug``)
    
    Returns:
        Package root logger
    """
    section = config.logging or {}
    
    log_file = section.get("log_file")
    if log_file is True:
        log_file = ROOT_LOGGER_NAME
    
    root_logger = setup_logging(
        level=level or config.get("app.log_level", "INFO"),
        log_file=log_file or None,
        log_dir=section.get("log_dir", "logs"),
    )
    
    for name, sub_level in (section.get("levels") or {}).items():
        get_logger(name).setLevel(getattr(logging, str(sub_level).upper()))
    
    return root_logger
