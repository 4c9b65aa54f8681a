"""
Logging configuration for the time clock service
"""
import logging
import os
from logging.handlers import RotatingFileHandler

_ROOT_LOGGER = "rome_timeclock"


def setup_logging(level="INFO", log_file=None):
    """
    Attach console and (optionally) rotating file handlers to the package logger

    Args:
        level: Logging level name or number
        log_file: Path to log file, or None for console only

    Returns:
        The package logger
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)

    # Avoid duplicate handlers when the app factory runs more than once
    if logger.handlers:
        return logger

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # 10MB per file, keep 5 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            log_file.replace('.log', '.error.log'),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        logger.addHandler(error_handler)

    return logger


def get_logger(name):
    """
    Get a module logger under the package namespace

    Args:
        name: Usually __name__ (already inside rome_timeclock)
    """
    if not name.startswith(_ROOT_LOGGER):
        name = f"{_ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
