"""
Centralized logging configuration for the TC PBN extractor.
Provides consistent logging with timestamp, function name, and log level.
"""

import logging
import inspect
import sys
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(funcName)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def _level_from_env(default):
    # TCPBN_LOG_LEVEL=DEBUG etc. Unknown names fall back to default.
    name = os.getenv('TCPBN_LOG_LEVEL', '').upper()
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else default


def setup_logger(name=None, level=logging.INFO, log_file=None):
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name (defaults to calling module name)
        level: Logging level (default: INFO, overridable with TCPBN_LOG_LEVEL)
        log_file: Optional file to log to (in addition to console)

    Returns:
        logger: Configured logger instance
    """
    if name is None:
        frame = inspect.currentframe().f_back
        name = frame.f_globals.get('__name__', 'tc_pbn')

    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    level = _level_from_env(level)
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    # stderr so that --stdout PBN output stays clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Prevent messages from being passed to ancestor loggers (avoids duplicates)
    logger.propagate = False

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
