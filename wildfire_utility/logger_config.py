#!/usr/bin/env python3
"""
Logging configuration for the WildFire utility
stdout carries results, so the console gets short records on stderr; the
optional log file keeps the full timestamped format.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'

# Libraries that log every connection at INFO/DEBUG
NOISY_LOGGERS = ("urllib3",)


def setup_logging(log_level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for a CLI run

    Args:
        log_level: Logging level name; unknown names fall back to WARNING
        log_file: Optional path for a rotating log file (10MB x 5)

    Returns:
        The root logger
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)

    # Connection chatter only when explicitly debugging
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)

    # urllib3 InsecureRequestWarning etc. when WILDFIRE_VERIFY_TLS=false
    logging.captureWarnings(True)

    return root_logger
