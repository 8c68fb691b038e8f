"""Logging configuration and utilities."""

import os
import sys
import logging
from typing import Optional


def setup_logging(verbosity: int = 0, log_file: Optional[str] = None) -> logging.Logger:
    """Configure logging to stderr and, optionally, a file.

    Stdout is reserved for the report, so console logs go to stderr.

    Args:
        verbosity: 0 for warnings only, 1 for info, 2 or more for debug
        log_file: Optional path of a log file (always written at debug level)

    Returns:
        Configured logger instance
    """
    if verbosity >= 2:
        console_level = logging.DEBUG
    elif verbosity == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG,
        handlers=handlers,
        force=True  # Reset any existing configuration
    )

    logger = logging.getLogger('gitboard')
    if log_file:
        logger.info(f"Log file: {log_file}")

    return logger
