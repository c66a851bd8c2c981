"""
Logging configuration for nhr

Every module logs under the "nhr" namespace: each request, redirect hop and
failure at DEBUG, failures again at ERROR. Nothing is printed unless the
caller attaches handlers, usually with setup_logging().
"""

import logging
import sys
from pathlib import Path


def setup_logging(log_file: Path | None = None, verbose: bool = True) -> logging.Logger:
    """
    Route the library's request trace to console and/or a file

    Args:
        log_file: Optional file receiving the full DEBUG trace (e.g., debug/requests.log)
        verbose: Whether to also print INFO and above to console

    Returns:
        Configured "nhr" logger
    """
    logger = logging.getLogger("nhr")
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers = []

    # Format: timestamp - module - level - message
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    if verbose:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get logger for a specific module

    Args:
        module_name: Name of the module (e.g., 'caller', 'response')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"nhr.{module_name}")
