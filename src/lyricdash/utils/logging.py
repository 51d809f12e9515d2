"""Logging configuration for lyricdash."""

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    console: bool = True,
) -> logging.Logger:
    """Set up logging configuration.

    The dashboard owns the terminal while it runs, so callers pass
    ``console=False`` there and rely on ``log_file`` instead.
    """

    # Suppress noisy third-party library logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger("lyricdash")
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers.clear()

    if verbose:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger(name: str = "lyricdash") -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
