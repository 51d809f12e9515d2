"""Utility modules."""

from .logging import setup_logging, get_logger
from .retry import retry_request

__all__ = [
    "setup_logging",
    "get_logger",
    "retry_request",
]
