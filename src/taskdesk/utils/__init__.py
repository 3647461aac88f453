"""Shared utilities."""

from taskdesk.utils.logging import get_logger, sanitize_for_logging, setup_logging

__all__ = [
    "get_logger",
    "sanitize_for_logging",
    "setup_logging",
]
