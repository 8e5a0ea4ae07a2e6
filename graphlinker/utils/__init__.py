"""Utility modules."""

from graphlinker.utils.logger import bind_context, clear_context, configure_logging, get_logger, request_context

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
    "request_context",
]
