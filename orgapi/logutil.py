"""Logging helpers: level parsing and request-id enrichment."""
from __future__ import annotations
import logging
import sys
from typing import Optional

from flask import g, has_request_context

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] request_id=%(request_id)s %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(level: str) -> int:
    """Map a level name (case-insensitive) to a logging level.

    Raises:
        ValueError: If the name is not debug, info, warn, warning or error
    """
    try:
        return _LEVELS[level.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown log level: {level}") from None


class RequestIdFilter(logging.Filter):
    """Adds `request_id` to every record.

    Inside a Flask request the id comes from ``g.request_id``; elsewhere the
    filter's default is used.
    """

    def __init__(self, default: str = "-"):
        super().__init__()
        self.default = default

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = None
        if has_request_context():
            request_id = g.get("request_id")
        record.request_id = request_id or self.default
        return True


def configure_logging(level: str = "debug", request_id: Optional[str] = None) -> logging.Handler:
    """Install a stderr handler on the root logger.

    Args:
        level: Level name accepted by parse_log_level
        request_id: Id logged outside Flask requests (e.g. from the CLI)

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter(request_id or "-"))

    root = logging.getLogger()
    root.setLevel(parse_log_level(level))
    root.addHandler(handler)
    return handler
