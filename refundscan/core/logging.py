"""Logging setup for scans, background cycles, and the CLI."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LEVEL = "INFO"

# HTTP client loggers used by the Gmail reader.
_CHATTY_LOGGERS = ("urllib3", "requests")


def resolve_level(level: str | None = None) -> str:
    """Pick the level from ``level``, then ``LOG_LEVEL``, then ``INFO``.

    Unknown names fall back to ``INFO`` with a warning instead of failing startup.
    """

    name = (level or os.getenv("LOG_LEVEL") or DEFAULT_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        logging.getLogger(__name__).warning("Unknown log level %r; using %s", name, DEFAULT_LEVEL)
        return DEFAULT_LEVEL
    return name


def configure_logging(level: str | None = None) -> str:
    """Initialize root logging once at startup and return the level in effect.

    HTTP client chatter is held at WARNING unless the run is at DEBUG.
    """

    resolved_level = resolve_level(level)
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT)
    client_level = logging.DEBUG if resolved_level == "DEBUG" else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(client_level)
    return resolved_level
