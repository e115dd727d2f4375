"""
Logging Setup

Configures the root logger once per process from LOG_LEVEL.
Portal modules log through logging.getLogger(__name__); the driver and
transport libraries underneath them are held at WARNING so request-level
chatter (pymongo heartbeats, urllib3 connection pool, engine.io polling)
does not drown out application messages at DEBUG.
"""

import logging

from portal.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

NOISY_LOGGERS = ("pymongo", "urllib3", "engineio", "socketio", "multipart")

_configured = False


def resolve_level(name: str) -> int:
    """'debug' -> logging.DEBUG; unknown names fall back to INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    settings = get_settings()
    logging.basicConfig(level=resolve_level(settings.log_level), format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True
