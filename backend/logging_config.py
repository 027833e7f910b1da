"""Centralized logging configuration."""

import logging
import re

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s  %(message)s"

# Libraries whose INFO output drowns out sync progress
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "apscheduler",
    "httpx",
    "urllib3",
    "plaid",
)

_ACCESS_TOKEN_RE = re.compile(r"access-(sandbox|development|production)-[0-9a-f-]+")


class AccessTokenFilter(logging.Filter):
    """Mask Plaid access tokens that end up in log messages or arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _ACCESS_TOKEN_RE.sub(r"access-\1-***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging() -> None:
    """Configure logging for the application.

    Sets the root logger level from settings.LOG_LEVEL, installs the
    access-token filter on the root handlers and turns noisy third-party
    loggers down to WARNING.
    """
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        level=getattr(logging, settings.LOG_LEVEL),
        force=True,
    )

    token_filter = AccessTokenFilter()
    for handler in logging.getLogger().handlers:
        handler.addFilter(token_filter)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
