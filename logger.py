"""
logger.py

Responsibility: Configures Python's standard logging for a command-line run.
Does NOT: decide what gets logged; every module logs through its own
logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import re
import sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Keep the first 6 characters of a bearer token, mask the rest
_BEARER_PATTERN = re.compile(r"(Bearer\s+)(.{0,6})([^\s\"']*)", re.IGNORECASE)

# Loggers of libraries that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")

# Handler installed by the last setup_logging() call
_handler: logging.Handler | None = None


class SensitiveFilter(logging.Filter):
    """
    Masks API tokens in log records.

    The message is rendered once, masked, and stored back on the record so
    handlers never see the raw token.
    """

    @staticmethod
    def mask(value: str) -> str:
        return _BEARER_PATTERN.sub(r"\1\2******", value)

    def filter(self, record: logging.LogRecord) -> bool:
        # Malformed calls are left for the handler to report via handleError.
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True
        masked = self.mask(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(verbose: bool = False, stream=None) -> logging.Handler:
    """
    Installs a single console handler on the root logger.

    Args:
        verbose: Log at DEBUG instead of INFO, including HTTP client chatter.
        stream: Where to write; defaults to sys.stderr.

    Returns:
        The installed handler.
    """
    global _handler

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(SensitiveFilter())

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    _handler = handler
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return handler
