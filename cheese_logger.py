"""
CHEESE Logger - project-wide logging setup
===========================================

One stderr handler on the "cheese" logger, level overridable through the
CHEESE_LOG_LEVEL environment variable. Modules log through children of
this logger (cheese.encoder, cheese.decoder, ...). Pixel data is never
logged, only dimensions and byte counts.
"""

import logging
import os
import sys

LOGGER_NAME = "cheese"
LOG_LEVEL_ENV = "CHEESE_LOG_LEVEL"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setup_logger(level: int = logging.WARNING, name: str = LOGGER_NAME) -> logging.Logger:
    """
    Create or update the project logger.

    Safe to call repeatedly: the env override is re-read every time and the
    existing stderr handler is reused instead of stacking a new one.
    """
    logger = logging.getLogger(name)

    env_level = (os.getenv(LOG_LEVEL_ENV) or "").strip().lower()
    if env_level:
        level = _LEVELS.get(env_level, level)
    logger.setLevel(level)

    # sys.stderr may have been swapped since the last call (test capture,
    # CLI redirection); retarget our handler rather than adding another.
    stream_handler = None
    for h in logger.handlers:
        if getattr(h, "_cheese_handler", False):
            stream_handler = h
            break

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        stream_handler._cheese_handler = True
        logger.addHandler(stream_handler)
    elif stream_handler.stream is not sys.stderr:
        stream_handler.stream = sys.stderr

    stream_handler.setFormatter(logging.Formatter(
        fmt="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    ))

    logger.propagate = False
    return logger


def get_logger(name: str = None) -> logging.Logger:
    base = logging.getLogger(LOGGER_NAME)
    if not base.handlers:
        base = setup_logger()
    return base if not name else base.getChild(name)
