from __future__ import annotations

import logging

PACKAGE_LOGGER = "gcm_push"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level_name: str, *, handler: logging.Handler | None = None) -> logging.Logger:
    """Opt-in setup for the package logger only; the root logger is left alone.

    Attaches at most one handler, so repeated calls just update the level.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not any(getattr(h, "_gcm_push_handler", False) for h in logger.handlers):
        handler = handler or logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        handler._gcm_push_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        # Records are handled here; don't print them twice through the host's root handlers
        logger.propagate = False
    return logger
