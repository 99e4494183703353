from __future__ import annotations

import logging
import sys

ROOT_LOGGER = "docker_mcp_scaffold"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Attach a single stderr handler to the package logger.
    stdout belongs to the stdio transport, so nothing is ever logged there.
    Calling it again re-targets the handler at the current sys.stderr.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(h)
        logger.propagate = False
    else:
        for h in logger.handlers:
            # assigned directly: setStream flushes the old stream, which may already be closed
            if isinstance(h, logging.StreamHandler) and h.stream is not sys.stderr:
                h.stream = sys.stderr

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    return logger


def get_logger(area: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{area}")
