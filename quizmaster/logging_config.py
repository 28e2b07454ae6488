"""Logging configuration helpers for the quiz service."""

from __future__ import annotations

import logging
from logging import Logger

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "quizmaster"


def setup_logging(level: int = logging.INFO) -> Logger:
    """Configure console logging for the service and return the package logger."""
    root = logging.getLogger()
    root.setLevel(level)

    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.set_name(HANDLER_NAME)
        root.addHandler(handler)

    for handler in root.handlers:
        handler.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    return logging.getLogger("quizmaster")
