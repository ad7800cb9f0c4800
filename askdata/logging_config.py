from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

LOGGER_NAME = "askdata"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger.
    - JSON lines on stdout, extra= fields (attempt, stage, ...) are included.
    - Safe to call twice (e.g. uvicorn reloader), handlers are not duplicated.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger
