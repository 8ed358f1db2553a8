"""
Observability

Logging setup for entry points. Library modules only create
``logging.getLogger(__name__)`` loggers; handlers are installed here,
once, by whoever owns the process (the CLI, a test, an embedding app).

WHAT THIS MODULE MUST NOT DO:
=============================
- Change pipeline behavior based on what was logged
"""

from __future__ import annotations
from typing import Optional, TextIO, Union
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
ROOT_LOGGER = "eventgraph"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_eventgraph", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._eventgraph = True
    logger.addHandler(handler)
    return logger
