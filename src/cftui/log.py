"""Logging setup. Records go to a file since the terminal belongs to the UI."""

import logging
import os
from pathlib import Path


LOGGER_NAME = "cftui"
LEVEL_ENV = "CF_TUI_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(path: Path) -> logging.Logger:
    """Attach a FileHandler at path to the cftui logger.

    The level is read from CF_TUI_LOG (DEBUG, INFO, ...), defaulting to INFO.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(LOGGER_NAME)

    level_name = os.environ.get(LEVEL_ENV, "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
