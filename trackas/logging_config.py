import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "trackas"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach stdout (and optionally file) handlers to the ``trackas`` logger.

    Calling it again replaces the handlers, so an app reload does not double
    every line. ``level`` accepts a name such as ``"DEBUG"`` from ``LOG_LEVEL``.
    """
    level = _resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    # uvicorn configures the root logger too
    logger.propagate = False

    logger.debug("Logging set to %s%s", logging.getLevelName(level), f", file {log_file}" if log_file else "")
    return logger
