"""
Logging setup for the revolve service.

Geometry modules only call ``logging.getLogger(__name__)``; handlers are
attached once here, when the app starts.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# Server loggers that should share the revolve format
SERVER_LOGGERS = ("uvicorn", "uvicorn.error")


def _handlers(level: int, log_file: Optional[str]) -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    handlers: list[logging.Handler] = [console]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the 'revolve' logger.

    Calling it again replaces the handlers instead of adding more.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path; records are appended to it.

    Returns:
        The configured 'revolve' logger.
    """
    logger = logging.getLogger("revolve")
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()
    for handler in _handlers(level, log_file):
        logger.addHandler(handler)

    for name in SERVER_LOGGERS:
        for handler in logging.getLogger(name).handlers:
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logger.info("Logging initialized (level %s%s)", logging.getLevelName(level),
                f", file {log_file}" if log_file else "")
    return logger
