"""
Logging configuration - one stdout handler on the package logger, module loggers inherit it
"""
import logging
import sys
from logitrack.config import get_settings

settings = get_settings()

ROOT_LOGGER = "logitrack"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        root.addHandler(handler)

    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; names outside the package are nested under it"""
    root = _configure_root()
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)
