"""
Logging utilities for the animation sketchpad.

Handlers live on the "sketchpad" logger; modules get children of it
("sketchpad.archive.bridge", ...) that propagate to those handlers.
"""
import logging
import sys
from config import LOG_LEVEL, LOG_FILE

ROOT_LOGGER_NAME = "sketchpad"

_logger = None


def setup_logger(level: str = None) -> logging.Logger:
    """Configure the sketchpad logger once and return it."""
    global _logger

    if _logger is not None:
        return _logger

    level = level or LOG_LEVEL
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Avoid duplicate handlers
    if logger.handlers:
        _logger = logger
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    if LOG_FILE:
        try:
            file_handler = logging.FileHandler(LOG_FILE)
        except OSError as e:
            logger.warning(f"Could not set up file logging: {e}")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)

    _logger = logger
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a module logger under the sketchpad logger.

    Args:
        name: Usually ``__name__``; None returns the sketchpad logger itself
    """
    root = setup_logger()
    if not name or name == ROOT_LOGGER_NAME:
        return root
    if name == "__main__":
        name = "main"
    return root.getChild(name)
