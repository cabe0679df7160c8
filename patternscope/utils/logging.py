"""
patternscope Logging Configuration

Installs handlers on the "patternscope" package logger from the `logging`
section of the active settings. Modules log through
`logging.getLogger(__name__)` and inherit these handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from patternscope.config import Settings, get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
PACKAGE_LOGGER = "patternscope"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    settings: Optional[Settings] = None,
    level: Optional[Union[int, str]] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        settings: Source of `logging.level` and `logging.file` (default: global settings)
        level: Overrides `logging.level` when given (e.g. from --log-level)
        stream: Console stream (default: stdout)

    Returns:
        The configured "patternscope" logger
    """
    settings = settings or get_settings()
    level = _resolve_level(level or settings.get("logging.level", "INFO"))
    log_file = settings.get("logging.file")

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging at {logging.getLevelName(level)}, file={log_file}")
    return logger
