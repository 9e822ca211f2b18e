"""
Logging setup.

The editor owns the terminal while it runs, so log records go to a rotating
file or nowhere at all.
"""

import logging
import logging.handlers
import sys
from typing import Final

from .config import EditorConfig

LOG_FORMAT: Final[str] = "%(asctime)s - %(levelname)-8s - %(name)-24s - %(message)s"
MAX_LOG_BYTES: Final[int] = 2 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 3


def setup_logging(config: EditorConfig) -> None:
    """
    Configure the package logger from the editor configuration.

    Args:
        config: Supplies the log file path and level; no file means logging
            is discarded
    """

    package_logger = logging.getLogger('kilopy')
    package_logger.handlers = []
    package_logger.propagate = False

    if not config.log_file:
        package_logger.addHandler(logging.NullHandler())
        return

    try:
        handler = logging.handlers.RotatingFileHandler(
            config.log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8', errors='backslashreplace'
        )
    except OSError as e:
        print(f"kilopy: cannot open log file {config.log_file}: {e}", file=sys.stderr)
        package_logger.addHandler(logging.NullHandler())
        return

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(config.log_level)
