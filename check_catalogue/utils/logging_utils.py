import logging
import sys
from typing import Optional

DEFAULT_LOG_FORMAT = "%(name)s - %(levelname)s - %(message)s"


class _BelowLevelFilter(logging.Filter):
    """Pass only records strictly below ``level``."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
) -> None:
    """Configure root logging so that diagnostics and progress stay apart.

    Records below ``stderr_level`` are written to stdout, everything at or
    above it to stderr. A batch compile can then be piped without losing
    the warnings about skipped definition files.
    """

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    formatter = formatter or logging.Formatter(DEFAULT_LOG_FORMAT)
    stderr_level = max(stderr_level, logging.DEBUG)

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_BelowLevelFilter(stderr_level))
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)
