"""Logging setup for the cfimg CLI.

Generated URLs are the program's output and are logged at INFO. They go to
stdout with no decoration so ``cfimg ... | xargs curl -I`` works. Everything
else (debug chatter, warnings, errors) goes to stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "cftransforms"

# Loggers whose DEBUG records only show at -vv
NOISY_LOGGERS = (f"{LOGGER_NAME}.image",)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it for ``name``.

    Accepts both ``__name__`` ("cftransforms.image") and short ("image") forms.
    """
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class ConsoleFormatter(logging.Formatter):
    """Prefix diagnostics by level; leave INFO untouched."""

    PREFIXES = {
        logging.DEBUG: "[debug] ",
        logging.WARNING: "Warning: ",
        logging.ERROR: "Error: ",
        logging.CRITICAL: "Error: ",
    }

    def format(self, record: logging.LogRecord) -> str:
        return self.PREFIXES.get(record.levelno, "") + record.getMessage()


class OutputFilter(logging.Filter):
    """Pass INFO records only."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno == logging.INFO


class DiagnosticFilter(logging.Filter):
    """Pass everything except INFO, optionally hiding per-builder DEBUG records."""

    def __init__(self, include_noisy: bool = False):
        super().__init__()
        self.include_noisy = include_noisy

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.INFO:
            return False
        if record.levelno == logging.DEBUG and not self.include_noisy:
            return not record.name.startswith(NOISY_LOGGERS)
        return True


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure handlers on the package logger.

    Args:
        verbosity: 0=normal, 1=resolution details (-v), 2=every rendered URL (-vv)
        quiet: If True, only errors are shown, URLs included
        log_file: Optional file that receives every record
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.ERROR if quiet else logging.INFO)
    stdout_handler.setFormatter(ConsoleFormatter())
    stdout_handler.addFilter(OutputFilter())
    logger.addHandler(stdout_handler)

    if quiet:
        stderr_level = logging.ERROR
    elif verbosity >= 1:
        stderr_level = logging.DEBUG
    else:
        stderr_level = logging.WARNING

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(ConsoleFormatter())
    stderr_handler.addFilter(DiagnosticFilter(include_noisy=verbosity >= 2))
    logger.addHandler(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
