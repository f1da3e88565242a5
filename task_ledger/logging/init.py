from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line the tool prints starts with a label (DEBUG|INFO|WARN|ERROR|SUMMARY)
so that runs under cron or CI can be grepped. Module loggers created with
logging.getLogger(__name__) inside the package propagate to the "task_ledger"
logger configured here.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "task_ledger"

# Between INFO=20 and WARNING=30 so --debug never hides it
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Render records as ``LABEL message`` (tracebacks follow on later lines)."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the "task_ledger" logger to write labeled lines to stdout.

    Calling it again returns the same logger; ``debug=True`` still applies.
    """
    global _logger

    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
        app_logger = logging.getLogger(LOGGER_NAME)
        for old in app_logger.handlers[:]:
            app_logger.removeHandler(old)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(LabeledFormatter())
        app_logger.addHandler(handler)
        app_logger.setLevel(logging.INFO)
        handler.setLevel(logging.INFO)
        # one copy per line even when the root logger has handlers too
        app_logger.propagate = False
        _logger = app_logger

    if debug:
        set_debug(_logger)
    return _logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def set_debug(logger: logging.Logger) -> None:
    """Lower the logger and all of its handlers to DEBUG."""
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger (tests)."""
    global _logger
    _logger = None
