"""
Diagnostic sinks.

The engine reports what it did (raw items, missing ids, store failures,
skipped totals) through a sink. Sinks are fire-and-forget and are never
consulted for control flow.
"""
import logging
from typing import Optional

INFO = "info"
WARNING = "warning"
ERROR = "error"


class DiagnosticSink:
    """Base sink. Subclasses implement log()."""

    def log(self, level: str, message: str):
        raise NotImplementedError

    def info(self, message: str):
        self.log(INFO, message)

    def warning(self, message: str):
        self.log(WARNING, message)

    def error(self, message: str):
        self.log(ERROR, message)


class LoggingSink(DiagnosticSink):
    """Forwards diagnostics to a stdlib logger."""

    LEVELS = {
        INFO: logging.INFO,
        WARNING: logging.WARNING,
        ERROR: logging.ERROR,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("item_value.engine")

    def log(self, level: str, message: str):
        self.logger.log(self.LEVELS.get(level, logging.WARNING), message)


class RecordingSink(DiagnosticSink):
    """Keeps every diagnostic in memory as (level, message) pairs."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def log(self, level: str, message: str):
        self.records.append((level, message))

    def messages(self, level: Optional[str] = None) -> list[str]:
        return [m for lvl, m in self.records if level is None or lvl == level]
