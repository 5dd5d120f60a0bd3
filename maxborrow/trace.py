"""In-memory capture of the calculation log."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, List, Optional


@dataclass
class TraceEntry:
    logger: str
    level: str
    message: str
    timestamp: datetime


class CalculationTrace(logging.Handler):
    """Logging handler that keeps records in memory for display or tests."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        super().__init__(level)
        self.entries: List[TraceEntry] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.entries.append(
            TraceEntry(
                logger=record.name,
                level=record.levelname,
                message=record.getMessage(),
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
            )
        )

    def messages(self) -> List[str]:
        return [e.message for e in self.entries]

    def as_dict(self) -> List[dict]:
        """Return trace entries as dictionaries for inspection."""
        return [
            {
                "logger": e.logger,
                "level": e.level,
                "message": e.message,
                "timestamp": e.timestamp.isoformat(),
            }
            for e in self.entries
        ]


@contextmanager
def capture_trace(logger: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> Iterator[CalculationTrace]:
    """Attach a :class:`CalculationTrace` to ``logger`` for the ``with`` block.

    Defaults to the package logger, so every engine's messages are captured.
    """

    target = logger or logging.getLogger("maxborrow")
    trace = CalculationTrace(level)
    previous = target.level
    target.addHandler(trace)
    if target.getEffectiveLevel() > level:
        target.setLevel(level)
    try:
        yield trace
    finally:
        target.removeHandler(trace)
        target.setLevel(previous)
