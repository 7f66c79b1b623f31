"""
FILE: corkboard/nav/logbuffer.py
PURPOSE: Bounded in-memory log sink backing the Log panel
EXPORTS:
  - LogBuffer (logging.Handler)
NOTES:
  - Owned by the App and attached only for its lifetime
"""

import logging
from collections import deque
from typing import List

from ..core.constants import LOG_BUFFER_SIZE

FORMAT = "%(asctime)s %(levelname)-7s %(message)s"


class LogBuffer(logging.Handler):
    """Keeps the most recent formatted records for display."""

    def __init__(self, capacity: int = LOG_BUFFER_SIZE, level: int = logging.DEBUG):
        super().__init__(level)
        self.records = deque(maxlen=capacity)
        self.setFormatter(logging.Formatter(FORMAT, datefmt="%H:%M:%S"))
        self._logger = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.records.append((record.levelno, self.format(record)))
        except Exception:
            self.handleError(record)

    def attach(self, name: str = "corkboard") -> "LogBuffer":
        self._logger = logging.getLogger(name)
        if self._logger.level == logging.NOTSET or self._logger.level > self.level:
            self._logger.setLevel(self.level)
        self._logger.addHandler(self)
        return self

    def detach(self) -> None:
        if self._logger is not None:
            self._logger.removeHandler(self)
            self._logger = None

    def lines(self, limit: int = 0) -> List[str]:
        entries = [text for _, text in self.records]
        return entries[-limit:] if limit else entries

    def clear(self) -> None:
        self.records.clear()
