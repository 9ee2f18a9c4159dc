"""Line-oriented results feed.

Components that report status or analysis output receive a ResultsSink
explicitly instead of searching for a shared widget.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Protocol

logger = logging.getLogger(__name__)


class ResultsSink(Protocol):
    def append(self, line: str) -> None: ...


class ResultsFeed:
    """Append-only list of human-readable lines with change subscribers."""

    def __init__(self):
        self._lines: List[str] = []
        self._subscribers: List[Callable[[str], None]] = []

    def append(self, line: str) -> None:
        self._lines.append(line)
        logger.info("%s", line)
        for fn in list(self._subscribers):
            fn(line)

    def subscribe(self, fn: Callable[[str], None]) -> None:
        self._subscribers.append(fn)

    def unsubscribe(self, fn: Callable[[str], None]) -> None:
        if fn in self._subscribers:
            self._subscribers.remove(fn)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    @property
    def last(self) -> str:
        return self._lines[-1] if self._lines else ""

    def __len__(self) -> int:
        return len(self._lines)
