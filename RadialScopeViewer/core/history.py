"""Bounded undo history of image snapshots."""

from __future__ import annotations

from collections import deque
from typing import Optional

import numpy as np

from .constants import MAX_HISTORY


class HistoryStack:
    """Capacity-bounded stack of prior images.

    Pushing onto a full stack evicts the oldest snapshot, so the most recent
    ``capacity`` states always stay undo-able.
    """

    def __init__(self, capacity: int = MAX_HISTORY):
        if capacity <= 0:
            raise ValueError("history capacity must be positive")
        self._items: deque = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def push(self, image: np.ndarray) -> None:
        self._items.append(image)

    def pop(self) -> Optional[np.ndarray]:
        """Remove and return the newest snapshot, or None when empty."""
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[np.ndarray]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
