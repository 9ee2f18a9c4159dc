"""Owner of the current image, zoom parameters, undo history and clipboard.

Every other component reads the image through ImageState or replaces it via
``set_image``; nothing mutates the stored array in place. Stored arrays are
flagged read-only so an accidental in-place write raises instead of leaking
an intermediate state.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

import numpy as np

from .constants import MAX_HISTORY
from .history import HistoryStack
from .zoom import ZoomState, displayed_size, display_to_image, image_to_display

logger = logging.getLogger(__name__)


def _freeze(image: np.ndarray) -> np.ndarray:
    arr = np.asarray(image)
    # A read-only view may still alias a writable buffer
    if arr.flags.writeable or not arr.flags.owndata:
        arr = arr.copy()
        arr.flags.writeable = False
    return arr


class ImageState:
    """Single-document image state.

    Attributes:
        image: Current image array (read-only) or None
        path: Source path of the last loaded file, if any
        zoom: ZoomState instance
        history: HistoryStack of pre-mutation snapshots
        clipboard: Last copied sub-image or None
        display_size: (width, height) of the display area used for fit mode
    """

    def __init__(self, max_history: int = MAX_HISTORY, display_size: tuple[int, int] = (800, 600)):
        self.image: Optional[np.ndarray] = None
        self.path: Optional[str] = None
        self.zoom = ZoomState()
        self.history = HistoryStack(max_history)
        self.clipboard: Optional[np.ndarray] = None
        self.display_size = display_size
        self._listeners: List[Callable[[], None]] = []

    # --- listeners ---
    def add_listener(self, fn: Callable[[], None]) -> None:
        """Register a callback fired after any image or zoom change."""
        self._listeners.append(fn)

    def remove_listener(self, fn: Callable[[], None]) -> None:
        if fn in self._listeners:
            self._listeners.remove(fn)

    def _notify(self) -> None:
        for fn in list(self._listeners):
            fn()

    # --- image ---
    @property
    def is_valid(self) -> bool:
        return self.image is not None and self.image.size > 0

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the current image, (0, 0) when empty."""
        if self.image is None:
            return (0, 0)
        h, w = self.image.shape[:2]
        return (w, h)

    def set_image(self, image: np.ndarray, path: Optional[str] = None) -> None:
        """Install a new image, pushing the current one onto the history.

        Args:
            image: New image value
            path: Optional source path to remember
        """
        if self.is_valid:
            self.history.push(self.image)
        self._install(image)
        if path is not None:
            self.path = path

    def _install(self, image: np.ndarray) -> None:
        self.image = _freeze(image)
        self.zoom.fit_mode = True
        self.zoom.refit(self.size, self.display_size)
        logger.debug("installed image %sx%s, history=%d", *self.size, len(self.history))
        self._notify()

    def undo(self) -> bool:
        """Restore the newest history snapshot.

        Returns:
            False when there was nothing to undo
        """
        previous = self.history.pop()
        if previous is None:
            return False
        self._install(previous)
        return True

    def pixel_at(self, ix: int, iy: int):
        """Return the raw pixel at image coordinates, or None if outside."""
        if not self.is_valid:
            return None
        w, h = self.size
        if 0 <= ix < w and 0 <= iy < h:
            return self.image[iy, ix]
        return None

    def clear(self) -> None:
        """Drop image, history and clipboard (end of session)."""
        self.image = None
        self.path = None
        self.clipboard = None
        self.history.clear()
        self.zoom = ZoomState()
        self._notify()

    # --- zoom ---
    def zoom_in(self) -> float:
        z = self.zoom.zoom_in()
        self._notify()
        return z

    def zoom_out(self) -> float:
        z = self.zoom.zoom_out()
        self._notify()
        return z

    def zoom_fit(self) -> float:
        self.zoom.fit_mode = True
        z = self.zoom.refit(self.size, self.display_size)
        self._notify()
        return z

    def set_display_size(self, width: int, height: int) -> None:
        """Update the display area; refits while fit mode is active."""
        self.display_size = (max(0, int(width)), max(0, int(height)))
        if self.is_valid and self.zoom.fit_mode:
            self.zoom.refit(self.size, self.display_size)
            self._notify()

    @property
    def zoom_factor(self) -> float:
        return self.zoom.zoom_factor

    def displayed_size(self) -> tuple[int, int]:
        return displayed_size(self.size, self.zoom.zoom_factor)

    def display_to_image(self, px: float, py: float) -> tuple[int, int]:
        return display_to_image(px, py, self.zoom.zoom_factor)

    def image_to_display(self, ix: float, iy: float) -> tuple[int, int]:
        return image_to_display(ix, iy, self.zoom.zoom_factor)
