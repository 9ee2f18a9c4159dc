"""Rectangular selection tracking in image space.

Pointer positions arrive in display coordinates and are converted with the
zoom inverse as soon as they enter the tracker. Rectangles are stored in
image space only; the UI applies the zoom when drawing them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

from .image_state import ImageState


@dataclass(frozen=True)
class SelectionRect:
    """Half-open image-space rectangle ``[x1, x2) x [y1, y2)``."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_points(cls, a: tuple[int, int], b: tuple[int, int]) -> "SelectionRect":
        return cls(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> "SelectionRect":
        return cls.from_points((x, y), (x + w, y + h))

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def normalized(self) -> "SelectionRect":
        return SelectionRect.from_points((self.x1, self.y1), (self.x2, self.y2))

    def clamped(self, width: int, height: int) -> "SelectionRect":
        r = self.normalized()
        return SelectionRect(
            max(0, min(r.x1, width)),
            max(0, min(r.y1, height)),
            max(0, min(r.x2, width)),
            max(0, min(r.y2, height)),
        )

    def within(self, width: int, height: int) -> bool:
        """True if the rectangle lies entirely inside a width x height image."""
        return 0 <= self.x1 <= self.x2 <= width and 0 <= self.y1 <= self.y2 <= height

    def slices(self) -> tuple[slice, slice]:
        """(rows, cols) slices for indexing an (H, W[, C]) array."""
        return slice(self.y1, self.y2), slice(self.x1, self.x2)

    def __str__(self) -> str:
        return f"({self.x1}, {self.y1}) - ({self.x2}, {self.y2}), w: {self.width}, h: {self.height}"


class DragState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class SelectionTracker:
    """Press/drag/release state machine feeding an append-only ROI list.

    Attributes:
        state: Current DragState
        selection: Last finalized selection (may be empty) or None
        live_rect: Rectangle under construction while dragging
        rois: Finalized, non-empty selections in creation order
    """

    def __init__(self, image_state: ImageState):
        self.image_state = image_state
        self.state = DragState.IDLE
        self.selection: Optional[SelectionRect] = None
        self.live_rect: Optional[SelectionRect] = None
        self.rois: List[SelectionRect] = []
        self._start: Optional[tuple[int, int]] = None

    def _rect_to(self, px: float, py: float) -> SelectionRect:
        end = self.image_state.display_to_image(px, py)
        w, h = self.image_state.size
        return SelectionRect.from_points(self._start, end).clamped(w, h)

    def press(self, px: float, py: float) -> None:
        if not self.image_state.is_valid:
            return
        self._start = self.image_state.display_to_image(px, py)
        self.live_rect = SelectionRect(self._start[0], self._start[1], self._start[0], self._start[1])
        self.state = DragState.DRAGGING

    def move(self, px: float, py: float) -> Optional[SelectionRect]:
        """Update the live feedback rectangle; the ROI list is not touched."""
        if self.state is not DragState.DRAGGING:
            return None
        self.live_rect = self._rect_to(px, py)
        return self.live_rect

    def release(self, px: float, py: float) -> Optional[SelectionRect]:
        """Finish the drag.

        Returns:
            The finalized rectangle (possibly empty), or None if no drag
            was in progress
        """
        if self.state is not DragState.DRAGGING:
            return None
        rect = self._rect_to(px, py)
        self.state = DragState.IDLE
        self.live_rect = None
        self._start = None
        self.selection = rect
        if not rect.is_empty:
            self.rois.append(rect)
        return rect

    def select_all(self) -> Optional[SelectionRect]:
        if not self.image_state.is_valid:
            return None
        w, h = self.image_state.size
        rect = SelectionRect(0, 0, w, h)
        self.selection = rect
        self.rois.append(rect)
        return rect

    def clear_selection(self) -> None:
        self.selection = None
        self.live_rect = None
        self.state = DragState.IDLE
        self._start = None

    def has_selection(self) -> bool:
        return self.selection is not None and not self.selection.is_empty
