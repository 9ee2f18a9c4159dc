"""Zoom state and the display <-> image coordinate transform.

The transform is the single place where coordinates cross the zoom
boundary. Selection tracking, pixel inspection and the Qt widget all go
through ``display_to_image`` / ``image_to_display``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import ZOOM_STEP, MIN_ZOOM_SCALE, MAX_ZOOM_SCALE


@dataclass
class ZoomState:
    """Current zoom factor and whether it follows the display size."""

    zoom_factor: float = 1.0
    fit_mode: bool = True

    def zoom_in(self) -> float:
        self.fit_mode = False
        self.zoom_factor = min(self.zoom_factor * ZOOM_STEP, MAX_ZOOM_SCALE)
        return self.zoom_factor

    def zoom_out(self) -> float:
        self.fit_mode = False
        self.zoom_factor = max(self.zoom_factor / ZOOM_STEP, MIN_ZOOM_SCALE)
        return self.zoom_factor

    def refit(self, image_size: tuple[int, int], display_size: tuple[int, int]) -> float:
        """Recompute the fit factor if fit mode is active.

        Args:
            image_size: (width, height) of the image
            display_size: (width, height) of the display area

        Returns:
            The (possibly unchanged) zoom factor
        """
        if self.fit_mode:
            self.zoom_factor = fit_scale(image_size, display_size)
        return self.zoom_factor


def fit_scale(image_size: tuple[int, int], display_size: tuple[int, int]) -> float:
    """Return ``min(dw / w, dh / h)`` clamped to stay strictly positive."""
    w, h = image_size
    dw, dh = display_size
    if w <= 0 or h <= 0:
        return 1.0
    scale = min(dw / w, dh / h)
    return max(MIN_ZOOM_SCALE, scale)


def displayed_size(image_size: tuple[int, int], zoom_factor: float) -> tuple[int, int]:
    w, h = image_size
    return (int(math.floor(w * zoom_factor)), int(math.floor(h * zoom_factor)))


def display_to_image(px: float, py: float, zoom_factor: float) -> tuple[int, int]:
    """Map a display/pointer position to the image pixel under it."""
    return (int(math.floor(px / zoom_factor)), int(math.floor(py / zoom_factor)))


def image_to_display(ix: float, iy: float, zoom_factor: float) -> tuple[int, int]:
    """Map an image coordinate to its top-left position on the display."""
    return (int(math.floor(ix * zoom_factor)), int(math.floor(iy * zoom_factor)))
