"""Clipboard compositing and geometric transforms.

Every function here is pure: it takes an image (and parameters) and returns
a new array. Installing the result, and thereby pushing history, is the
caller's job (see ``ImageState.set_image``).
"""

from __future__ import annotations

import enum
from typing import Union

import cv2
import numpy as np

from .constants import ERASE_VALUE
from .errors import SelectionError, ValidationError
from .histogram import luminance
from .selection import SelectionRect

_CV2_RESIZE_DTYPES = {np.dtype(t) for t in (np.uint8, np.uint16, np.int16, np.float32, np.float64)}


class BlendMode(enum.Enum):
    """Per-channel rule for combining pasted (src) and existing (dst) values."""

    AND = "and"
    OR = "or"
    XOR = "xor"
    BLEND = "blend"

    @classmethod
    def parse(cls, value: Union[str, "BlendMode", None]) -> "BlendMode":
        if value is None:
            return cls.BLEND
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown blend mode: {value!r}") from None


def _check_rect(image: np.ndarray, rect: SelectionRect) -> None:
    h, w = image.shape[:2]
    if rect is None or rect.is_empty:
        raise SelectionError("Selection is empty")
    if not rect.within(w, h):
        raise SelectionError(f"Selection {rect} lies outside the {w}x{h} image")


def _erase_value(dtype: np.dtype):
    if np.issubdtype(dtype, np.floating):
        return 1.0
    if dtype == np.uint8:
        return ERASE_VALUE
    if np.issubdtype(dtype, np.integer):
        return np.iinfo(dtype).max
    return True


def copy_region(image: np.ndarray, rect: SelectionRect) -> np.ndarray:
    """Return a detached copy of the selected sub-image."""
    _check_rect(image, rect)
    rows, cols = rect.slices()
    return np.array(image[rows, cols], copy=True)


def cut_region(image: np.ndarray, rect: SelectionRect, erase_value=None) -> tuple[np.ndarray, np.ndarray]:
    """Copy the selection and erase it.

    Returns:
        (clipboard, new_image) where new_image has the region filled with
        ``erase_value`` (default: the maximum value of its dtype) on all
        channels
    """
    clip = copy_region(image, rect)
    out = np.array(image, copy=True)
    rows, cols = rect.slices()
    out[rows, cols] = _erase_value(out.dtype) if erase_value is None else erase_value
    return clip, out


def _channels(arr: np.ndarray) -> int:
    return 1 if arr.ndim == 2 else arr.shape[2]


def _match_channels(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """Convert src to dst's channel layout (gray / RGB / RGBA)."""
    sc, dc = _channels(src), _channels(dst)
    if src.ndim == dst.ndim and sc == dc:
        return src
    opaque = _erase_value(dst.dtype)
    if dst.ndim == 2:
        gray = luminance(src)
        if not np.issubdtype(dst.dtype, np.floating):
            gray = np.floor(gray + 0.5)
        return gray.astype(dst.dtype)
    if src.ndim == 2:
        rgb = np.repeat(src[:, :, None], 3, axis=2)
    elif sc >= 3:
        rgb = src[:, :, :3]
    else:
        raise ValidationError(f"Cannot paste a {sc}-channel image into a {dc}-channel image")
    if dc == 3:
        return rgb
    if dc == 4:
        alpha = src[:, :, 3:4] if sc == 4 else np.full(rgb.shape[:2] + (1,), opaque, dtype=rgb.dtype)
        return np.concatenate([rgb, alpha.astype(rgb.dtype)], axis=2)
    raise ValidationError(f"Cannot paste a {sc}-channel image into a {dc}-channel image")


def combine(dst: np.ndarray, src: np.ndarray, mode: BlendMode) -> np.ndarray:
    """Combine two equally shaped arrays channel by channel."""
    if mode is BlendMode.BLEND:
        if np.issubdtype(dst.dtype, np.floating):
            return ((dst.astype(np.float64) + src) / 2.0).astype(dst.dtype)
        return ((dst.astype(np.int64) + src.astype(np.int64)) // 2).astype(dst.dtype)
    if np.issubdtype(dst.dtype, np.floating):
        raise ValidationError(f"{mode.name} paste needs an integer image, got {dst.dtype}")
    if mode is BlendMode.AND:
        return np.bitwise_and(dst, src)
    if mode is BlendMode.OR:
        return np.bitwise_or(dst, src)
    return np.bitwise_xor(dst, src)


def paste(
    image: np.ndarray,
    clipboard: np.ndarray,
    dest: tuple[int, int] = (0, 0),
    mode: Union[BlendMode, str, None] = BlendMode.BLEND,
) -> np.ndarray:
    """Composite the clipboard onto a copy of the image at ``dest``.

    Clipboard pixels whose destination falls outside the image are skipped.

    Args:
        image: Destination image
        clipboard: Source sub-image
        dest: (x, y) of the clipboard's top-left corner in image space
        mode: BlendMode (or its name), BLEND by default

    Returns:
        New image array
    """
    mode = BlendMode.parse(mode)
    dx, dy = int(dest[0]), int(dest[1])
    h, w = image.shape[:2]
    sh, sw = clipboard.shape[:2]
    out = np.array(image, copy=True)

    x0, y0 = max(dx, 0), max(dy, 0)
    x1, y1 = min(dx + sw, w), min(dy + sh, h)
    if x1 <= x0 or y1 <= y0:
        return out

    src = _match_channels(clipboard, image)[y0 - dy : y1 - dy, x0 - dx : x1 - dx]
    src = src.astype(image.dtype, copy=False)
    out[y0:y1, x0:x1] = combine(out[y0:y1, x0:x1], src, mode)
    return out


def rotate90(image: np.ndarray, clockwise: bool = True) -> np.ndarray:
    return np.rot90(image, k=-1 if clockwise else 1).copy()


def flip_horizontal(image: np.ndarray) -> np.ndarray:
    """Mirror left <-> right."""
    return image[:, ::-1].copy()


def flip_vertical(image: np.ndarray) -> np.ndarray:
    """Mirror top <-> bottom."""
    return image[::-1].copy()


def crop(image: np.ndarray, rect: SelectionRect) -> np.ndarray:
    """Return the sub-image; the rect must be non-empty and fully inside."""
    return copy_region(image, rect)


def parse_size(text: str) -> tuple[int, int]:
    """Parse a ``"W,H"`` string into two positive integers."""
    parts = str(text).replace(" ", "").split(",")
    if len(parts) != 2:
        raise ValidationError(f"Expected 'W,H', got {text!r}")
    try:
        w, h = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValidationError(f"Width and height must be integers: {text!r}") from None
    if w <= 0 or h <= 0:
        raise ValidationError(f"Width and height must be positive: {w}x{h}")
    return w, h


def resize(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Smoothly scale the image to ``width x height``."""
    if width <= 0 or height <= 0:
        raise ValidationError(f"Width and height must be positive: {width}x{height}")
    h, w = image.shape[:2]
    shrinking = width * height < w * h
    interp = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
    src = np.ascontiguousarray(image)
    if src.dtype == np.bool_:
        src = src.astype(np.uint8)
    elif src.dtype not in _CV2_RESIZE_DTYPES:
        # No OpenCV kernel (int32, int64, uint32, ...): resize in float64
        src = src.astype(np.float64)
    out = cv2.resize(src, (int(width), int(height)), interpolation=interp)
    # OpenCV drops a trailing singleton channel axis
    if image.ndim == 3 and out.ndim == 2:
        out = out[:, :, None]
    if np.issubdtype(image.dtype, np.integer) and out.dtype != image.dtype:
        info = np.iinfo(image.dtype)
        out = np.clip(np.rint(out), info.min, info.max)
    return out.astype(image.dtype, copy=False)
