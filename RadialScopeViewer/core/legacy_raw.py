"""Reader for the fixed-layout legacy detector format.

The file is a fixed-size header followed by ``width * height`` pixels of
4 bytes each in (B, G, R, A) order. Pixels are converted to gray with the
luminance weights, replicated on R/G/B, and the alpha byte is kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np

from .constants import RAW_HEADER_BYTES, RAW_WIDTH, RAW_HEIGHT, RAW_PIXEL_BYTES, RAW_EXTENSIONS
from .errors import ImageLoadError
from .histogram import luminance_u8


@dataclass(frozen=True)
class RawLayout:
    header_bytes: int = RAW_HEADER_BYTES
    width: int = RAW_WIDTH
    height: int = RAW_HEIGHT

    @property
    def payload_bytes(self) -> int:
        return self.width * self.height * RAW_PIXEL_BYTES

    @property
    def total_bytes(self) -> int:
        return self.header_bytes + self.payload_bytes


DEFAULT_LAYOUT = RawLayout()


def is_legacy_raw(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in RAW_EXTENSIONS


def decode_bgra(payload: bytes, layout: RawLayout = DEFAULT_LAYOUT) -> np.ndarray:
    """Convert a BGRA payload into an (H, W, 4) gray RGBA uint8 array."""
    bgra = np.frombuffer(payload, dtype=np.uint8, count=layout.payload_bytes)
    bgra = bgra.reshape(layout.height, layout.width, RAW_PIXEL_BYTES)
    rgb = bgra[:, :, 2::-1]  # B,G,R -> R,G,B
    gray = luminance_u8(rgb)
    out = np.empty((layout.height, layout.width, 4), dtype=np.uint8)
    out[:, :, 0] = gray
    out[:, :, 1] = gray
    out[:, :, 2] = gray
    out[:, :, 3] = bgra[:, :, 3]
    return out


def load_legacy_raw(path: Union[str, Path], layout: RawLayout = DEFAULT_LAYOUT) -> np.ndarray:
    """Load a legacy raw file.

    Args:
        path: File path
        layout: Header size and image dimensions

    Returns:
        (height, width, 4) uint8 gray RGBA array

    Raises:
        ImageLoadError: File missing/unreadable or shorter than header + payload
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            f.seek(layout.header_bytes)
            payload = f.read(layout.payload_bytes)
    except OSError as exc:
        raise ImageLoadError(f"Cannot read {path}: {exc}") from exc

    if len(payload) < layout.payload_bytes:
        got = path.stat().st_size
        raise ImageLoadError(
            f"File too small or truncated: {path.name} "
            f"({got} bytes, expected {layout.total_bytes} for "
            f"{layout.width}x{layout.height} after a {layout.header_bytes}-byte header)"
        )
    return decode_bgra(payload, layout)


def encode_legacy_raw(rgba: np.ndarray, header: bytes = b"", header_bytes: int = RAW_HEADER_BYTES) -> bytes:
    """Serialize an (H, W, 4) RGBA uint8 array to the legacy layout.

    The header is zero-padded to ``header_bytes``.
    """
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("Expected an (H, W, 4) RGBA array")
    head = header[:header_bytes].ljust(header_bytes, b"\0")
    bgra = np.ascontiguousarray(rgba[:, :, [2, 1, 0, 3]], dtype=np.uint8)
    return head + bgra.tobytes()
