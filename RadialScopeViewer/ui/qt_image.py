"""NumPy -> QImage conversion for display."""

import numpy as np
from PySide6.QtGui import QImage


def numpy_to_qimage(arr: np.ndarray) -> QImage:
    """Convert a NumPy image array to a Qt QImage suitable for display.

    Returns a copied QImage (detached from the NumPy buffer).

    Supported input shapes:
      - (H, W) -> 8-bit grayscale
      - (H, W, 3) -> RGB (8-bit per channel)
      - (H, W, 4) -> RGBA (8-bit per channel)
      - Any other channel count -> converted to grayscale by averaging

    Args:
        arr: Numeric array-like image. Values outside [0,255] are clipped;
            floating point images are taken as [0, 1].

    Returns:
        QImage: A freshly allocated QImage instance. If ``arr`` is ``None``
        an empty QImage is returned.

    Raises:
        ValueError: If ``arr`` has less than 2 dimensions.
    """
    if arr is None:
        return QImage()
    a = np.asarray(arr)
    if np.issubdtype(a.dtype, np.floating):
        a = a * 255.0
    if a.ndim == 2:
        disp = np.ascontiguousarray(np.clip(a, 0, 255).astype(np.uint8))
        h, w = disp.shape
        return QImage(disp.data, w, h, w, QImage.Format_Grayscale8).copy()
    elif a.ndim == 3:
        h, w, c = a.shape
        disp = np.ascontiguousarray(np.clip(a, 0, 255).astype(np.uint8))
        if c == 3:
            return QImage(disp.data, w, h, 3 * w, QImage.Format_RGB888).copy()
        elif c == 4:
            return QImage(disp.data, w, h, 4 * w, QImage.Format_RGBA8888).copy()
        gray = np.ascontiguousarray(np.clip(a.mean(axis=2), 0, 255).astype(np.uint8))
        return QImage(gray.data, w, h, w, QImage.Format_Grayscale8).copy()
    else:
        raise ValueError("Unsupported array shape")
