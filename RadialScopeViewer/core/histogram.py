"""Luminance and 256-bucket luminance histogram.

Qt-independent; safe to import in non-Qt contexts.
"""

from __future__ import annotations

from typing import Dict

import numpy as np

from .constants import LUMA_WEIGHTS


def luminance(arr: np.ndarray) -> np.ndarray:
    """Return the unrounded luminance map ``0.299R + 0.587G + 0.114B``.

    Grayscale inputs (2-D, or a single channel) are returned as float64
    unchanged; two-channel inputs use their first channel.
    """
    a = np.asarray(arr)
    if a.ndim == 2:
        return a.astype(np.float64)
    if a.ndim != 3:
        raise ValueError("Unsupported array shape")
    if a.shape[2] < 3:
        return a[:, :, 0].astype(np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    rgb = a[:, :, :3].astype(np.float64)
    return wr * rgb[:, :, 0] + wg * rgb[:, :, 1] + wb * rgb[:, :, 2]


def luminance_u8(arr: np.ndarray) -> np.ndarray:
    """Luminance rounded half up and clamped to [0, 255] as uint8.

    Floating-point images are assumed to be in [0, 1] and scaled by 255.
    """
    lum = luminance(arr)
    if np.issubdtype(np.asarray(arr).dtype, np.floating):
        lum = lum * 255.0
    lum = np.nan_to_num(lum, nan=0.0)
    return np.clip(np.floor(lum + 0.5), 0, 255).astype(np.uint8)


def luminance_histogram(arr: np.ndarray) -> np.ndarray:
    """Count pixels per luminance bucket.

    Returns:
        int64 array of length 256 whose entries sum to width*height
    """
    levels = luminance_u8(arr)
    return np.bincount(levels.ravel(), minlength=256).astype(np.int64)


def normalize_histogram(counts: np.ndarray) -> np.ndarray:
    """Scale counts so the largest bucket is 1.0 (all-zero stays zero)."""
    counts = np.asarray(counts, dtype=np.float64)
    peak = counts.max() if counts.size else 0.0
    if peak <= 0:
        return np.zeros_like(counts)
    return counts / peak


def histogram_stats(arr: np.ndarray) -> Dict[str, float]:
    """Mean / std / median / min / max of the luminance."""
    data = luminance(arr).ravel()
    if not data.size:
        return {"mean": 0.0, "std": 0.0, "median": 0.0, "min": 0.0, "max": 0.0}
    return {
        "mean": float(np.mean(data)),
        "std": float(np.std(data)),
        "median": float(np.median(data)),
        "min": float(np.min(data)),
        "max": float(np.max(data)),
    }
