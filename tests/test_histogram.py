"""Tests for the luminance histogram."""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from RadialScopeViewer.core.histogram import (
    histogram_stats,
    luminance_histogram,
    luminance_u8,
    normalize_histogram,
)


def test_uniform_image_fills_one_bucket():
    counts = luminance_histogram(np.full((3, 4), 7, dtype=np.uint8))
    assert counts.shape == (256,)
    assert counts.dtype == np.int64
    assert counts[7] == 12
    assert counts.sum() == 12


def test_rgb_luminance_is_rounded():
    img = np.zeros((2, 2, 3), dtype=np.uint8)
    img[...] = (10, 20, 30)  # 18.15
    assert luminance_histogram(img)[18] == 4


def test_alpha_channel_is_ignored():
    img = np.zeros((2, 2, 4), dtype=np.uint8)
    img[..., 3] = 255
    assert luminance_histogram(img)[0] == 4


def test_float_images_are_scaled_and_clamped():
    img = np.array([[0.5, 2.0], [-1.0, 0.0]], dtype=np.float32)
    levels = luminance_u8(img)
    assert levels.tolist() == [[128, 255], [0, 0]]
    assert luminance_histogram(img).sum() == 4


def test_normalize_histogram():
    norm = normalize_histogram(np.array([0, 2, 4]))
    assert norm.tolist() == [0.0, 0.5, 1.0]
    assert normalize_histogram(np.zeros(256)).max() == 0.0


def test_histogram_stats():
    stats = histogram_stats(np.array([[0, 10], [20, 30]], dtype=np.uint8))
    assert stats["mean"] == 15.0
    assert stats["min"] == 0.0
    assert stats["max"] == 30.0
    assert stats["median"] == 15.0
