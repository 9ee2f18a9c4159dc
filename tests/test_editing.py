"""Tests for clipboard compositing and geometric transforms."""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from RadialScopeViewer.core.editing import (
    BlendMode,
    copy_region,
    cut_region,
    crop,
    flip_horizontal,
    flip_vertical,
    parse_size,
    paste,
    resize,
    rotate90,
)
from RadialScopeViewer.core.errors import SelectionError, ValidationError
from RadialScopeViewer.core.selection import SelectionRect


def _rgb():
    return np.arange(5 * 6 * 3, dtype=np.uint8).reshape(5, 6, 3)


def test_copy_then_blend_paste_in_place_is_identity():
    img = _rgb()
    rect = SelectionRect(1, 1, 4, 3)
    clip = copy_region(img, rect)
    out = paste(img, clip, (rect.x1, rect.y1), BlendMode.BLEND)
    assert np.array_equal(out, img)


def test_copy_is_detached_from_source():
    img = _rgb()
    clip = copy_region(img, SelectionRect(0, 0, 2, 2))
    clip[...] = 0
    assert img[0, 0, 1] == 1


def test_cut_fills_region_with_max_value():
    img = _rgb()
    rect = SelectionRect(2, 1, 4, 3)
    clip, out = cut_region(img, rect)
    assert np.array_equal(clip, img[1:3, 2:4])
    assert (out[1:3, 2:4] == 255).all()
    assert np.array_equal(out[0], img[0])
    _, zeroed = cut_region(img, rect, erase_value=0)
    assert (zeroed[1:3, 2:4] == 0).all()


def test_paste_clips_at_image_edges():
    img = np.zeros((4, 4), dtype=np.uint8)
    clip = np.full((3, 3), 255, dtype=np.uint8)

    out = paste(img, clip, (2, 2))
    assert (out[2:, 2:] == 127).all()
    assert out[:2].sum() == 0 and out[:, :2].sum() == 0

    out = paste(img, clip, (-1, -1))
    assert (out[:2, :2] == 127).all()
    assert out[2:].sum() == 0


def test_paste_fully_outside_leaves_image_unchanged():
    img = _rgb()
    out = paste(img, img[:2, :2], (100, 100))
    assert np.array_equal(out, img)
    assert out is not img


def test_bitwise_modes():
    dst = np.full((2, 2), 0b1100, dtype=np.uint8)
    src = np.full((2, 2), 0b1010, dtype=np.uint8)
    assert (paste(dst, src, mode=BlendMode.AND) == 0b1000).all()
    assert (paste(dst, src, mode="or") == 0b1110).all()
    assert (paste(dst, src, mode="XOR") == 0b0110).all()


def test_bitwise_modes_reject_float_images():
    img = np.zeros((2, 2), dtype=np.float32)
    with pytest.raises(ValidationError):
        paste(img, img, mode=BlendMode.XOR)


def test_gray_clipboard_into_rgb_image():
    img = np.zeros((2, 2, 3), dtype=np.uint8)
    clip = np.full((2, 2), 100, dtype=np.uint8)
    out = paste(img, clip)
    assert (out == 50).all()


def test_unknown_blend_mode():
    assert BlendMode.parse("xor") is BlendMode.XOR
    assert BlendMode.parse(None) is BlendMode.BLEND
    with pytest.raises(ValidationError):
        BlendMode.parse("multiply")


def test_crop_out_of_bounds_raises():
    img = _rgb()
    with pytest.raises(SelectionError):
        crop(img, SelectionRect(0, 0, 10, 10))
    with pytest.raises(SelectionError):
        crop(img, SelectionRect(2, 2, 2, 4))
    assert crop(img, SelectionRect(1, 2, 3, 5)).shape == (3, 2, 3)


def test_rotate_and_flip():
    a = np.array([[1, 2], [3, 4]])
    assert rotate90(a).tolist() == [[3, 1], [4, 2]]
    assert rotate90(a, clockwise=False).tolist() == [[2, 4], [1, 3]]
    assert flip_horizontal(a).tolist() == [[2, 1], [4, 3]]
    assert flip_vertical(a).tolist() == [[3, 4], [1, 2]]


def test_parse_size():
    assert parse_size(" 10, 20 ") == (10, 20)
    for bad in ("10", "a,b", "0,5", "5,-1", "1,2,3"):
        with pytest.raises(ValidationError):
            parse_size(bad)


def test_resize_keeps_dtype_and_channels():
    img = _rgb()
    out = resize(img, 8, 6)
    assert out.shape == (6, 8, 3)
    assert out.dtype == np.uint8

    gray = np.full((4, 4), 10, dtype=np.uint8)
    small = resize(gray, 2, 2)
    assert small.shape == (2, 2)
    assert (small == 10).all()


def test_resize_wide_integer_images():
    for dtype in (np.int32, np.int64, np.uint32):
        img = np.full((4, 4), 1000, dtype=dtype)
        out = resize(img, 8, 8)
        assert out.shape == (8, 8)
        assert out.dtype == dtype
        assert (out == 1000).all()
