"""End-to-end tests for user operations on a ViewerSession."""

import math
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from RadialScopeViewer.core.image_io import save_image
from RadialScopeViewer.core.radial import read_profile_csv
from RadialScopeViewer.core.results import ResultsFeed
from RadialScopeViewer.core.selection import SelectionRect
from RadialScopeViewer.core.session import ViewerSession

PLUGIN_DIR = Path(__file__).parent.parent / "RadialScopeViewer" / "filter_plugins"


def _session(image=None):
    session = ViewerSession(plugin_dir=None)
    if image is not None:
        session.load_array(image)
        h, w = image.shape[:2]
        # one display pixel per image pixel
        session.set_display_size(w, h)
    return session


def _select(session, x1, y1, x2, y2):
    session.press(x1, y1)
    return session.release(x2, y2)


def test_operations_without_image_report_and_do_nothing():
    session = _session()
    assert not session.undo()
    assert session.sink.last == "Nothing to undo"
    assert session.circular_average(3) is None
    assert session.sink.last == "Circular average: No image loaded"
    assert not session.rotate90()
    assert session.histogram() is None


def test_copy_without_selection():
    session = _session(np.zeros((4, 4), dtype=np.uint8))
    assert not session.copy()
    assert session.sink.last == "Copy: No selection"


def test_release_reports_roi():
    session = _session(np.zeros((10, 10), dtype=np.uint8))
    rect = _select(session, 1, 2, 5, 6)
    assert rect == SelectionRect(1, 2, 5, 6)
    assert session.sink.last == "ROI #1: (1, 2) - (5, 6), w: 4, h: 4"


def test_cut_paste_undo_round_trip():
    img = np.arange(16, dtype=np.uint8).reshape(4, 4)
    session = _session(img)
    _select(session, 0, 0, 2, 2)

    assert session.cut()
    assert (session.state.image[:2, :2] == 255).all()

    session.set_blend_mode("blend")
    session.clear_selection()
    assert session.paste(dest=(2, 2))
    expected = (img[2:, 2:].astype(int) + img[:2, :2]) // 2
    assert np.array_equal(session.state.image[2:, 2:], expected)

    assert session.undo()
    assert session.undo()
    assert np.array_equal(session.state.image, img)


def test_paste_defaults_to_selection_origin():
    session = _session(np.zeros((4, 4), dtype=np.uint8))
    session.state.clipboard = np.full((1, 1), 200, dtype=np.uint8)
    _select(session, 3, 1, 4, 2)
    assert session.paste(mode="or")
    assert session.state.image[1, 3] == 200
    assert session.sink.last == "Pasted at (3, 1) [OR]"


def test_paste_with_empty_clipboard():
    session = _session(np.zeros((4, 4), dtype=np.uint8))
    assert not session.paste()
    assert session.sink.last == "Paste: Clipboard is empty"


def test_crop_outside_image_changes_nothing():
    img = np.zeros((4, 4), dtype=np.uint8)
    session = _session(img)
    assert not session.crop(SelectionRect(0, 0, 10, 10))
    assert session.state.image.shape == (4, 4)
    assert len(session.state.history) == 0
    assert session.sink.last.startswith("Crop: ")


def test_crop_to_selection():
    session = _session(np.arange(20, dtype=np.uint8).reshape(4, 5))
    _select(session, 1, 1, 3, 4)
    assert session.crop()
    assert session.state.image.shape == (3, 2)
    assert session.tracker.selection is None
    assert session.sink.last == "Cropped to 2x3"


def test_resize_rejects_bad_text():
    session = _session(np.zeros((4, 4), dtype=np.uint8))
    assert not session.resize("ten,five")
    assert session.state.image.shape == (4, 4)
    assert session.resize("8,2")
    assert session.state.image.shape == (2, 8)


def test_rotation_of_non_square_image_clears_selection():
    session = _session(np.zeros((2, 4), dtype=np.uint8))
    _select(session, 0, 0, 2, 2)
    assert session.rotate90()
    assert session.state.size == (2, 4)
    assert session.tracker.selection is None


def test_circular_average_on_checkerboard():
    y, x = np.mgrid[0:4, 0:4]
    session = _session(np.where((x + y) % 2 == 1, 255, 0).astype(np.uint8))
    sample = session.circular_average(1, center=(2, 2))
    assert sample.average == 127.5
    assert session.sink.last == "Circular average R=1 at (2, 2): 127.500 (8 samples)"


def test_circular_average_requires_positive_radius():
    session = _session(np.zeros((4, 4), dtype=np.uint8))
    assert session.circular_average(0) is None
    assert "positive" in session.sink.last
    assert session.circular_average("x") is None


def test_sweep_and_export(tmp_path):
    session = _session(np.full((20, 20), 9, dtype=np.uint8))
    assert not session.export_profile(tmp_path / "none.csv")
    assert session.sink.last == "Export: No radial profile to export"

    profile = session.radial_sweep("0", "20", "5")
    assert profile.radii().tolist() == [0, 5, 10, 15, 20]
    assert session.export_profile(tmp_path / "p.csv")

    rows = read_profile_csv(tmp_path / "p.csv")
    assert [r.radius for r in rows] == [0, 5, 10, 15, 20]
    assert rows[0].average == 9.0
    assert math.isnan(rows[-1].average)


def test_invalid_sweep_keeps_previous_profile():
    session = _session(np.zeros((8, 8), dtype=np.uint8))
    first = session.radial_sweep(0, 2, 1)
    assert session.radial_sweep(0, 2, 0) is None
    assert session.last_profile is first
    assert session.sink.last.startswith("Radial sweep: step must be positive")


def test_histogram_reports_mode():
    session = _session(np.full((3, 3), 42, dtype=np.uint8))
    counts = session.histogram()
    assert counts[42] == 9
    assert session.sink.last == "Histogram: 9 pixels, most frequent luminance 42"


def test_pixel_inspection():
    session = _session(np.arange(12, dtype=np.uint8).reshape(3, 4))
    assert session.inspect_pixel(1, 2) == "x=1 y=2 val=9"
    assert session.sink.last == "x=1 y=2 val=9"
    assert session.pixel_text(10, 10) == ""


def test_open_file_reports_summary(tmp_path):
    rgb = np.zeros((3, 5, 3), dtype=np.uint8)
    rgb[..., 0] = 200
    path = tmp_path / "red.png"
    save_image(path, rgb)

    session = _session()
    assert session.open_file(path)
    assert np.array_equal(session.state.image, rgb)
    assert session.sink.last.startswith("Loaded red.png, 5 x 3, 3ch, uint8")


def test_open_missing_file_reports_error(tmp_path):
    session = _session()
    assert not session.open_file(tmp_path / "missing.png")
    assert session.sink.last.startswith("Open: File not found")
    assert not session.state.is_valid


def test_results_feed_subscribers():
    feed = ResultsFeed()
    seen = []
    feed.subscribe(seen.append)
    session = ViewerSession(sink=feed, plugin_dir=None)
    session.undo()
    feed.unsubscribe(seen.append)
    session.undo()
    assert seen == ["Nothing to undo"]
    assert len(feed) == 2


def test_close_drops_everything():
    session = _session(np.zeros((4, 4), dtype=np.uint8))
    _select(session, 0, 0, 2, 2)
    session.copy()
    session.close()
    assert not session.state.is_valid
    assert session.state.clipboard is None
    assert session.tracker.rois == []


@pytest.mark.parametrize(
    "operation",
    [
        lambda s: s.rotate90(),
        lambda s: s.flip_horizontal(),
        lambda s: s.flip_vertical(),
        lambda s: s.crop(SelectionRect(1, 1, 3, 3)),
        lambda s: s.resize("6,2"),
        lambda s: s.apply_plugin("invert"),
    ],
    ids=["rotate", "flip_h", "flip_v", "crop", "resize", "plugin"],
)
def test_each_edit_is_undone_by_one_step(operation):
    img = np.arange(16, dtype=np.uint8).reshape(4, 4)
    session = ViewerSession(plugin_dir=PLUGIN_DIR)
    session.load_array(img)

    assert operation(session)
    assert len(session.state.history) == 1
    assert not np.array_equal(session.state.image, img)

    assert session.undo()
    assert len(session.state.history) == 0
    assert np.array_equal(session.state.image, img)


def test_copy_whole_image_and_blend_onto_itself():
    img = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
    session = _session(img)
    session.select_all()
    assert session.copy()
    assert session.paste(dest=(0, 0), mode="blend")
    assert np.array_equal(session.state.image, img)
    assert len(session.state.history) == 1


def test_resize_of_int64_npy_file(tmp_path):
    path = tmp_path / "a.npy"
    np.save(path, np.arange(16, dtype=np.int64).reshape(4, 4) * 1000)
    session = _session()
    assert session.open_file(path)

    assert session.resize("8,8")
    assert session.state.image.shape == (8, 8)
    assert session.state.image.dtype == np.int64
    assert session.sink.last == "Resized to 8x8"


def test_circular_average_accepts_integral_float_radius():
    session = _session(np.full((5, 5), 40, dtype=np.uint8))
    sample = session.circular_average(1.0, center=(2, 2))
    assert sample == session.circular_average(1, center=(2, 2))
    assert sample.average == 40

    assert session.circular_average(1.5, center=(2, 2)) is None
    assert session.sink.last.startswith("Circular average: ")
