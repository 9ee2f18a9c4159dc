"""User-operation layer for one open document.

ViewerSession wires ImageState, SelectionTracker and PluginHost together and
turns each user action into one synchronous operation: validate, compute a
new image value, install it through ``ImageState.set_image``, report a line
to the results sink. Failures are caught here, reported, and leave the state
untouched; nothing propagates to the UI event loop.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar, Union

import numpy as np

from . import editing
from .constants import MAX_HISTORY, DEFAULT_PLUGIN_DIR
from .editing import BlendMode
from .errors import NoImageError, SelectionError, ValidationError, ViewerError
from .histogram import luminance_histogram
from .image_io import load_image, load_summary
from .image_state import ImageState
from .legacy_raw import DEFAULT_LAYOUT, RawLayout
from .plugins import PluginHost
from .radial import RadialProfile, RadialSample, as_int, radial_average, radial_sweep, profile_summary, write_profile_csv
from .results import ResultsFeed, ResultsSink
from .selection import SelectionRect, SelectionTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _format_value(v, dtype) -> str:
    def _scalar(x):
        if np.issubdtype(dtype, np.floating):
            return f"{float(x):.3f}"
        return str(int(x))

    if np.ndim(v) == 0:
        return _scalar(v)
    return "(" + ",".join(_scalar(x) for x in np.ravel(v)) + ")"


def _format_center(center) -> str:
    return f"({center[0]:g}, {center[1]:g})"


class ViewerSession:
    """One open viewer session.

    Args:
        sink: Results sink receiving status lines (a ResultsFeed by default)
        max_history: Undo depth
        raw_layout: Layout used when opening legacy raw files
        plugin_dir: Directory scanned for filter plugins; None disables discovery
    """

    def __init__(
        self,
        sink: Optional[ResultsSink] = None,
        max_history: int = MAX_HISTORY,
        raw_layout: RawLayout = DEFAULT_LAYOUT,
        plugin_dir: Optional[Union[str, Path]] = DEFAULT_PLUGIN_DIR,
    ):
        self.sink = sink if sink is not None else ResultsFeed()
        self.state = ImageState(max_history=max_history)
        self.tracker = SelectionTracker(self.state)
        self.plugins = PluginHost()
        self.raw_layout = raw_layout
        self.blend_mode = BlendMode.BLEND
        self.last_profile: Optional[RadialProfile] = None
        if plugin_dir is not None:
            self.plugins.discover(plugin_dir)

    # --- plumbing ---
    def report(self, line: str) -> None:
        self.sink.append(line)

    def _run(self, label: str, fn: Callable[[], T]) -> Optional[T]:
        try:
            return fn()
        except ViewerError as exc:
            logger.warning("%s: %s", label, exc)
            self.report(f"{label}: {exc}")
            return None

    def _require_image(self) -> np.ndarray:
        if not self.state.is_valid:
            raise NoImageError("No image loaded")
        return self.state.image

    def _require_selection(self) -> SelectionRect:
        if not self.tracker.has_selection():
            raise SelectionError("No selection")
        return self.tracker.selection

    def _replace(self, new_image: np.ndarray) -> None:
        old_size = self.state.size
        self.state.set_image(new_image)
        if self.state.size != old_size:
            self.tracker.clear_selection()

    # --- loading ---
    def open_file(self, path: Union[str, Path]) -> bool:
        def op():
            arr = load_image(path, self.raw_layout)
            self.state.set_image(arr, path=str(Path(path).resolve()))
            self.tracker.clear_selection()
            self.report(load_summary(path, arr))
            return True

        return bool(self._run("Open", op))

    def load_array(self, arr: np.ndarray, name: str = "array") -> None:
        self.state.set_image(np.asarray(arr), path=name)
        self.tracker.clear_selection()

    # --- zoom ---
    def zoom_in(self) -> float:
        return self.state.zoom_in()

    def zoom_out(self) -> float:
        return self.state.zoom_out()

    def zoom_fit(self) -> float:
        return self.state.zoom_fit()

    def set_display_size(self, width: int, height: int) -> None:
        self.state.set_display_size(width, height)

    # --- selection ---
    def press(self, px: float, py: float) -> None:
        self.tracker.press(px, py)

    def move(self, px: float, py: float) -> Optional[SelectionRect]:
        return self.tracker.move(px, py)

    def release(self, px: float, py: float) -> Optional[SelectionRect]:
        rect = self.tracker.release(px, py)
        if rect is not None and not rect.is_empty:
            self.report(f"ROI #{len(self.tracker.rois)}: {rect}")
        return rect

    def select_all(self) -> Optional[SelectionRect]:
        return self.tracker.select_all()

    def clear_selection(self) -> None:
        self.tracker.clear_selection()

    # --- clipboard ---
    def copy(self) -> bool:
        def op():
            clip = editing.copy_region(self._require_image(), self._require_selection())
            self.state.clipboard = clip
            self.report(f"Copied {clip.shape[1]}x{clip.shape[0]} region")
            return True

        return bool(self._run("Copy", op))

    def cut(self) -> bool:
        def op():
            clip, new_image = editing.cut_region(self._require_image(), self._require_selection())
            self.state.clipboard = clip
            self._replace(new_image)
            self.report(f"Cut {clip.shape[1]}x{clip.shape[0]} region")
            return True

        return bool(self._run("Cut", op))

    def paste(
        self, dest: Optional[tuple[int, int]] = None, mode: Union[BlendMode, str, None] = None
    ) -> bool:
        """Paste the clipboard; dest defaults to the selection origin or (0, 0)."""

        def op():
            image = self._require_image()
            if self.state.clipboard is None:
                raise SelectionError("Clipboard is empty")
            blend = BlendMode.parse(mode) if mode is not None else self.blend_mode
            if dest is not None:
                target = dest
            elif self.tracker.has_selection():
                target = (self.tracker.selection.x1, self.tracker.selection.y1)
            else:
                target = (0, 0)
            self._replace(editing.paste(image, self.state.clipboard, target, blend))
            self.report(f"Pasted at ({target[0]}, {target[1]}) [{blend.name}]")
            return True

        return bool(self._run("Paste", op))

    def set_blend_mode(self, mode: Union[BlendMode, str]) -> None:
        self.blend_mode = BlendMode.parse(mode)

    # --- transforms ---
    def _transform(self, label: str, fn: Callable[[np.ndarray], np.ndarray]) -> bool:
        def op():
            self._replace(fn(self._require_image()))
            return True

        return bool(self._run(label, op))

    def rotate90(self) -> bool:
        return self._transform("Rotate", editing.rotate90)

    def flip_horizontal(self) -> bool:
        return self._transform("Flip", editing.flip_horizontal)

    def flip_vertical(self) -> bool:
        return self._transform("Flip", editing.flip_vertical)

    def crop(self, rect: Optional[SelectionRect] = None) -> bool:
        def op():
            image = self._require_image()
            target = rect if rect is not None else self.tracker.selection
            if target is None:
                raise SelectionError("No selection")
            new_image = editing.crop(image, target)
            self.state.set_image(new_image)
            self.tracker.clear_selection()
            self.report(f"Cropped to {target.width}x{target.height}")
            return True

        return bool(self._run("Crop", op))

    def resize(self, text: str) -> bool:
        def op():
            image = self._require_image()
            w, h = editing.parse_size(text)
            self._replace(editing.resize(image, w, h))
            self.report(f"Resized to {w}x{h}")
            return True

        return bool(self._run("Resize", op))

    def undo(self) -> bool:
        if not self.state.undo():
            self.report("Nothing to undo")
            return False
        self.tracker.clear_selection()
        return True

    # --- plugins ---
    def load_plugin(self, path: Union[str, Path]) -> Optional[str]:
        return self._run("Plugin", lambda: self.plugins.load(path))

    def apply_plugin(self, name: str) -> bool:
        def op():
            self._replace(self.plugins.apply(name, self._require_image()))
            self.report(f"Applied filter {name}")
            return True

        return bool(self._run("Plugin", op))

    # --- analysis ---
    def circular_average(self, radius, center=None) -> Optional[RadialSample]:
        def op():
            image = self._require_image()
            r = as_int(radius, "radius")
            if r <= 0:
                raise ValidationError(f"radius must be positive, got {r}")
            sample = radial_average(image, r, center)
            where = _format_center(center) if center is not None else "image center"
            if sample.is_valid:
                self.report(f"Circular average R={r} at {where}: {sample.average:.3f} ({sample.sample_count} samples)")
            else:
                self.report(f"Circular average R={r} at {where}: no pixels inside the image")
            return sample

        return self._run("Circular average", op)

    def radial_sweep(self, r_min, r_max, step, center=None) -> Optional[RadialProfile]:
        def op():
            profile = radial_sweep(self._require_image(), r_min, r_max, step, center)
            self.last_profile = profile
            s = profile_summary(profile)
            line = (
                f"Radial sweep at {_format_center(profile.center)}: {s['radii']} radii, "
                f"{s['valid']} with samples"
            )
            if s["valid"]:
                line += f", peak {s['max']:.3f} at R={s['peak_radius']}, min {s['min']:.3f}"
            self.report(line)
            return profile

        return self._run("Radial sweep", op)

    def export_profile(self, path: Union[str, Path], profile: Optional[RadialProfile] = None) -> bool:
        def op():
            target = profile if profile is not None else self.last_profile
            if target is None:
                raise ViewerError("No radial profile to export")
            written = write_profile_csv(path, target)
            self.report(f"Exported {len(target)} radial samples to {written}")
            return True

        return bool(self._run("Export", op))

    def histogram(self) -> Optional[np.ndarray]:
        def op():
            counts = luminance_histogram(self._require_image())
            self.report(f"Histogram: {int(counts.sum())} pixels, most frequent luminance {int(np.argmax(counts))}")
            return counts

        return self._run("Histogram", op)

    def pixel_text(self, px: float, py: float) -> str:
        """Status text for the pixel under a display position ('' outside)."""
        ix, iy = self.state.display_to_image(px, py)
        v = self.state.pixel_at(ix, iy)
        if v is None:
            return ""
        return f"x={ix} y={iy} val={_format_value(v, self.state.image.dtype)}"

    def inspect_pixel(self, px: float, py: float) -> str:
        text = self.pixel_text(px, py)
        if text:
            self.report(text)
        return text

    # --- teardown ---
    def close(self) -> None:
        self.plugins.close()
        self.state.clear()
        self.tracker.clear_selection()
        self.tracker.rois.clear()
        self.last_profile = None
