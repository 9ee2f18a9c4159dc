"""Qt-independent core: image state, editing, radial profiling, histogram.

Nothing in this package imports Qt, so it can be used from scripts and
tests without a display.
"""

from .errors import (
    ViewerError,
    ValidationError,
    ImageLoadError,
    ExportError,
    SelectionError,
    NoImageError,
    PluginError,
)
from .zoom import ZoomState, fit_scale, displayed_size, display_to_image, image_to_display
from .history import HistoryStack
from .image_state import ImageState
from .selection import SelectionRect, SelectionTracker, DragState
from .editing import BlendMode, copy_region, cut_region, paste, rotate90, flip_horizontal, flip_vertical, crop, parse_size, resize
from .histogram import luminance, luminance_histogram, normalize_histogram, histogram_stats
from .radial import (
    RadialSample,
    RadialProfile,
    radial_average,
    radial_sweep,
    profile_to_csv,
    write_profile_csv,
    read_profile_csv,
    profile_summary,
)
from .legacy_raw import RawLayout, load_legacy_raw
from .plugins import PluginHost
from .results import ResultsFeed, ResultsSink
from .session import ViewerSession

__all__ = [
    "ViewerError",
    "ValidationError",
    "ImageLoadError",
    "ExportError",
    "SelectionError",
    "NoImageError",
    "PluginError",
    "ZoomState",
    "fit_scale",
    "displayed_size",
    "display_to_image",
    "image_to_display",
    "HistoryStack",
    "ImageState",
    "SelectionRect",
    "SelectionTracker",
    "DragState",
    "BlendMode",
    "copy_region",
    "cut_region",
    "paste",
    "rotate90",
    "flip_horizontal",
    "flip_vertical",
    "crop",
    "parse_size",
    "resize",
    "luminance",
    "luminance_histogram",
    "normalize_histogram",
    "histogram_stats",
    "RadialSample",
    "RadialProfile",
    "radial_average",
    "radial_sweep",
    "profile_to_csv",
    "write_profile_csv",
    "read_profile_csv",
    "profile_summary",
    "RawLayout",
    "load_legacy_raw",
    "PluginHost",
    "ResultsFeed",
    "ResultsSink",
    "ViewerSession",
]
