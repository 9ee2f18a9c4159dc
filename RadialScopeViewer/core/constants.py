"""Application-wide constants for RadialScopeViewer.

This module contains shared constants used across the application.
"""

from pathlib import Path

# Zoom
ZOOM_STEP = 1.2
MIN_ZOOM_SCALE = 0.01
MAX_ZOOM_SCALE = 64.0

# Undo history depth
MAX_HISTORY = 16

# Value written into cut regions (per channel, uint8 images)
ERASE_VALUE = 255

# Legacy raw detector format (fixed layout)
RAW_HEADER_BYTES = 3072
RAW_WIDTH = 2082
RAW_HEIGHT = 2217
RAW_PIXEL_BYTES = 4  # B, G, R, A
RAW_EXTENSIONS = (".edf", ".raw")

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Radial profiling
MIN_RADIAL_SAMPLES = 8
CSV_HEADER = "R,avg,samples"
CSV_FLOAT_FORMAT = "{:.6f}"

# Filter plugins
PLUGIN_ENTRY_POINT = "apply_filter"
DEFAULT_PLUGIN_DIR = Path(__file__).resolve().parents[1] / "filter_plugins"
