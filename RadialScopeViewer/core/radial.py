"""Circular-average sampling and multi-radius sweeps.

The sampler walks ``N = max(8, round(2*pi*R))`` equally spaced angles on a
circle, rounds each position to the nearest pixel and averages the
luminance of the distinct pixels that fall inside the image. Sampling is
deliberately nearest-pixel (no interpolation) so results are reproducible.

CSV layout written by ``profile_to_csv``::

    R,avg,samples
    0,12.000000,1
    5,,0          <- no pixel of the circle was inside the image
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np
import polars as pl

from .constants import MIN_RADIAL_SAMPLES, CSV_HEADER, CSV_FLOAT_FORMAT
from .errors import ExportError, ValidationError
from .histogram import luminance

logger = logging.getLogger(__name__)

Center = Tuple[float, float]


@dataclass(frozen=True)
class RadialSample:
    radius: int
    average: float
    sample_count: int

    @property
    def is_valid(self) -> bool:
        return self.sample_count > 0 and math.isfinite(self.average)


def no_result(radius: int) -> RadialSample:
    """Sentinel for a circle with no pixel inside the image."""
    return RadialSample(radius, float("nan"), 0)


@dataclass
class RadialProfile:
    """Samples ordered by strictly increasing radius."""

    center: Center
    samples: List[RadialSample] = field(default_factory=list)

    def __iter__(self) -> Iterator[RadialSample]:
        return iter(self.samples)

    def __len__(self) -> int:
        return len(self.samples)

    def radii(self) -> np.ndarray:
        return np.array([s.radius for s in self.samples], dtype=np.int64)

    def averages(self) -> np.ndarray:
        return np.array([s.average for s in self.samples], dtype=np.float64)

    def counts(self) -> np.ndarray:
        return np.array([s.sample_count for s in self.samples], dtype=np.int64)


def as_int(value, name: str) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {value!r}") from None


def default_center(image: np.ndarray) -> Center:
    h, w = image.shape[:2]
    return (w / 2.0, h / 2.0)


def sample_budget(radius: int) -> int:
    """Number of angular steps used for a circle of the given radius."""
    return max(MIN_RADIAL_SAMPLES, int(round(2.0 * math.pi * radius)))


def _round_half_away(v: np.ndarray) -> np.ndarray:
    return (np.sign(v) * np.floor(np.abs(v) + 0.5)).astype(np.int64)


def circle_pixels(radius: int, center: Center, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Distinct in-bounds pixel coordinates visited by the sampler.

    Returns:
        (xs, ys) integer arrays; empty when the circle misses the image
    """
    cx, cy = center
    empty = (np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64))
    # Bounding box vs. the pixel rectangle [0, w-1] x [0, h-1]
    if cx + radius < 0 or cx - radius > width - 1:
        return empty
    if cy + radius < 0 or cy - radius > height - 1:
        return empty

    n = sample_budget(radius)
    theta = 2.0 * math.pi * np.arange(n) / n
    xs = _round_half_away(cx + radius * np.cos(theta))
    ys = _round_half_away(cy + radius * np.sin(theta))
    inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    if not inside.any():
        return empty
    # A coordinate hit by several angles counts once
    linear = np.unique(ys[inside] * width + xs[inside])
    return linear % width, linear // width


def radial_average(image: np.ndarray, radius, center: Optional[Center] = None) -> RadialSample:
    """Average luminance on a circle of integer radius.

    Args:
        image: (H, W[, C]) array
        radius: Integer radius >= 0
        center: (cx, cy) in image coordinates; defaults to (W/2, H/2)

    Returns:
        RadialSample; NaN average and zero count when no sample hit the image
    """
    r = as_int(radius, "radius")
    if r < 0:
        raise ValidationError(f"radius must be >= 0, got {r}")
    if center is None:
        center = default_center(image)
    h, w = image.shape[:2]
    xs, ys = circle_pixels(r, (float(center[0]), float(center[1])), w, h)
    if xs.size == 0:
        return no_result(r)
    values = np.asarray(image)[ys, xs]
    # (n,) or (n, C) -> (1, n[, C]) so luminance() sees an image row
    lum = luminance(values[None, ...])
    return RadialSample(r, float(lum.sum() / xs.size), int(xs.size))


def validate_sweep(r_min, r_max, step) -> tuple[int, int, int]:
    r_min = as_int(r_min, "Rmin")
    r_max = as_int(r_max, "Rmax")
    step = as_int(step, "step")
    if step <= 0:
        raise ValidationError(f"step must be positive, got {step}")
    if r_min < 0:
        raise ValidationError(f"Rmin must be >= 0, got {r_min}")
    if r_max < r_min:
        raise ValidationError(f"Rmax ({r_max}) must be >= Rmin ({r_min})")
    return r_min, r_max, step


def radial_sweep(image: np.ndarray, r_min, r_max, step, center: Optional[Center] = None) -> RadialProfile:
    """Sample ``radial_average`` for R = r_min, r_min+step, ... <= r_max.

    Parameters are validated before any sampling; invalid input raises
    ValidationError and produces no partial profile.
    """
    r_min, r_max, step = validate_sweep(r_min, r_max, step)
    if center is None:
        center = default_center(image)
    center = (float(center[0]), float(center[1]))
    profile = RadialProfile(center=center)
    for r in range(r_min, r_max + 1, step):
        profile.samples.append(radial_average(image, r, center))
    logger.debug("sweep %d..%d step %d at %s: %d samples", r_min, r_max, step, center, len(profile))
    return profile


def profile_summary(profile: RadialProfile) -> dict:
    """Valid-radius count, peak radius and average range of a profile."""
    valid = [s for s in profile if s.is_valid]
    if not valid:
        return {"radii": len(profile), "valid": 0, "peak_radius": None, "min": None, "max": None}
    peak = max(valid, key=lambda s: s.average)
    return {
        "radii": len(profile),
        "valid": len(valid),
        "peak_radius": peak.radius,
        "min": min(s.average for s in valid),
        "max": peak.average,
    }


def profile_to_csv(profile: Union[RadialProfile, List[RadialSample]]) -> str:
    """Render a profile as ``R,avg,samples`` CSV text (trailing newline)."""
    lines = [CSV_HEADER]
    for s in profile:
        avg = CSV_FLOAT_FORMAT.format(s.average) if math.isfinite(s.average) else ""
        lines.append(f"{s.radius},{avg},{s.sample_count}")
    return "\n".join(lines) + "\n"


def write_profile_csv(path: Union[str, Path], profile: RadialProfile) -> Path:
    """Write the profile CSV; raises ExportError on I/O failure."""
    path = Path(path)
    try:
        path.write_text(profile_to_csv(profile), encoding="utf-8")
    except OSError as exc:
        raise ExportError(f"Cannot write {path}: {exc}") from exc
    logger.info("exported %d radial samples to %s", len(profile), path)
    return path


def read_profile_csv(path: Union[str, Path]) -> List[RadialSample]:
    """Parse a file written by ``write_profile_csv`` (blank avg -> NaN)."""
    try:
        df = pl.read_csv(
            str(path),
            schema_overrides={"R": pl.Int64, "avg": pl.Float64, "samples": pl.Int64},
        )
    except pl.exceptions.PolarsError as exc:
        raise ValidationError(f"Malformed profile CSV {path}: {exc}") from exc
    if df.columns != CSV_HEADER.split(","):
        raise ValidationError(f"Unexpected CSV header in {path}: {','.join(df.columns)}")
    df = df.with_columns(pl.col("avg").fill_null(float("nan")))
    return [RadialSample(int(r), float(a), int(n)) for r, a, n in df.iter_rows()]
