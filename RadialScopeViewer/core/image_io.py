"""Image I/O utilities for loading images and reading metadata.

This module provides functions for:
- Loading images from files (legacy raw, OpenCV, OpenImageIO, NumPy)
- Validating image file extensions
- Extracting basic image metadata and EXIF tags for the load summary

All functions are UI-independent. Decode failures raise ImageLoadError.
"""

from io import StringIO
from contextlib import redirect_stdout, redirect_stderr
from pathlib import Path
from typing import Union

import cv2
import exifread
import numpy as np

from .errors import ImageLoadError
from .legacy_raw import DEFAULT_LAYOUT, RawLayout, is_legacy_raw, load_legacy_raw

LDR_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}
HDR_EXTENSIONS = {".exr", ".hdr"}


def cv2_imread_unicode(path: str):
    data = np.fromfile(path, dtype=np.uint8)
    return cv2.imdecode(data, cv2.IMREAD_UNCHANGED)


def _validate_shape(arr: np.ndarray, path: str) -> np.ndarray:
    if arr.ndim < 2 or arr.ndim > 3:
        raise ImageLoadError(f"{Path(path).name}: expected a 2-D or 3-D array, got shape {arr.shape}")
    if arr.ndim == 3 and arr.shape[2] not in (1, 2, 3, 4):
        raise ImageLoadError(f"{Path(path).name}: channel count must be 1-4, got {arr.shape[2]}")
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[:, :, 0]
    return arr


def load_image(path: Union[str, Path], raw_layout: RawLayout = DEFAULT_LAYOUT) -> np.ndarray:
    """Load an image file into a NumPy array.

    Supported inputs:
      - .edf, .raw: legacy fixed-layout BGRA format, returned as gray RGBA uint8
      - .exr, .hdr: read with OpenImageIO in the file's own dtype
      - .npy: loaded via numpy.load and returned as-is
      - other common extensions: read with OpenCV; color images are
        converted to RGB or RGBA (OpenCV's BGR/BGRA order is swapped)

    Args:
        path: Path to the image file
        raw_layout: Layout used for legacy raw files

    Returns:
        np.ndarray: (H, W) or (H, W, C) image

    Raises:
        ImageLoadError: Missing file, unsupported format or decode failure
    """
    path_str = str(path)
    p = Path(path_str)
    if not p.is_file():
        raise ImageLoadError(f"File not found: {path_str}")
    ext = p.suffix.lower()

    if is_legacy_raw(p):
        return load_legacy_raw(p, raw_layout)

    if ext in HDR_EXTENSIONS:
        import OpenImageIO as oiio

        img = oiio.ImageInput.open(path_str)
        if img is None:
            raise ImageLoadError(f"Cannot open image: {path_str} ({oiio.geterror()})")
        try:
            arr = img.read_image()
        finally:
            img.close()
        if arr is None:
            raise ImageLoadError(f"Cannot decode image: {path_str}")
        return _validate_shape(np.asarray(arr), path_str)

    if ext == ".npy":
        try:
            arr = np.load(path_str)
        except (OSError, ValueError) as exc:
            raise ImageLoadError(f"Cannot open image: {path_str} ({exc})") from exc
        return _validate_shape(arr, path_str)

    if ext in LDR_EXTENSIONS:
        img = cv2_imread_unicode(path_str)
        if img is None:
            raise ImageLoadError(f"Cannot open image: {path_str}")
        if img.ndim == 3 and img.shape[2] == 4:
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        elif img.ndim == 3 and img.shape[2] == 3:
            img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        return _validate_shape(img, path_str)

    raise ImageLoadError(f"Cannot open image: {path_str} (unsupported format)")


def save_image(path: Union[str, Path], arr: np.ndarray) -> None:
    """Write an image with OpenCV (RGB/RGBA are swapped back to BGR/BGRA)."""
    out = np.ascontiguousarray(arr)
    if out.ndim == 3 and out.shape[2] == 3:
        out = cv2.cvtColor(out, cv2.COLOR_RGB2BGR)
    elif out.ndim == 3 and out.shape[2] == 4:
        out = cv2.cvtColor(out, cv2.COLOR_RGBA2BGRA)
    ok, buf = cv2.imencode(Path(path).suffix or ".png", out)
    if not ok:
        raise ImageLoadError(f"Cannot encode image for {path}")
    buf.tofile(str(path))


def is_image_file(path: Union[str, Path]) -> bool:
    """Return True if the given path has a supported image file suffix.

    This is a lightweight check that relies solely on the filename suffix
    (case-insensitive). It does not attempt to open the file.
    """
    ext = Path(path).suffix.lower()
    return ext in LDR_EXTENSIONS or ext in HDR_EXTENSIONS or ext == ".npy" or is_legacy_raw(path)


def _format_file_size(file_size: int) -> str:
    if file_size < 1024:
        return f"{file_size} B"
    if file_size < 1024 * 1024:
        return f"{file_size / 1024:.1f} KB"
    if file_size < 1024 * 1024 * 1024:
        return f"{file_size / (1024 * 1024):.1f} MB"
    return f"{file_size / (1024 * 1024 * 1024):.2f} GB"


def _is_binary_tag(tag: str) -> bool:
    skip_keywords = ["thumbnail", "makernote", "printim"]
    return any(keyword in tag.lower() for keyword in skip_keywords) or tag.startswith("Info.")


def _is_printable_text(text: str, min_ratio: float = 0.8) -> bool:
    if not text:
        return False
    printable_count = sum(1 for c in text if c.isprintable() or c in "\r\n\t")
    return printable_count / len(text) >= min_ratio


def get_image_metadata(path: Union[str, Path], arr: np.ndarray = None) -> dict:
    """Return a dictionary of image metadata.

    Basic keys: ``Filepath``, ``FileSize``, ``Format``, ``Size``,
    ``Channels`` and ``DataType`` (the latter three from ``arr`` when given).
    For JPEG/TIFF files, EXIF tags read with ``exifread`` are added with
    spaces in tag names replaced by underscores.
    """
    metadata = {}
    path_obj = Path(path)
    metadata["Filepath"] = str(path_obj.resolve())
    try:
        metadata["FileSize"] = _format_file_size(path_obj.stat().st_size)
    except OSError:
        pass
    metadata["Format"] = path_obj.suffix.lstrip(".").upper() or "Unknown"

    if arr is not None:
        h, w = arr.shape[:2]
        metadata["Size"] = f"{w} x {h}"
        metadata["Channels"] = 1 if arr.ndim == 2 else arr.shape[2]
        metadata["DataType"] = str(arr.dtype)

    if path_obj.suffix.lower() not in {".jpg", ".jpeg", ".tif", ".tiff"}:
        return metadata

    try:
        with open(path_obj, "rb") as f:
            # Suppress exifread's debug messages
            with redirect_stdout(StringIO()), redirect_stderr(StringIO()):
                tags = exifread.process_file(f, details=False)
    except OSError as e:
        metadata["Error (EXIF)"] = str(e)
        return metadata

    for tag, value in tags.items():
        if _is_binary_tag(tag):
            continue
        value_str = str(value)
        if isinstance(getattr(value, "values", None), bytes):
            continue
        if not _is_printable_text(value_str):
            continue
        metadata[tag.replace(" ", "_")] = value_str
    return metadata


def load_summary(path: Union[str, Path], arr: np.ndarray) -> str:
    """One-line human readable summary for the results feed."""
    md = get_image_metadata(path, arr)
    parts = [Path(path).name, md.get("Size", "?"), f"{md.get('Channels', '?')}ch", md.get("DataType", "?")]
    if "FileSize" in md:
        parts.append(md["FileSize"])
    camera = md.get("Image_Model")
    if camera:
        parts.append(camera)
    return "Loaded " + ", ".join(parts)
