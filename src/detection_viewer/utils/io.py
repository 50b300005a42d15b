"""I/O helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image

from detection_viewer.overlay.errors import InvalidImageSize
from detection_viewer.overlay.geometry import Size2D


def ensure_dir(path: Path) -> None:
    """Create a directory if it doesn't exist.

    @param path Directory path to create.
    @return None
    """
    path.mkdir(parents=True, exist_ok=True)


def load_image(path: Path) -> np.ndarray:
    """Load an image from disk (BGR).

    @param path Image path to load.
    @return Loaded image in BGR format.
    """
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Failed to read image: {path}")
    return image


def save_image(path: Path, image: np.ndarray) -> None:
    """Save an image to disk, creating parent directories if needed.

    @param path Output image path.
    @param image Image array to save (BGR).
    @return None
    """
    ensure_dir(path.parent)
    cv2.imwrite(str(path), image)


def timestamp_id() -> str:
    """Return a sortable timestamp string.

    @return UTC timestamp string (YYYYMMDD_HHMMSS_us).
    """
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")


def _axis_dpi(value, reference_dpi: float) -> float:
    try:
        dpi = float(value)
    except (TypeError, ValueError):
        return reference_dpi
    return dpi if dpi > 0 else reference_dpi


def natural_size(source: Union[Path, Image.Image], reference_dpi: float = 96.0) -> Size2D:
    """Return the image size in display units, honouring its DPI metadata.

    A 192 DPI image is shown at half its pixel size, as image viewers do.

    @param source Image path or opened PIL image.
    @param reference_dpi DPI at which one pixel is one display unit.
    @return Natural size.
    """
    if isinstance(source, Image.Image):
        return _size_from_pil(source, reference_dpi)
    if not source.exists():
        raise FileNotFoundError(f"Image not found: {source}")
    with Image.open(source) as pil:
        return _size_from_pil(pil, reference_dpi)


def _size_from_pil(pil: Image.Image, reference_dpi: float) -> Size2D:
    width, height = pil.size
    if width <= 0 or height <= 0:
        raise InvalidImageSize(width, height)
    dpi = pil.info.get("dpi") or (reference_dpi, reference_dpi)
    dpi_x = _axis_dpi(dpi[0], reference_dpi)
    dpi_y = _axis_dpi(dpi[1] if len(dpi) > 1 else dpi[0], reference_dpi)
    return Size2D(width * reference_dpi / dpi_x, height * reference_dpi / dpi_y)


def to_rgb(image_bgr: np.ndarray) -> np.ndarray:
    """Convert BGR to RGB.

    @param image_bgr Input image in BGR.
    @return Image converted to RGB.
    """
    return cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
