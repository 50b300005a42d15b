"""Box coordinate normalization (normalized vs absolute pixels)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from detection_viewer.overlay.geometry import Size2D

DEFAULT_TOLERANCE = 1.01


class CoordinateSpace(Enum):
    """How a raw box is expressed."""

    NORMALIZED = "normalized"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class Box:
    """Box in absolute pixel coordinates of the natural image."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


def classify_box(raw: Sequence[float], tolerance: float = DEFAULT_TOLERANCE) -> CoordinateSpace:
    """Decide whether a raw (x0, y0, x1, y1) box is normalized.

    @param raw Four raw box values.
    @param tolerance Largest magnitude still treated as normalized.
    @return CoordinateSpace for the box.
    """
    if all(abs(float(v)) <= tolerance for v in raw):
        return CoordinateSpace.NORMALIZED
    return CoordinateSpace.ABSOLUTE


def normalize_box(
    raw: Sequence[float], natural: Size2D, tolerance: float = DEFAULT_TOLERANCE
) -> Box:
    """Convert a raw box to absolute natural-image pixels.

    Ordering is not enforced; a box with right < left is returned as-is.

    @param raw Four raw box values (x0, y0, x1, y1).
    @param natural Natural image size.
    @param tolerance Normalization tolerance.
    @return Box in absolute pixels.
    """
    x0, y0, x1, y1 = (float(v) for v in raw)
    if classify_box((x0, y0, x1, y1), tolerance) is CoordinateSpace.NORMALIZED:
        return Box(
            x0 * natural.width,
            y0 * natural.height,
            x1 * natural.width,
            y1 * natural.height,
        )
    return Box(x0, y0, x1, y1)
