"""Overlay engine: geometry, normalization, filtering, colors, rendering."""

from .cache import CachedDetections, DetectionCache
from .colors import LabelColorAssigner
from .coords import Box, CoordinateSpace, classify_box, normalize_box
from .errors import GeometryUnavailable, InvalidImageSize, MalformedDetectionSet, OverlayError
from .filtering import Detection, RawDetectionSet, filter_detections
from .geometry import Size2D, ViewGeometry, identity_geometry, resolve_geometry
from .renderer import (
    OverlayPrimitive,
    OverlayRenderer,
    RectPrimitive,
    RenderResult,
    TextPrimitive,
    render_overlay,
)
from .session import OverlaySession

__all__ = [
    "Box",
    "CachedDetections",
    "CoordinateSpace",
    "Detection",
    "DetectionCache",
    "GeometryUnavailable",
    "InvalidImageSize",
    "LabelColorAssigner",
    "MalformedDetectionSet",
    "OverlayError",
    "OverlayPrimitive",
    "OverlayRenderer",
    "OverlaySession",
    "RawDetectionSet",
    "RectPrimitive",
    "RenderResult",
    "Size2D",
    "TextPrimitive",
    "ViewGeometry",
    "classify_box",
    "filter_detections",
    "identity_geometry",
    "normalize_box",
    "render_overlay",
    "resolve_geometry",
]
