"""Typed failures raised by the overlay engine."""

from __future__ import annotations


class OverlayError(Exception):
    """Base class for overlay engine failures."""


class InvalidImageSize(OverlayError, ValueError):
    """Natural image width or height is not positive."""

    def __init__(self, width: float, height: float) -> None:
        super().__init__(f"Invalid image size: {width}x{height}")
        self.width = width
        self.height = height


class GeometryUnavailable(OverlayError):
    """Display container has not been laid out yet."""

    def __init__(self, width: float, height: float) -> None:
        super().__init__(f"Container not laid out: {width}x{height}")
        self.width = width
        self.height = height


class MalformedDetectionSet(OverlayError, ValueError):
    """Detection arrays do not line up."""
