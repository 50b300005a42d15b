"""Fit-to-container geometry (uniform scaling, centered)."""

from __future__ import annotations

from dataclasses import dataclass

from detection_viewer.overlay.errors import GeometryUnavailable, InvalidImageSize


@dataclass(frozen=True)
class Size2D:
    """Width/height pair in device-independent units."""

    width: float
    height: float

    def is_valid(self) -> bool:
        """Return True when both dimensions are positive.

        @return Validity flag.
        """
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class ViewGeometry:
    """Scale and centering offsets of an image inside its container.

    @field scale Uniform scale factor from natural to screen units.
    @field offset_x Horizontal padding left of the rendered image.
    @field offset_y Vertical padding above the rendered image.
    @field container_width Container width used for the fit.
    @field container_height Container height used for the fit.
    """

    scale: float
    offset_x: float
    offset_y: float
    container_width: float
    container_height: float

    @property
    def render_width(self) -> float:
        return self.container_width - 2.0 * self.offset_x

    @property
    def render_height(self) -> float:
        return self.container_height - 2.0 * self.offset_y

    def to_screen(self, x: float, y: float) -> tuple[float, float]:
        """Map a natural-image point into container coordinates.

        @param x Natural x coordinate.
        @param y Natural y coordinate.
        @return (x, y) in container space.
        """
        return self.offset_x + x * self.scale, self.offset_y + y * self.scale


def check_image_size(natural: Size2D) -> None:
    """Raise InvalidImageSize unless the natural size is usable.

    @param natural Natural image size.
    @return None
    """
    if not natural.is_valid():
        raise InvalidImageSize(natural.width, natural.height)


def resolve_geometry(natural: Size2D, container: Size2D) -> ViewGeometry:
    """Compute the uniform fit of an image inside a container.

    @param natural Natural image size.
    @param container Container size.
    @return ViewGeometry for the fit.
    """
    check_image_size(natural)
    if container.width <= 0 or container.height <= 0:
        raise GeometryUnavailable(container.width, container.height)

    scale = min(container.width / natural.width, container.height / natural.height)
    render_w = natural.width * scale
    render_h = natural.height * scale
    return ViewGeometry(
        scale=scale,
        offset_x=(container.width - render_w) / 2.0,
        offset_y=(container.height - render_h) / 2.0,
        container_width=container.width,
        container_height=container.height,
    )


def identity_geometry(natural: Size2D) -> ViewGeometry:
    """Geometry used before the container has been laid out.

    @param natural Natural image size, also used as the container.
    @return ViewGeometry with scale 1 and no offsets.
    """
    return resolve_geometry(natural, natural)
