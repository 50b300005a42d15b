"""Screen-space overlay primitives from cached detections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from detection_viewer.config import OverlayStyle, ViewerConfig
from detection_viewer.overlay.colors import RGB, LabelColorAssigner
from detection_viewer.overlay.coords import DEFAULT_TOLERANCE, normalize_box
from detection_viewer.overlay.errors import GeometryUnavailable, OverlayError
from detection_viewer.overlay.filtering import Detection, RawDetectionSet, filter_detections
from detection_viewer.overlay.geometry import (
    Size2D,
    ViewGeometry,
    identity_geometry,
    resolve_geometry,
)


@dataclass(frozen=True)
class RectPrimitive:
    """Box outline in container coordinates."""

    left: float
    top: float
    width: float
    height: float
    stroke_color: RGB
    stroke_thickness: int = 2
    corner_radius: int = 4


@dataclass(frozen=True)
class TextPrimitive:
    """Label text drawn on a filled background."""

    left: float
    top: float
    text: str
    background_color: RGB
    foreground_color: RGB = (255, 255, 0)
    font_size: int = 12
    padding: int = 2


@dataclass(frozen=True)
class OverlayPrimitive:
    """Rectangle and label for one detection.

    @field index Original detection index.
    @field rect Box outline.
    @field label Text annotation above the box.
    """

    index: int
    rect: RectPrimitive
    label: TextPrimitive


@dataclass(frozen=True)
class RenderResult:
    """Outcome of a render at the UI boundary.

    @field primitives Drawable primitives (empty on failure).
    @field error Typed failure, or None.
    @field used_fallback_geometry True when the container was not laid out.
    """

    primitives: Tuple[OverlayPrimitive, ...] = ()
    error: Optional[OverlayError] = None
    used_fallback_geometry: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def format_label(label: str, score: float) -> str:
    """Return the annotation text for a detection.

    @param label Label text, may be empty.
    @param score Confidence score in [0, 1].
    @return "label 80.0%" or "80.0%".
    """
    percent = f"{score * 100:.1f}%"
    return f"{label} {percent}" if label else percent


@dataclass
class OverlayRenderer:
    """Turns a detection set into primitives for a given container and threshold.

    Output depends only on the four render inputs and the color table, so a
    slider move can re-render from cached detections.
    """

    colors: LabelColorAssigner = field(default_factory=LabelColorAssigner)
    style: OverlayStyle = field(default_factory=OverlayStyle)
    tolerance: float = DEFAULT_TOLERANCE

    @classmethod
    def from_config(cls, viewer: ViewerConfig) -> "OverlayRenderer":
        colors = LabelColorAssigner(viewer.color_band, viewer.unlabeled_color)
        return cls(colors, viewer.style, viewer.normalized_tolerance)

    def geometry_for(self, natural: Size2D, container: Size2D) -> Tuple[ViewGeometry, bool]:
        """Resolve geometry, falling back to the natural size as container.

        @param natural Natural image size.
        @param container Container size.
        @return (geometry, used_fallback).
        """
        try:
            return resolve_geometry(natural, container), False
        except GeometryUnavailable:
            return identity_geometry(natural), True

    def render(
        self,
        raw: RawDetectionSet,
        natural: Size2D,
        container: Size2D,
        threshold: float,
    ) -> List[OverlayPrimitive]:
        """Render detections passing the threshold.

        @param raw Cached detection set.
        @param natural Natural image size.
        @param container Container size.
        @param threshold Minimum score.
        @return Primitives in original detection order.
        """
        geometry, _ = self.geometry_for(natural, container)
        return self.render_geometry(raw, natural, geometry, threshold)

    def render_geometry(
        self,
        raw: RawDetectionSet,
        natural: Size2D,
        geometry: ViewGeometry,
        threshold: float,
    ) -> List[OverlayPrimitive]:
        """Render against an already resolved geometry.

        @param raw Detection set.
        @param natural Natural image size.
        @param geometry Resolved view geometry.
        @param threshold Minimum score.
        @return Primitives in original detection order.
        """
        return [
            self._primitive(det, natural, geometry)
            for det in filter_detections(raw, threshold)
        ]

    def _primitive(
        self, det: Detection, natural: Size2D, geometry: ViewGeometry
    ) -> OverlayPrimitive:
        style = self.style
        box = normalize_box(det.box, natural, self.tolerance)
        left, top = geometry.to_screen(box.left, box.top)
        width = max(style.min_extent, box.width * geometry.scale)
        height = max(style.min_extent, box.height * geometry.scale)
        color = self.colors.color_for(det.label)

        rect = RectPrimitive(
            left=left,
            top=top,
            width=width,
            height=height,
            stroke_color=color,
            stroke_thickness=style.stroke_thickness,
            corner_radius=style.corner_radius,
        )
        text = TextPrimitive(
            left=left,
            top=max(0.0, top - style.label_offset),
            text=format_label(det.label, det.score),
            background_color=color,
            foreground_color=style.text_color,
            font_size=style.font_size,
            padding=style.label_padding,
        )
        return OverlayPrimitive(det.index, rect, text)


def render_overlay(
    raw: RawDetectionSet,
    natural: Size2D,
    container: Size2D,
    threshold: float,
    renderer: Optional[OverlayRenderer] = None,
) -> RenderResult:
    """Render without raising; failures come back in the result.

    @param raw Detection set.
    @param natural Natural image size.
    @param container Container size.
    @param threshold Minimum score.
    @param renderer Renderer to use (a fresh one if omitted).
    @return RenderResult.
    """
    renderer = renderer or OverlayRenderer()
    try:
        geometry, fallback = renderer.geometry_for(natural, container)
        primitives = renderer.render_geometry(raw, natural, geometry, threshold)
    except OverlayError as exc:
        return RenderResult(error=exc)
    return RenderResult(tuple(primitives), None, fallback)
