"""Raster drawing surface for overlay primitives (OpenCV)."""

from __future__ import annotations

from typing import Iterable

import cv2
import numpy as np

from detection_viewer.overlay.colors import to_bgr
from detection_viewer.overlay.geometry import ViewGeometry
from detection_viewer.overlay.renderer import OverlayPrimitive

FONT = cv2.FONT_HERSHEY_SIMPLEX
# Hershey scale 1.0 is roughly 22 px tall.
FONT_PX_PER_SCALE = 22.0


def compose_view(image: np.ndarray, geometry: ViewGeometry, background=(0, 0, 0)) -> np.ndarray:
    """Fit an image into a container-sized canvas, centered.

    @param image Input image (BGR).
    @param geometry Geometry of the fit.
    @param background Fill color (BGR).
    @return Container-sized BGR image.
    """
    cw = max(1, int(round(geometry.container_width)))
    ch = max(1, int(round(geometry.container_height)))
    canvas = np.zeros((ch, cw, 3), dtype=np.uint8)
    canvas[:] = background

    rw = max(1, int(round(geometry.render_width)))
    rh = max(1, int(round(geometry.render_height)))
    resized = cv2.resize(image, (rw, rh), interpolation=cv2.INTER_AREA)
    x0 = int(round(geometry.offset_x))
    y0 = int(round(geometry.offset_y))
    x1 = min(cw, x0 + rw)
    y1 = min(ch, y0 + rh)
    canvas[y0:y1, x0:x1] = resized[: y1 - y0, : x1 - x0]
    return canvas


def draw_primitives(image: np.ndarray, primitives: Iterable[OverlayPrimitive]) -> np.ndarray:
    """Return a copy of the image annotated with overlay primitives.

    @param image Container-sized image (BGR).
    @param primitives Primitives from the overlay renderer.
    @return Annotated image copy.
    """
    annotated = image.copy()
    for prim in primitives:
        rect = prim.rect
        color = to_bgr(rect.stroke_color)
        x0, y0 = int(round(rect.left)), int(round(rect.top))
        x1, y1 = int(round(rect.left + rect.width)), int(round(rect.top + rect.height))
        cv2.rectangle(annotated, (x0, y0), (x1, y1), color, rect.stroke_thickness)

        label = prim.label
        scale = label.font_size / FONT_PX_PER_SCALE
        (tw, th), baseline = cv2.getTextSize(label.text, FONT, scale, 1)
        pad = label.padding
        lx, ly = int(round(label.left)), int(round(label.top))
        cv2.rectangle(
            annotated,
            (lx, ly),
            (lx + tw + 2 * pad, ly + th + baseline + 2 * pad),
            to_bgr(label.background_color),
            -1,
        )
        cv2.putText(
            annotated,
            label.text,
            (lx + pad, ly + pad + th),
            FONT,
            scale,
            to_bgr(label.foreground_color),
            1,
            cv2.LINE_AA,
        )
    return annotated
