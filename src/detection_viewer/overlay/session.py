"""Event-facing overlay session: image loaded, detection complete, render."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from detection_viewer.overlay.cache import DetectionCache
from detection_viewer.overlay.errors import InvalidImageSize
from detection_viewer.overlay.filtering import RawDetectionSet
from detection_viewer.overlay.geometry import Size2D, check_image_size
from detection_viewer.overlay.renderer import OverlayRenderer, RenderResult, render_overlay

DetectionInput = Union[RawDetectionSet, Mapping[str, Any]]


def coerce_detections(value: DetectionInput) -> RawDetectionSet:
    """Accept a RawDetectionSet or a boxes/scores/labels mapping.

    @param value Detection result.
    @return Validated RawDetectionSet.
    """
    if isinstance(value, RawDetectionSet):
        return value
    boxes = value.get("boxes")
    scores = value.get("scores")
    return RawDetectionSet.from_sequences(
        [] if boxes is None else boxes,
        [] if scores is None else scores,
        value.get("labels"),
    )


class OverlaySession:
    """Owns the detection cache and color table for one viewer session.

    All methods must be called from the same thread. Each image load issues
    a token; a detection completion carrying an older token is stale and is
    dropped, so renders never mix a new image with old detections.
    """

    def __init__(self, renderer: Optional[OverlayRenderer] = None) -> None:
        self.renderer = renderer or OverlayRenderer()
        self.cache = DetectionCache()
        self.natural_size: Optional[Size2D] = None
        self._token = 0

    @property
    def token(self) -> int:
        return self._token

    def on_image_loaded(self, natural_size: Size2D) -> int:
        """Start a new image: drop cached detections and validate its size.

        @param natural_size Natural size of the new image.
        @return Load token to pass back with the detection result.
        """
        self._token += 1
        self.cache.clear()
        self.natural_size = None
        check_image_size(natural_size)
        self.natural_size = natural_size
        return self._token

    def discard_image(self) -> None:
        """Drop the current image after a failed load; colors are kept.

        @return None
        """
        self._token += 1
        self.cache.clear()
        self.natural_size = None

    def on_detection_complete(self, detections: DetectionInput, token: Optional[int] = None) -> bool:
        """Cache a finished detection run for the current image.

        @param detections Detection result.
        @param token Load token the run was started with (None = current).
        @return False if the result was stale and ignored.
        """
        if token is not None and token != self._token:
            return False
        if self.natural_size is None:
            raise InvalidImageSize(0, 0)
        self.cache.clear()
        raw = coerce_detections(detections)
        self.cache.store(raw, self.natural_size)
        return True

    def render(self, container: Size2D, threshold: float) -> RenderResult:
        """Render the cached detections.

        @param container Current container size.
        @param threshold Slider threshold.
        @return RenderResult (empty when nothing is cached).
        """
        entry = self.cache.current()
        if entry is None:
            return RenderResult()
        return render_overlay(
            entry.detections, entry.natural_size, container, threshold, self.renderer
        )

    def found_count(self) -> int:
        entry = self.cache.current()
        return 0 if entry is None else len(entry.detections)

    def summary_lines(self) -> List[str]:
        """One line per cached detection, in index order, regardless of threshold.

        @return Lines such as "Accuracy: 80.0% | dog | Box #0".
        """
        entry = self.cache.current()
        if entry is None:
            return []
        raw = entry.detections
        return [
            f"Accuracy: {float(raw.scores[i]) * 100:.1f}% | {raw.label(i)} | Box #{i}"
            for i in range(len(raw))
        ]

    def reset(self) -> None:
        """Start a new session.

        @return None
        """
        self._token += 1
        self.cache.clear()
        self.natural_size = None
        self.renderer.colors.reset()
