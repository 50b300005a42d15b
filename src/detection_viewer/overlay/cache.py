"""Most recent detection result for the current image."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from detection_viewer.overlay.filtering import RawDetectionSet
from detection_viewer.overlay.geometry import Size2D


@dataclass(frozen=True)
class CachedDetections:
    detections: RawDetectionSet
    natural_size: Size2D


class DetectionCache:
    """Holds at most one (detections, natural size) pair. Single-thread only."""

    def __init__(self) -> None:
        self._entry: Optional[CachedDetections] = None

    def store(self, detections: RawDetectionSet, natural_size: Size2D) -> CachedDetections:
        """Replace the cached pair.

        @param detections Detection set from the latest run.
        @param natural_size Natural size of the image it was run on.
        @return The stored entry.
        """
        entry = CachedDetections(detections, natural_size)
        self._entry = entry
        return entry

    def clear(self) -> None:
        self._entry = None

    def current(self) -> Optional[CachedDetections]:
        return self._entry

    @property
    def is_empty(self) -> bool:
        return self._entry is None
