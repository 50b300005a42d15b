"""Raw detection arrays and threshold filtering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from detection_viewer.overlay.errors import MalformedDetectionSet


def _frozen_array(values: Sequence[float], name: str) -> np.ndarray:
    try:
        array = np.array(values, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise MalformedDetectionSet(f"{name} must be numeric: {exc}") from exc
    if not np.all(np.isfinite(array)):
        raise MalformedDetectionSet(f"{name} contains non-finite values")
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class RawDetectionSet:
    """Parallel detection arrays as produced by a detector.

    @field boxes Flat float array of length 4n (x0, y0, x1, y1 per box).
    @field scores Float array of length n.
    @field labels Up to n label strings; missing entries read as "".
    """

    boxes: np.ndarray
    scores: np.ndarray
    labels: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        box_array = _frozen_array(self.boxes, "boxes")
        score_array = _frozen_array(self.scores, "scores")
        labels = () if self.labels is None else self.labels
        label_tuple = tuple("" if lab is None else str(lab) for lab in labels)

        if box_array.size % 4 != 0:
            raise MalformedDetectionSet(
                f"boxes length {box_array.size} is not a multiple of 4"
            )
        count = box_array.size // 4
        if score_array.size != count:
            raise MalformedDetectionSet(
                f"scores length {score_array.size} does not match {count} boxes"
            )
        if len(label_tuple) > count:
            raise MalformedDetectionSet(
                f"labels length {len(label_tuple)} exceeds {count} boxes"
            )
        object.__setattr__(self, "boxes", box_array)
        object.__setattr__(self, "scores", score_array)
        object.__setattr__(self, "labels", label_tuple)

    @classmethod
    def from_sequences(
        cls,
        boxes: Sequence[float],
        scores: Sequence[float],
        labels: Optional[Sequence[Optional[str]]] = None,
    ) -> "RawDetectionSet":
        """Build a detection set from plain sequences.

        @param boxes Flat box values.
        @param scores Per-box scores.
        @param labels Optional per-box labels.
        @return RawDetectionSet.
        """
        return cls(boxes, scores, () if labels is None else labels)

    @classmethod
    def empty(cls) -> "RawDetectionSet":
        return cls.from_sequences([], [], [])

    def __len__(self) -> int:
        return int(self.scores.size)

    def box(self, index: int) -> Tuple[float, float, float, float]:
        base = index * 4
        x0, y0, x1, y1 = self.boxes[base : base + 4]
        return (float(x0), float(y0), float(x1), float(y1))

    def label(self, index: int) -> str:
        return self.labels[index] if index < len(self.labels) else ""


@dataclass(frozen=True)
class Detection:
    """One detection surviving the threshold.

    @field index Position in the raw arrays.
    @field box Raw (x0, y0, x1, y1) values.
    @field score Confidence score.
    @field label Label text, "" when the detector gave none.
    """

    index: int
    box: Tuple[float, float, float, float]
    score: float
    label: str


def filter_detections(raw: RawDetectionSet, threshold: float) -> List[Detection]:
    """Return detections with score >= threshold in original index order.

    @param raw Detection set.
    @param threshold Minimum score (any float).
    @return Ordered list of Detection.
    """
    threshold = float(threshold)
    detections: List[Detection] = []
    for index in range(len(raw)):
        score = float(raw.scores[index])
        if score < threshold:
            continue
        detections.append(Detection(index, raw.box(index), score, raw.label(index)))
    return detections
