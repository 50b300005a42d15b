"""Detector that replays results saved as JSON."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np

from detection_viewer.detectors.base import Detector
from detection_viewer.overlay.errors import MalformedDetectionSet
from detection_viewer.overlay.filtering import RawDetectionSet
from detection_viewer.utils.io import ensure_dir


def load_detections_json(path: Path) -> RawDetectionSet:
    """Read a {"boxes", "scores", "labels"} JSON file.

    @param path JSON file path.
    @return Validated RawDetectionSet.
    """
    if not path.exists():
        raise FileNotFoundError(f"Detections not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise MalformedDetectionSet(f"Expected a JSON object in {path}")
    return RawDetectionSet.from_sequences(
        data.get("boxes", []),
        data.get("scores", []),
        data.get("labels"),
    )


def save_detections_json(path: Path, raw: RawDetectionSet) -> None:
    """Write a detection set as JSON.

    @param path Output path.
    @param raw Detection set.
    @return None
    """
    ensure_dir(path.parent)
    record = {
        "boxes": [float(v) for v in raw.boxes],
        "scores": [float(v) for v in raw.scores],
        "labels": list(raw.labels),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(record, f, indent=2)


class PrecomputedDetector(Detector):
    """Returns the detections stored in a JSON sidecar file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def detect(self, image: np.ndarray) -> RawDetectionSet:
        return load_detections_json(self.path)
