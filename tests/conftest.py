"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from dataclasses import replace

import cv2
import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from detection_viewer.config import AppConfig  # noqa: E402
from detection_viewer.overlay import RawDetectionSet, Size2D  # noqa: E402


@pytest.fixture
def natural_size():
    return Size2D(400, 300)


@pytest.fixture
def dog_detections():
    """Single normalized box covering the top-left quarter."""
    return RawDetectionSet.from_sequences([0, 0, 0.5, 0.5], [0.8], ["dog"])


@pytest.fixture
def mixed_detections():
    """Three detections: pixel boxes, normalized box, missing label."""
    return RawDetectionSet.from_sequences(
        [
            10, 20, 110, 220,
            0.5, 0.5, 0.75, 1.0,
            300, 100, 300, 100,
        ],
        [0.2, 0.9, 0.5],
        ["cat", "dog"],
    )


@pytest.fixture
def image_file(tmp_path):
    """A 400x300 BGR PNG on disk."""
    image = np.full((300, 400, 3), 128, dtype=np.uint8)
    path = tmp_path / "scene.png"
    cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def tmp_config(tmp_path):
    """AppConfig writing logs and outputs under tmp_path."""
    return replace(
        AppConfig(),
        log_path=tmp_path / "logs" / "detections.jsonl",
        events_log_path=tmp_path / "logs" / "events.jsonl",
        outputs_annotated=tmp_path / "outputs" / "annotated",
        outputs_detections=tmp_path / "outputs" / "detections",
    )
