"""Detector subpackage."""

from .base import Detector
from .precomputed import PrecomputedDetector, load_detections_json, save_detections_json
from .tflite import TFLiteDetector

__all__ = [
    "Detector",
    "PrecomputedDetector",
    "TFLiteDetector",
    "load_detections_json",
    "save_detections_json",
]
