"""Configuration objects and paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


ROOT_DIR = Path(__file__).resolve().parents[2]
OUTPUT_DIR = ROOT_DIR / "outputs"
LOG_DIR = ROOT_DIR / "logs"
MODELS_DIR = ROOT_DIR / "models"


@dataclass(frozen=True)
class OverlayStyle:
    """Drawing parameters for overlay primitives.

    @field label_offset Distance the label sits above its box.
    @field stroke_thickness Box outline width.
    @field corner_radius Box corner radius.
    @field font_size Label font size.
    @field label_padding Padding around label text.
    @field text_color Label foreground (RGB).
    @field min_extent Smallest drawn box width/height.
    """

    label_offset: float = 18.0
    stroke_thickness: int = 2
    corner_radius: int = 4
    font_size: int = 12
    label_padding: int = 2
    text_color: Tuple[int, int, int] = (255, 255, 0)
    min_extent: float = 1.0


@dataclass(frozen=True)
class ViewerConfig:
    """Viewer behaviour.

    @field default_threshold Initial slider value.
    @field normalized_tolerance Max magnitude for a normalized box.
    @field color_band Half-open per-channel range for label colors.
    @field unlabeled_color Color for detections without a label.
    @field reference_dpi DPI that maps one pixel to one display unit.
    @field canvas_size Initial canvas width/height.
    @field style OverlayStyle.
    """

    default_threshold: float = 0.3
    normalized_tolerance: float = 1.01
    color_band: Tuple[int, int] = (64, 224)
    unlabeled_color: Tuple[int, int, int] = (255, 0, 0)
    reference_dpi: float = 96.0
    canvas_size: Tuple[int, int] = (960, 640)
    style: OverlayStyle = field(default_factory=OverlayStyle)


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for the bundled TFLite detector.

    @field model_path TFLite model path.
    @field labels_path Optional labels file path.
    """

    model_path: Path = MODELS_DIR / "detector.tflite"
    labels_path: Path = MODELS_DIR / "labels.txt"


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration.

    @field viewer ViewerConfig.
    @field detector DetectorConfig.
    @field log_path Default JSONL log path.
    @field events_log_path GUI event JSONL log path.
    @field outputs_annotated Annotated output directory.
    @field outputs_detections Saved detection JSON directory.
    """

    viewer: ViewerConfig = field(default_factory=ViewerConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)

    log_path: Path = LOG_DIR / "detections.jsonl"
    events_log_path: Path = LOG_DIR / "events.jsonl"
    outputs_annotated: Path = OUTPUT_DIR / "annotated"
    outputs_detections: Path = OUTPUT_DIR / "detections"
