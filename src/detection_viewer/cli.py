"""Command-line interface for the detection viewer."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from detection_viewer.config import AppConfig
from detection_viewer.detectors.base import Detector
from detection_viewer.detectors.precomputed import PrecomputedDetector, save_detections_json
from detection_viewer.detectors.tflite import TFLiteDetector
from detection_viewer.overlay.errors import OverlayError
from detection_viewer.overlay.filtering import filter_detections
from detection_viewer.overlay.geometry import Size2D
from detection_viewer.overlay.renderer import OverlayRenderer
from detection_viewer.overlay.session import OverlaySession
from detection_viewer.utils.annotate import compose_view, draw_primitives
from detection_viewer.utils.io import load_image, natural_size, save_image, timestamp_id
from detection_viewer.utils.logging_utils import (
    detections_to_dicts,
    iso_timestamp,
    log_jsonl,
    primitives_to_dicts,
)


def parse_size(value: str) -> Size2D:
    """Parse a WIDTHxHEIGHT string.

    @param value Size string such as "800x600".
    @return Size2D.
    """
    try:
        width, height = value.lower().split("x", 1)
        return Size2D(float(width), float(height))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="detection-viewer", description="Object detection overlay viewer"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gui = sub.add_parser("gui", help="Launch the GUI")
    gui.add_argument("--model", type=Path)
    gui.add_argument("--labels", type=Path)
    gui.add_argument("--detections", type=Path, help="Replay detections from a JSON file")

    analyze = sub.add_parser("analyze", help="Render the overlay for a single image")
    analyze.add_argument("--image", type=Path, required=True)
    source = analyze.add_mutually_exclusive_group()
    source.add_argument("--detections", type=Path, help="JSON with boxes/scores/labels")
    source.add_argument("--model", type=Path, help="TFLite detector model")
    analyze.add_argument("--labels", type=Path)
    analyze.add_argument("--threshold", type=float)
    analyze.add_argument("--container", type=parse_size, help="Display size, e.g. 800x600")
    analyze.add_argument("--save-annotated", action="store_true")
    analyze.add_argument("--save-detections", action="store_true")

    sub.add_parser("print-download-commands", help="Print model download commands")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint.

    @param argv Arguments (defaults to sys.argv).
    @return None
    """
    args = build_parser().parse_args(argv)

    if args.command == "gui":
        from detection_viewer.gui import launch_gui

        config = _config_for(args)
        launch_gui(config, _detector_for(args, config))
        return

    if args.command == "analyze":
        run_analyze(args)
        return

    if args.command == "print-download-commands":
        print_download_commands()
        return


def _config_for(args: argparse.Namespace) -> AppConfig:
    config = AppConfig()
    detector = config.detector
    if getattr(args, "model", None):
        detector = replace(detector, model_path=args.model)
    if getattr(args, "labels", None):
        detector = replace(detector, labels_path=args.labels)
    return replace(config, detector=detector)


def _detector_for(args: argparse.Namespace, config: AppConfig) -> Detector:
    if getattr(args, "detections", None):
        return PrecomputedDetector(args.detections)
    return TFLiteDetector(config.detector)


def run_analyze(args: argparse.Namespace) -> None:
    """Detect (or replay) one image and render its overlay.

    @param args Parsed CLI args.
    @return None
    """
    config = _config_for(args)
    threshold = config.viewer.default_threshold if args.threshold is None else args.threshold

    try:
        image = load_image(args.image)
        natural = natural_size(args.image, config.viewer.reference_dpi)
        session = OverlaySession(OverlayRenderer.from_config(config.viewer))
        session.on_image_loaded(natural)
        raw = _detector_for(args, config).detect(image)
        session.on_detection_complete(raw)
    except (FileNotFoundError, ValueError, RuntimeError, OverlayError) as exc:
        raise SystemExit(f"Error: {exc}") from exc

    container = args.container or natural
    result = session.render(container, threshold)
    if not result.ok:
        raise SystemExit(f"Error: {result.error}")

    annotated_path = None
    detections_path = None
    stamp = timestamp_id()

    if args.save_annotated:
        geometry, _ = session.renderer.geometry_for(natural, container)
        annotated = draw_primitives(compose_view(image, geometry), result.primitives)
        annotated_path = config.outputs_annotated / f"{args.image.stem}_{stamp}.png"
        save_image(annotated_path, annotated)

    if args.save_detections:
        detections_path = config.outputs_detections / f"{args.image.stem}_{stamp}.json"
        save_detections_json(detections_path, raw)

    record = {
        "timestamp": iso_timestamp(),
        "threshold": threshold,
        "found": len(raw),
        "shown": len(result.primitives),
        "fallback_geometry": result.used_fallback_geometry,
        "detections": detections_to_dicts(filter_detections(raw, threshold)),
        "primitives": primitives_to_dicts(result.primitives),
        "image": {
            "input": str(args.image),
            "annotated": str(annotated_path) if annotated_path else None,
            "detections": str(detections_path) if detections_path else None,
        },
    }
    log_jsonl(config.log_path, record)

    print(f"Found: {len(raw)} | shown at {threshold:.2f}: {len(result.primitives)}")
    for line in session.summary_lines():
        print(f"- {line}")
    for prim in result.primitives:
        rect = prim.rect
        print(
            f"  #{prim.index} '{prim.label.text}' at ({rect.left:.1f}, {rect.top:.1f}) "
            f"size {rect.width:.1f}x{rect.height:.1f}"
        )
    if annotated_path:
        print(f"Saved {annotated_path}")


def print_download_commands() -> None:
    """Print optional model download commands.

    @return None
    """
    commands = [
        "# SSD MobileNet v1 (COCO) TFLite detector - place at models/detector.tflite",
        "curl -L -o models/ssd_mobilenet.zip https://storage.googleapis.com/download.tensorflow.org/models/tflite/coco_ssd_mobilenet_v1_1.0_quant_2018_06_29.zip",
        "unzip -o models/ssd_mobilenet.zip -d models",
        "mv models/detect.tflite models/detector.tflite",
        "mv models/labelmap.txt models/labels.txt",
    ]
    print("\n".join(commands))


if __name__ == "__main__":
    main()
