"""
Tests for image I/O, the OpenCV drawing surface and JSONL logging.
"""

import json

import cv2
import numpy as np
import pytest
from PIL import Image

from detection_viewer.overlay.errors import InvalidImageSize
from detection_viewer.overlay.filtering import RawDetectionSet, filter_detections
from detection_viewer.overlay.geometry import Size2D, resolve_geometry
from detection_viewer.overlay.renderer import OverlayRenderer
from detection_viewer.utils.annotate import compose_view, draw_primitives
from detection_viewer.utils.io import load_image, natural_size
from detection_viewer.utils.logging_utils import (
    detections_to_dicts,
    log_jsonl,
    primitives_to_dicts,
)


class TestNaturalSize:
    def test_pixels_without_dpi(self, image_file):
        assert natural_size(image_file) == Size2D(400, 300)

    def test_high_dpi_shrinks(self, tmp_path):
        path = tmp_path / "hidpi.jpg"
        Image.new("RGB", (400, 300)).save(path, dpi=(192, 192))
        size = natural_size(path)
        assert size.width == pytest.approx(200)
        assert size.height == pytest.approx(150)

    def test_pil_image(self):
        image = Image.new("RGB", (100, 50))
        image.info["dpi"] = (48, 96)
        assert natural_size(image) == Size2D(200, 50)

    def test_zero_dpi_ignored(self):
        image = Image.new("RGB", (100, 50))
        image.info["dpi"] = (0, 0)
        assert natural_size(image) == Size2D(100, 50)

    def test_zero_sized_image(self):
        with pytest.raises(InvalidImageSize):
            natural_size(Image.new("RGB", (0, 0)))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            natural_size(tmp_path / "missing.png")


class TestLoadImage:
    def test_load(self, image_file):
        assert load_image(image_file).shape == (300, 400, 3)

    def test_unreadable(self, tmp_path):
        path = tmp_path / "bad.png"
        path.write_bytes(b"not an image")
        with pytest.raises(ValueError):
            load_image(path)


class TestAnnotate:
    def test_compose_view_letterboxes(self):
        image = np.full((100, 200, 3), 255, dtype=np.uint8)
        geometry = resolve_geometry(Size2D(200, 100), Size2D(100, 100))
        view = compose_view(image, geometry)
        assert view.shape == (100, 100, 3)
        assert view[10, 50].tolist() == [0, 0, 0]
        assert view[50, 50].tolist() == [255, 255, 255]

    def test_draw_primitives(self):
        raw = RawDetectionSet.from_sequences([20, 40, 80, 90], [0.9])
        prims = OverlayRenderer().render(raw, Size2D(100, 100), Size2D(100, 100), 0.5)
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        annotated = draw_primitives(image, prims)
        assert image.sum() == 0
        # unlabeled sentinel is red, drawn in BGR
        assert annotated[90, 50].tolist() == [0, 0, 255]


class TestLogging:
    def test_log_jsonl_appends(self, tmp_path):
        path = tmp_path / "nested" / "log.jsonl"
        log_jsonl(path, {"a": 1})
        log_jsonl(path, {"a": 2})
        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["a"] for line in lines] == [1, 2]

    def test_detections_to_dicts(self, mixed_detections):
        dicts = detections_to_dicts(filter_detections(mixed_detections, 0.4))
        assert dicts[0] == {"index": 1, "label": "dog", "score": 0.9, "box": [0.5, 0.5, 0.75, 1.0]}

    def test_primitives_to_dicts(self, dog_detections):
        prims = OverlayRenderer().render(dog_detections, Size2D(400, 300), Size2D(200, 150), 0.3)
        record = primitives_to_dicts(prims)[0]
        assert record["rect"] == [0, 0, 100, 75]
        assert record["text"] == "dog 80.0%"
        json.dumps(record)
