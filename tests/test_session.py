"""
Tests for the overlay session event handling.
"""

import numpy as np
import pytest

from detection_viewer.overlay.errors import InvalidImageSize, MalformedDetectionSet
from detection_viewer.overlay.filtering import RawDetectionSet
from detection_viewer.overlay.geometry import Size2D
from detection_viewer.overlay.session import OverlaySession


class TestOverlaySession:
    def test_render_before_detection_is_empty(self, natural_size):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        result = session.render(Size2D(200, 150), 0.3)
        assert result.ok
        assert result.primitives == ()

    def test_detection_then_render(self, natural_size, dog_detections):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        assert session.on_detection_complete(dog_detections)
        result = session.render(Size2D(200, 150), 0.3)
        assert [p.label.text for p in result.primitives] == ["dog 80.0%"]

    def test_threshold_rerender_uses_cache(self, natural_size, mixed_detections):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        session.on_detection_complete(mixed_detections)
        assert len(session.render(Size2D(400, 300), 0.0).primitives) == 3
        assert len(session.render(Size2D(400, 300), 0.6).primitives) == 1
        assert len(session.render(Size2D(400, 300), 0.0).primitives) == 3

    def test_new_image_clears_cache(self, natural_size, dog_detections):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        session.on_detection_complete(dog_detections)
        session.on_image_loaded(Size2D(800, 600))
        assert session.cache.is_empty
        assert session.render(Size2D(200, 150), 0.0).primitives == ()

    def test_stale_completion_ignored(self, natural_size, dog_detections):
        session = OverlaySession()
        old = session.on_image_loaded(natural_size)
        session.on_image_loaded(Size2D(800, 600))
        assert not session.on_detection_complete(dog_detections, token=old)
        assert session.cache.is_empty

    def test_current_token_accepted(self, natural_size, dog_detections):
        session = OverlaySession()
        token = session.on_image_loaded(natural_size)
        assert session.on_detection_complete(dog_detections, token=token)
        assert session.cache.current().natural_size == natural_size

    def test_mapping_input(self, natural_size):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        session.on_detection_complete({"boxes": [0, 0, 1, 1], "scores": [0.5]})
        assert session.found_count() == 1

    def test_malformed_leaves_cache_empty(self, natural_size, dog_detections):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        session.on_detection_complete(dog_detections)
        with pytest.raises(MalformedDetectionSet):
            session.on_detection_complete({"boxes": [0, 0, 1], "scores": [0.5]})
        assert session.cache.is_empty
        assert session.render(Size2D(200, 150), 0.0).primitives == ()

    def test_invalid_image_size(self, dog_detections):
        session = OverlaySession()
        with pytest.raises(InvalidImageSize):
            session.on_image_loaded(Size2D(0, 100))
        assert session.natural_size is None
        with pytest.raises(InvalidImageSize):
            session.on_detection_complete(dog_detections)

    def test_summary_lines(self, natural_size, mixed_detections):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        session.on_detection_complete(mixed_detections)
        assert session.summary_lines() == [
            "Accuracy: 20.0% | cat | Box #0",
            "Accuracy: 90.0% | dog | Box #1",
            "Accuracy: 50.0% |  | Box #2",
        ]
        assert session.found_count() == 3

    def test_colors_survive_image_loads(self, natural_size, dog_detections):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        session.on_detection_complete(dog_detections)
        first = session.render(Size2D(200, 150), 0.0).primitives[0].rect.stroke_color
        session.on_image_loaded(natural_size)
        session.on_detection_complete(dog_detections)
        second = session.render(Size2D(200, 150), 0.0).primitives[0].rect.stroke_color
        assert first == second
        assert session.renderer.colors.known_labels() == ["dog"]

    def test_directly_built_set_renders(self, natural_size):
        session = OverlaySession()
        session.on_image_loaded(natural_size)
        raw = RawDetectionSet(np.array([0.0, 0.0, 0.5, 0.5]), np.array([0.8]), ("dog",))
        assert session.on_detection_complete(raw)
        assert len(session.render(Size2D(200, 150), 0.3).primitives) == 1

    def test_discard_image(self, natural_size, dog_detections):
        session = OverlaySession()
        token = session.on_image_loaded(natural_size)
        session.on_detection_complete(dog_detections)
        session.render(Size2D(200, 150), 0.0)
        session.discard_image()
        assert session.cache.is_empty
        assert session.natural_size is None
        assert session.renderer.colors.known_labels() == ["dog"]
        assert not session.on_detection_complete(dog_detections, token=token)
        assert session.cache.is_empty

    def test_reset(self, natural_size, dog_detections):
        session = OverlaySession()
        token = session.on_image_loaded(natural_size)
        session.on_detection_complete(dog_detections)
        session.render(Size2D(200, 150), 0.0)
        session.reset()
        assert session.cache.is_empty
        assert session.natural_size is None
        assert len(session.renderer.colors) == 0
        assert session.token > token
