"""
Tests for raw box classification and normalization.
"""

import pytest

from detection_viewer.overlay.coords import (
    Box,
    CoordinateSpace,
    classify_box,
    normalize_box,
)
from detection_viewer.overlay.geometry import Size2D


class TestClassifyBox:
    def test_normalized(self):
        assert classify_box((0.1, 0.2, 0.5, 0.6)) is CoordinateSpace.NORMALIZED

    def test_tolerance_above_one(self):
        assert classify_box((0.0, 0.0, 1.005, 1.01)) is CoordinateSpace.NORMALIZED

    def test_absolute(self):
        assert classify_box((20, 20, 100, 60)) is CoordinateSpace.ABSOLUTE

    def test_single_large_value_is_absolute(self):
        assert classify_box((0.1, 0.2, 0.5, 2.0)) is CoordinateSpace.ABSOLUTE

    def test_negative_magnitude(self):
        assert classify_box((-0.05, 0.0, 0.5, 0.5)) is CoordinateSpace.NORMALIZED
        assert classify_box((-5, 0.0, 0.5, 0.5)) is CoordinateSpace.ABSOLUTE

    def test_custom_tolerance(self):
        assert classify_box((0, 0, 1.5, 1.5), tolerance=2.0) is CoordinateSpace.NORMALIZED


class TestNormalizeBox:
    def test_scales_normalized(self):
        box = normalize_box((0.1, 0.2, 0.5, 0.6), Size2D(200, 100))
        assert box.as_tuple() == pytest.approx((20, 20, 100, 60))

    def test_absolute_passes_through(self):
        box = normalize_box((20, 20, 100, 60), Size2D(200, 100))
        assert box == Box(20, 20, 100, 60)

    def test_inverted_box_not_reordered(self):
        box = normalize_box((100, 60, 20, 20), Size2D(200, 100))
        assert box.width == -80
        assert box.height == -40
