"""
Tests for detection sets and threshold filtering.
"""

import numpy as np
import pytest

from detection_viewer.overlay.errors import MalformedDetectionSet
from detection_viewer.overlay.filtering import RawDetectionSet, filter_detections


class TestRawDetectionSet:
    def test_from_sequences(self):
        raw = RawDetectionSet.from_sequences([1, 2, 3, 4, 5, 6, 7, 8], [0.1, 0.2], ["a"])
        assert len(raw) == 2
        assert raw.box(1) == (5.0, 6.0, 7.0, 8.0)
        assert raw.label(0) == "a"
        assert raw.label(1) == ""

    def test_accepts_numpy(self):
        raw = RawDetectionSet.from_sequences(
            np.array([[0, 0, 1, 1]], dtype=np.float32), np.array([0.5]), np.array(["x"])
        )
        assert len(raw) == 1
        assert raw.labels == ("x",)

    def test_none_label_is_empty(self):
        raw = RawDetectionSet.from_sequences([0, 0, 1, 1], [0.5], [None])
        assert raw.label(0) == ""

    def test_arrays_are_read_only(self):
        raw = RawDetectionSet.from_sequences([0, 0, 1, 1], [0.5])
        with pytest.raises(ValueError):
            raw.scores[0] = 1.0

    def test_boxes_not_multiple_of_four(self):
        with pytest.raises(MalformedDetectionSet):
            RawDetectionSet.from_sequences([0, 0, 1], [0.5])

    def test_scores_mismatch(self):
        with pytest.raises(MalformedDetectionSet):
            RawDetectionSet.from_sequences([0, 0, 1, 1], [0.5, 0.6])

    def test_labels_longer_than_scores(self):
        with pytest.raises(MalformedDetectionSet):
            RawDetectionSet.from_sequences([0, 0, 1, 1], [0.5], ["a", "b"])

    def test_non_numeric(self):
        with pytest.raises(MalformedDetectionSet):
            RawDetectionSet.from_sequences(["a", "b", "c", "d"], [0.5])

    def test_direct_construction_validates(self):
        with pytest.raises(MalformedDetectionSet):
            RawDetectionSet(np.array([0.0, 0.0, 1.0, 1.0]), np.array([0.5, 0.6]))

    def test_direct_construction_freezes_arrays(self):
        raw = RawDetectionSet(np.array([0.0, 0.0, 1.0, 1.0]), np.array([0.5]), ("a",))
        assert raw.labels == ("a",)
        with pytest.raises(ValueError):
            raw.boxes[0] = 2.0

    @pytest.mark.parametrize(
        "boxes, scores",
        [
            ([0, 0, float("inf"), 10], [0.5]),
            ([0, float("nan"), 10, 10], [0.5]),
            ([0, 0, 10, 10], [float("nan")]),
        ],
    )
    def test_non_finite_rejected(self, boxes, scores):
        with pytest.raises(MalformedDetectionSet):
            RawDetectionSet.from_sequences(boxes, scores)

    def test_empty(self):
        assert len(RawDetectionSet.empty()) == 0


class TestFilterDetections:
    def test_preserves_index_order(self):
        raw = RawDetectionSet.from_sequences([0] * 12, [0.2, 0.9, 0.5])
        result = filter_detections(raw, 0.4)
        assert [d.index for d in result] == [1, 2]
        assert [d.score for d in result] == [0.9, 0.5]

    def test_threshold_is_inclusive(self):
        raw = RawDetectionSet.from_sequences([0] * 4, [0.5])
        assert len(filter_detections(raw, 0.5)) == 1

    def test_missing_label_kept(self, mixed_detections):
        result = filter_detections(mixed_detections, 0.0)
        assert [d.label for d in result] == ["cat", "dog", ""]

    def test_out_of_range_thresholds(self, mixed_detections):
        assert len(filter_detections(mixed_detections, -3.0)) == 3
        assert filter_detections(mixed_detections, 7.5) == []

    def test_idempotent(self, mixed_detections):
        assert filter_detections(mixed_detections, 0.3) == filter_detections(mixed_detections, 0.3)

    def test_monotonic(self, mixed_detections):
        low = {d.index for d in filter_detections(mixed_detections, 0.3)}
        high = {d.index for d in filter_detections(mixed_detections, 0.6)}
        assert high <= low
