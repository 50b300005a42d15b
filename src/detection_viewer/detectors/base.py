"""Detector base classes."""

from __future__ import annotations

import numpy as np

from detection_viewer.overlay.filtering import RawDetectionSet


class Detector:
    """Base detector interface.

    Detectors return every candidate unfiltered; thresholding is the
    viewer's job so the slider can re-filter without re-running the model.
    """

    def detect(self, image: np.ndarray) -> RawDetectionSet:
        """Run detection on an image.

        @param image Input image (BGR).
        @return Raw parallel boxes/scores/labels.
        """
        raise NotImplementedError
