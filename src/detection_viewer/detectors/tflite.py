"""SSD-style TFLite object detector."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import cv2
import numpy as np

from detection_viewer.config import DetectorConfig
from detection_viewer.detectors.base import Detector
from detection_viewer.overlay.filtering import RawDetectionSet


def load_labels(path: Path) -> Dict[int, str]:
    """Load a class-id to name map, one name per line.

    @param path Labels file path.
    @return Mapping of class id to label name.
    """
    labels: Dict[int, str] = {}
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            for idx, line in enumerate(f):
                name = line.strip()
                if not name:
                    continue
                labels[idx] = name
    return labels


def create_interpreter(model_path: Path):
    """Create a TFLite interpreter from tflite-runtime or TensorFlow.

    @param model_path Path to model file.
    @return Interpreter or None if neither runtime is installed.
    """
    try:
        from tflite_runtime.interpreter import Interpreter
    except ImportError:
        try:
            from tensorflow.lite.python.interpreter import Interpreter
        except ImportError:
            return None
    return Interpreter(model_path=str(model_path))


class TFLiteDetector(Detector):
    """Runs an SSD TFLite model and returns raw normalized boxes.

    SSD models emit (ymin, xmin, ymax, xmax); boxes are reordered to
    (x0, y0, x1, y1). No score threshold is applied here.
    """

    def __init__(self, config: DetectorConfig | None = None, interpreter=None) -> None:
        self.config = config or DetectorConfig()
        self._interpreter = interpreter
        self._labels: Optional[Dict[int, str]] = None

    def detect(self, image: np.ndarray) -> RawDetectionSet:
        """Run the model on an image.

        @param image Input image (BGR).
        @return Raw detection set with normalized boxes.
        """
        interpreter = self._get_interpreter()

        input_details = interpreter.get_input_details()[0]
        input_shape = input_details["shape"]
        target_h, target_w = int(input_shape[1]), int(input_shape[2])
        resized = cv2.resize(image, (target_w, target_h), interpolation=cv2.INTER_AREA)
        resized = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
        input_data = np.expand_dims(resized.astype(np.float32), axis=0)
        if input_details["dtype"] == np.uint8:
            input_data = np.clip(input_data, 0, 255).astype(np.uint8)
        else:
            input_data = input_data / 255.0

        interpreter.set_tensor(input_details["index"], input_data)
        interpreter.invoke()

        outputs = [interpreter.get_tensor(d["index"]) for d in interpreter.get_output_details()]
        if len(outputs) < 4:
            raise RuntimeError(f"Unexpected detector outputs: {len(outputs)} tensors")
        return self._decode(outputs)

    def _decode(self, outputs: List[np.ndarray]) -> RawDetectionSet:
        """Convert SSD output tensors into a detection set.

        @param outputs [boxes, classes, scores, count] tensors.
        @return RawDetectionSet.
        """
        boxes = np.asarray(outputs[0][0], dtype=np.float64)
        classes = np.asarray(outputs[1][0])
        scores = np.asarray(outputs[2][0], dtype=np.float64)
        count = min(int(np.asarray(outputs[3]).reshape(-1)[0]), len(scores))
        labels = self._get_labels()

        flat: List[float] = []
        names: List[str] = []
        for i in range(count):
            ymin, xmin, ymax, xmax = boxes[i]
            flat.extend([xmin, ymin, xmax, ymax])
            class_id = int(classes[i])
            names.append(labels.get(class_id, f"class_{class_id}"))
        return RawDetectionSet.from_sequences(flat, scores[:count], names)

    def _get_labels(self) -> Dict[int, str]:
        if self._labels is None:
            self._labels = load_labels(self.config.labels_path)
        return self._labels

    def _get_interpreter(self):
        """Create or reuse the interpreter.

        @return Interpreter with allocated tensors.
        """
        if self._interpreter is not None:
            return self._interpreter
        model_path = self.config.model_path
        if not model_path.exists():
            raise FileNotFoundError(f"Model not found: {model_path}")
        interpreter = create_interpreter(model_path)
        if interpreter is None:
            raise RuntimeError("No TFLite runtime available; install tflite-runtime")
        interpreter.allocate_tensors()
        self._interpreter = interpreter
        return interpreter
