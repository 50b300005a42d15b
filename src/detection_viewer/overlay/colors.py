"""Deterministic per-label colors, memoized for a session."""

from __future__ import annotations

import random
import zlib
from typing import Dict, List, Tuple

RGB = Tuple[int, int, int]

DEFAULT_BAND = (64, 224)
UNLABELED_COLOR: RGB = (255, 0, 0)


class LabelColorAssigner:
    """Maps label text to a stable RGB color.

    Each channel is drawn from the half-open ``band`` by an RNG seeded with
    the label's CRC-32, so colors stay mid-range and readable on dark and
    light images. Unlabeled detections share ``sentinel``. Not thread-safe:
    the session owns it on one thread.
    """

    def __init__(self, band: Tuple[int, int] = DEFAULT_BAND, sentinel: RGB = UNLABELED_COLOR) -> None:
        low, high = band
        if not 0 <= low < high <= 256:
            raise ValueError(f"Invalid color band: {band}")
        self.band = (int(low), int(high))
        self.sentinel = sentinel
        self._table: Dict[str, RGB] = {}

    def color_for(self, label: str) -> RGB:
        """Return the session color for a label.

        @param label Label text (may be empty).
        @return RGB tuple.
        """
        if not label:
            return self.sentinel
        color = self._table.get(label)
        if color is None:
            color = self._derive(label)
            self._table[label] = color
        return color

    def known_labels(self) -> List[str]:
        return list(self._table)

    def reset(self) -> None:
        """Forget all assigned colors (new session).

        @return None
        """
        self._table.clear()

    def __len__(self) -> int:
        return len(self._table)

    def _derive(self, label: str) -> RGB:
        rng = random.Random(zlib.crc32(label.encode("utf-8")))
        low, high = self.band
        return (rng.randrange(low, high), rng.randrange(low, high), rng.randrange(low, high))


def to_hex(color: RGB) -> str:
    """Format an RGB tuple as a Tk color string.

    @param color RGB tuple.
    @return "#rrggbb" string.
    """
    r, g, b = color
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def to_bgr(color: RGB) -> Tuple[int, int, int]:
    r, g, b = color
    return (int(b), int(g), int(r))
