"""Logging helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable

from detection_viewer.overlay.filtering import Detection
from detection_viewer.overlay.renderer import OverlayPrimitive
from detection_viewer.utils.io import ensure_dir


def iso_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp string.

    @return Timestamp in UTC (YYYY-MM-DDTHH:MM:SSZ).
    """
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def log_jsonl(path: Path, record: Dict[str, Any]) -> None:
    """Append a record to a JSONL file.

    @param path JSONL file path.
    @param record Serializable dict to append.
    @return None
    """
    ensure_dir(path.parent)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=True) + "\n")


def detections_to_dicts(detections: Iterable[Detection]) -> list[dict]:
    """Convert filtered detections to serializable dictionaries.

    @param detections Iterable of Detection objects.
    @return List of dicts with index, label, score, box.
    """
    out = []
    for det in detections:
        out.append(
            {
                "index": det.index,
                "label": det.label,
                "score": float(det.score),
                "box": [float(v) for v in det.box],
            }
        )
    return out


def primitives_to_dicts(primitives: Iterable[OverlayPrimitive]) -> list[dict]:
    """Convert overlay primitives to serializable dictionaries.

    @param primitives Iterable of OverlayPrimitive.
    @return List of dicts with index, rect, text.
    """
    out = []
    for prim in primitives:
        rect = prim.rect
        out.append(
            {
                "index": prim.index,
                "rect": [round(v, 2) for v in (rect.left, rect.top, rect.width, rect.height)],
                "color": list(rect.stroke_color),
                "text": prim.label.text,
            }
        )
    return out
