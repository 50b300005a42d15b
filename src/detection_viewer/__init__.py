"""Detection Viewer package."""

from .config import AppConfig
from .overlay import OverlayRenderer, OverlaySession, RawDetectionSet, Size2D

__all__ = ["AppConfig", "OverlayRenderer", "OverlaySession", "RawDetectionSet", "Size2D"]
