"""Utility helpers."""

from .annotate import compose_view, draw_primitives
from .io import load_image, natural_size, save_image
from .logging_utils import log_jsonl

__all__ = ["compose_view", "draw_primitives", "load_image", "natural_size", "save_image", "log_jsonl"]
