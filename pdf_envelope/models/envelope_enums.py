# pdf_envelope/models/envelope_enums.py
from __future__ import annotations
from enum import Enum


class TextAlign(str, Enum):
    """Horizontal alignment of a text inside its slot."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class PipelineState(str, Enum):
    INIT = "init"
    COVER_GENERATED = "cover_generated"
    MERGED = "merged"
    OVERLAID = "overlaid"
    COMMITTED = "committed"
    FAILED = "failed"
