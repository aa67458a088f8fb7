"""
Live-feedback payloads for in-flight gestures. Previews are never persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .types import Rect, Stroke, TextElement


class PreviewKind(Enum):
    STROKE = "stroke"
    RECTANGLE = "rectangle"
    TEXT_CURSOR = "text_cursor"
    TEXT_PREVIEW = "text_preview"
    ERASER_SELECTION = "eraser_selection"


@dataclass
class RectanglePreview:
    rect: Rect
    color: str
    stroke_width: float


@dataclass
class TextCursor:
    x: float
    y: float
    font_size: float


PreviewData = Union[Stroke, RectanglePreview, TextCursor, TextElement, Rect]


@dataclass
class Preview:
    """Preview payload tagged by kind."""
    kind: PreviewKind
    data: PreviewData


__all__ = [
    'PreviewKind',
    'RectanglePreview',
    'TextCursor',
    'PreviewData',
    'Preview',
]
