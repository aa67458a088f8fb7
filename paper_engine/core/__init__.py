"""
Core document model.

- types: element union, paper, grid settings
- preview: live-feedback payloads for in-flight gestures
- geometry: erase-by-rectangle algorithm
- history: bounded snapshot undo/redo
- grid: grid validation, cycling and line layout
- serializer: JSON form of papers
"""

from .types import (
    ElementKind,
    GridType,
    Point,
    Rect,
    Stroke,
    Rectangle,
    TextElement,
    Element,
    EraseRequest,
    GridSettings,
    Paper,
    SavedPaperInfo,
    generate_id,
)
from .preview import Preview, PreviewKind, RectanglePreview, TextCursor
from .geometry import erase_elements
from .history import PaperHistory
from .serializer import PaperFormatError, dumps_paper, loads_paper

__all__ = [
    'ElementKind',
    'GridType',
    'Point',
    'Rect',
    'Stroke',
    'Rectangle',
    'TextElement',
    'Element',
    'EraseRequest',
    'GridSettings',
    'Paper',
    'SavedPaperInfo',
    'generate_id',
    'Preview',
    'PreviewKind',
    'RectanglePreview',
    'TextCursor',
    'erase_elements',
    'PaperHistory',
    'PaperFormatError',
    'dumps_paper',
    'loads_paper',
]
