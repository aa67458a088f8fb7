"""
Core data model for Paper documents.

Elements form a closed tagged union (Stroke | Rectangle | TextElement); each
variant carries its tag as the ``kind`` class attribute so callers dispatch on
the tag instead of probing fields.
"""

import copy
import uuid as uuid_lib
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Union

from ..config import Config


class ElementKind(Enum):
    """Discriminant of the element union."""
    STROKE = "stroke"
    RECTANGLE = "rectangle"
    TEXT = "text"


class GridType(Enum):
    """Background grid style."""
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    SQUARE = "square"


def generate_id() -> str:
    """Create a short random element/paper id."""
    return uuid_lib.uuid4().hex[:12]


@dataclass(frozen=True)
class Point:
    """A sampled pointer position. Immutable once recorded."""
    x: float
    y: float
    pressure: float = Config.DEFAULT_PRESSURE


@dataclass
class Rect:
    """Axis-aligned rectangle with (x, y) at the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def from_corners(cls, x1: float, y1: float, x2: float, y2: float) -> 'Rect':
        """Build a rect from two opposite corners, whatever the drag direction."""
        return cls(
            x=min(x1, x2),
            y=min(y1, y2),
            width=abs(x2 - x1),
            height=abs(y2 - y1),
        )

    def contains_point(self, x: float, y: float) -> bool:
        """Inclusive of the edges."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def contains_rect(self, other: 'Rect') -> bool:
        """True if ``other`` lies fully inside this rect (edges inclusive)."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )


@dataclass
class Stroke:
    """Freehand stroke."""
    id: str
    points: List[Point]
    color: str
    width: float

    kind: ClassVar[ElementKind] = ElementKind.STROKE


@dataclass
class Rectangle:
    """Rectangle element."""
    id: str
    x: float
    y: float
    width: float
    height: float
    color: str
    stroke_width: float
    filled: bool = False

    kind: ClassVar[ElementKind] = ElementKind.RECTANGLE

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass
class TextElement:
    """Single line of text anchored at its top-left corner."""
    id: str
    x: float
    y: float
    content: str
    font_size: float
    color: str
    font_family: str

    kind: ClassVar[ElementKind] = ElementKind.TEXT

    @property
    def bounds(self) -> Rect:
        """Approximate box: fixed glyph width per character, one line high."""
        return Rect(
            self.x,
            self.y,
            len(self.content) * self.font_size * Config.TEXT_WIDTH_FACTOR,
            self.font_size,
        )


Element = Union[Stroke, Rectangle, TextElement]


@dataclass
class EraseRequest:
    """Transient command asking the document to erase inside ``rect``."""
    rect: Rect


@dataclass
class GridSettings:
    type: GridType = GridType(Config.DEFAULT_GRID_TYPE)
    spacing: float = Config.DEFAULT_GRID_SPACING
    color: str = Config.DEFAULT_GRID_COLOR
    opacity: float = Config.DEFAULT_GRID_OPACITY


@dataclass
class Paper:
    """A drawing document. ``elements`` order is paint order."""
    id: str
    name: str
    elements: List[Element] = field(default_factory=list)
    grid_settings: GridSettings = field(default_factory=GridSettings)
    created_at: int = 0
    updated_at: int = 0

    def copy(self) -> 'Paper':
        """Deep copy, safe to hand to callers."""
        return copy.deepcopy(self)


@dataclass
class SavedPaperInfo:
    """Summary of a stored paper for listing."""
    id: str
    name: str
    updated_at: int


def copy_elements(elements: List[Element]) -> List[Element]:
    """Deep copy an element list (history snapshots, getters)."""
    return copy.deepcopy(list(elements))


def is_element(value: object) -> bool:
    return isinstance(value, (Stroke, Rectangle, TextElement))


__all__ = [
    'ElementKind',
    'GridType',
    'generate_id',
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
    'copy_elements',
    'is_element',
]
