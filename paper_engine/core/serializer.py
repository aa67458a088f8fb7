"""
Paper serializer for persistence and import/export.

Provides functions for:
- Converting elements and papers to/from plain JSON dictionaries
- Reading/writing the JSON text stored under ``paper_<id>`` keys

The JSON shape matches the stored document format: camelCase keys, and each
element carries only its own variant's fields. Elements are told apart
structurally when reading (``points`` -> stroke, ``content`` -> text,
``width``/``height`` -> rectangle); that probing happens here and nowhere else.
"""

import json
from typing import Any, Dict

from ..config import Config
from .types import (
    Element,
    ElementKind,
    GridSettings,
    GridType,
    Paper,
    Point,
    Rectangle,
    SavedPaperInfo,
    Stroke,
    TextElement,
)


class PaperFormatError(ValueError):
    """Raised when serialized paper data is malformed."""
    pass


# ==================== Writing ====================

def element_to_dict(element: Element) -> Dict[str, Any]:
    """Convert an element to its JSON dictionary."""
    if element.kind is ElementKind.STROKE:
        return {
            'id': element.id,
            'points': [
                {'x': p.x, 'y': p.y, 'pressure': p.pressure}
                for p in element.points
            ],
            'color': element.color,
            'width': element.width,
        }
    if element.kind is ElementKind.RECTANGLE:
        return {
            'id': element.id,
            'x': element.x,
            'y': element.y,
            'width': element.width,
            'height': element.height,
            'color': element.color,
            'strokeWidth': element.stroke_width,
            'filled': element.filled,
        }
    if element.kind is ElementKind.TEXT:
        return {
            'id': element.id,
            'x': element.x,
            'y': element.y,
            'content': element.content,
            'fontSize': element.font_size,
            'color': element.color,
            'fontFamily': element.font_family,
        }
    raise TypeError(f"Unknown element kind: {element.kind!r}")


def grid_settings_to_dict(settings: GridSettings) -> Dict[str, Any]:
    return {
        'type': settings.type.value,
        'spacing': settings.spacing,
        'color': settings.color,
        'opacity': settings.opacity,
    }


def paper_to_dict(paper: Paper) -> Dict[str, Any]:
    """Convert a paper to its JSON dictionary."""
    return {
        'id': paper.id,
        'name': paper.name,
        'elements': [element_to_dict(el) for el in paper.elements],
        'gridSettings': grid_settings_to_dict(paper.grid_settings),
        'createdAt': paper.created_at,
        'updatedAt': paper.updated_at,
    }


def dumps_paper(paper: Paper, indent: int = None) -> str:
    """
    Serialize a paper to JSON text.

    Args:
        paper: Paper to serialize
        indent: None for the compact storage form, e.g. 2 for export

    Returns:
        JSON text
    """
    data = paper_to_dict(paper)
    if indent is None:
        return json.dumps(data, separators=(',', ':'), ensure_ascii=False)
    return json.dumps(data, indent=indent, ensure_ascii=False)


# ==================== Reading ====================

def _require(data: Dict[str, Any], key: str) -> Any:
    if key not in data:
        raise PaperFormatError(f"Missing field '{key}'")
    return data[key]


def _number(data: Dict[str, Any], key: str) -> float:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PaperFormatError(f"Field '{key}' must be a number, got {type(value).__name__}")
    return value


def _string(data: Dict[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise PaperFormatError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _mapping(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise PaperFormatError(f"{what} must be an object, got {type(value).__name__}")
    return value


def point_from_dict(data: Any) -> Point:
    data = _mapping(data, "Point")
    pressure = data.get('pressure', Config.DEFAULT_PRESSURE)
    if isinstance(pressure, bool) or not isinstance(pressure, (int, float)):
        raise PaperFormatError("Point pressure must be a number")
    return Point(x=_number(data, 'x'), y=_number(data, 'y'), pressure=pressure)


def element_from_dict(data: Any) -> Element:
    """
    Build an element from its JSON dictionary.

    Raises:
        PaperFormatError: If the dictionary matches no element shape
    """
    data = _mapping(data, "Element")

    if 'points' in data:
        points = data['points']
        if not isinstance(points, list):
            raise PaperFormatError("Stroke points must be a list")
        return Stroke(
            id=_string(data, 'id'),
            points=[point_from_dict(p) for p in points],
            color=_string(data, 'color'),
            width=_number(data, 'width'),
        )

    if 'content' in data:
        return TextElement(
            id=_string(data, 'id'),
            x=_number(data, 'x'),
            y=_number(data, 'y'),
            content=_string(data, 'content'),
            font_size=_number(data, 'fontSize'),
            color=_string(data, 'color'),
            font_family=_string(data, 'fontFamily'),
        )

    if 'width' in data and 'height' in data:
        return Rectangle(
            id=_string(data, 'id'),
            x=_number(data, 'x'),
            y=_number(data, 'y'),
            width=_number(data, 'width'),
            height=_number(data, 'height'),
            color=_string(data, 'color'),
            stroke_width=_number(data, 'strokeWidth'),
            filled=bool(data.get('filled', False)),
        )

    raise PaperFormatError(f"Unrecognized element shape: {sorted(data)}")


def grid_settings_from_dict(data: Any) -> GridSettings:
    """Build grid settings; missing keys fall back to defaults."""
    data = _mapping(data, "gridSettings")
    defaults = GridSettings()
    try:
        grid_type = GridType(data.get('type', defaults.type.value))
    except ValueError:
        raise PaperFormatError(f"Unknown grid type: {data.get('type')!r}")
    return GridSettings(
        type=grid_type,
        spacing=_number(data, 'spacing') if 'spacing' in data else defaults.spacing,
        color=_string(data, 'color') if 'color' in data else defaults.color,
        opacity=_number(data, 'opacity') if 'opacity' in data else defaults.opacity,
    )


def paper_from_dict(data: Any) -> Paper:
    """
    Build a paper from its JSON dictionary.

    Raises:
        PaperFormatError: If required fields are missing or malformed
    """
    data = _mapping(data, "Paper")
    elements = _require(data, 'elements')
    if not isinstance(elements, list):
        raise PaperFormatError("Paper elements must be a list")

    return Paper(
        id=_string(data, 'id'),
        name=_string(data, 'name'),
        elements=[element_from_dict(el) for el in elements],
        grid_settings=grid_settings_from_dict(data.get('gridSettings', {})),
        created_at=_number(data, 'createdAt') if 'createdAt' in data else 0,
        updated_at=_number(data, 'updatedAt') if 'updatedAt' in data else 0,
    )


def loads_paper(text: str) -> Paper:
    """
    Parse JSON text into a paper.

    Raises:
        PaperFormatError: On invalid JSON or an invalid document shape
    """
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise PaperFormatError(f"Invalid JSON: {e}") from e
    return paper_from_dict(data)


def summary_from_json(text: str) -> SavedPaperInfo:
    """Parse stored JSON text into a listing summary."""
    paper = loads_paper(text)
    return SavedPaperInfo(id=paper.id, name=paper.name, updated_at=paper.updated_at)


__all__ = [
    'PaperFormatError',
    'element_to_dict',
    'grid_settings_to_dict',
    'paper_to_dict',
    'dumps_paper',
    'point_from_dict',
    'element_from_dict',
    'grid_settings_from_dict',
    'paper_from_dict',
    'loads_paper',
    'summary_from_json',
]
