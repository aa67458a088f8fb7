"""
Geometry helpers for the eraser.

Erasing works against an axis-aligned rectangle:
- strokes are split into the runs of points lying outside it
- rectangles and text are removed only when fully contained
"""

from dataclasses import replace
from typing import List, Tuple

from .types import Element, ElementKind, Point, Rect, Stroke, generate_id


def split_points_by_rect(points: List[Point], rect: Rect) -> List[List[Point]]:
    """
    Split a point sequence into maximal runs lying outside ``rect``.

    Runs shorter than two points cannot be drawn and are dropped.

    Args:
        points: Stroke points in order
        rect: Erase area (edges count as inside)

    Returns:
        Surviving runs, in stroke order
    """
    runs: List[List[Point]] = []
    current: List[Point] = []

    for point in points:
        if rect.contains_point(point.x, point.y):
            if len(current) >= 2:
                runs.append(current)
            current = []
        else:
            current.append(point)

    if len(current) >= 2:
        runs.append(current)

    return runs


def erase_stroke(stroke: Stroke, rect: Rect) -> Tuple[List[Stroke], bool]:
    """
    Erase the part of a stroke inside ``rect``.

    Returns:
        (surviving strokes, changed). An untouched stroke is returned as-is
        so it keeps its id.
    """
    runs = split_points_by_rect(stroke.points, rect)

    if len(runs) == 1 and len(runs[0]) == len(stroke.points):
        return [stroke], False

    pieces = [replace(stroke, id=generate_id(), points=run) for run in runs]
    return pieces, True


def erase_elements(elements: List[Element], rect: Rect) -> Tuple[List[Element], bool]:
    """
    Apply an erase rectangle to a whole element list.

    Survivors keep their relative order; split strokes take the place of the
    stroke they came from.

    Returns:
        (new element list, whether anything was added, removed or replaced)
    """
    result: List[Element] = []
    changed = False

    for element in elements:
        if element.kind is ElementKind.STROKE:
            pieces, stroke_changed = erase_stroke(element, rect)
            result.extend(pieces)
            changed = changed or stroke_changed
        elif element.kind in (ElementKind.RECTANGLE, ElementKind.TEXT):
            if rect.contains_rect(element.bounds):
                changed = True
            else:
                result.append(element)
        else:
            raise TypeError(f"Unknown element kind: {element.kind!r}")

    return result, changed


__all__ = [
    'split_points_by_rect',
    'erase_stroke',
    'erase_elements',
]
