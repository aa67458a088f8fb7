"""
Background grid helpers.

Validation of grid setting updates, the grid-type cycle used by the ``g``
shortcut, and the line layout the renderer paints.
"""

import logging
from typing import Any, Dict, List, Tuple

from ..config import Config
from .types import GridSettings, GridType

logger = logging.getLogger(__name__)

# Order used when cycling with the grid shortcut
GRID_TYPES: Tuple[GridType, ...] = (
    GridType.NONE,
    GridType.HORIZONTAL,
    GridType.VERTICAL,
    GridType.SQUARE,
)

Line = Tuple[float, float, float, float]  # x1, y1, x2, y2


def cycle_grid_type(current: GridType) -> GridType:
    """Return the grid type after ``current`` in the cycle."""
    index = GRID_TYPES.index(current)
    return GRID_TYPES[(index + 1) % len(GRID_TYPES)]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_grid_settings(partial: Dict[str, Any]) -> Dict[str, Any]:
    """
    Keep only the valid fields of a partial grid-settings update.

    Invalid fields are dropped silently (logged at debug level) so the
    current value stays in place.

    Args:
        partial: Mapping with any of 'type', 'spacing', 'color', 'opacity'.
            'type' may be a GridType or its string value.

    Returns:
        Mapping of accepted fields, ready to merge into GridSettings
    """
    accepted: Dict[str, Any] = {}

    for key, value in partial.items():
        if key == 'type':
            try:
                accepted['type'] = value if isinstance(value, GridType) else GridType(value)
            except ValueError:
                logger.debug(f"Ignoring unknown grid type: {value!r}")
        elif key == 'spacing':
            if _is_number(value) and 0 < value <= Config.GRID_MAX_SPACING:
                accepted['spacing'] = value
            else:
                logger.debug(f"Ignoring out-of-range grid spacing: {value!r}")
        elif key == 'color':
            if isinstance(value, str):
                accepted['color'] = value
            else:
                logger.debug(f"Ignoring non-string grid color: {value!r}")
        elif key == 'opacity':
            if _is_number(value) and 0 <= value <= 1:
                accepted['opacity'] = value
            else:
                logger.debug(f"Ignoring out-of-range grid opacity: {value!r}")
        else:
            logger.debug(f"Ignoring unknown grid setting: {key!r}")

    return accepted


def grid_lines(settings: GridSettings, width: float, height: float) -> List[Line]:
    """
    Compute grid line segments for a surface of the given size.

    Lines start one spacing in from the edge and stop before the far edge.
    """
    if settings.type is GridType.NONE or settings.spacing <= 0:
        return []

    spacing = settings.spacing
    lines: List[Line] = []

    if settings.type in (GridType.HORIZONTAL, GridType.SQUARE):
        y = spacing
        while y < height:
            lines.append((0, y, width, y))
            y += spacing

    if settings.type in (GridType.VERTICAL, GridType.SQUARE):
        x = spacing
        while x < width:
            lines.append((x, 0, x, height))
            x += spacing

    return lines


__all__ = [
    'GRID_TYPES',
    'cycle_grid_type',
    'validate_grid_settings',
    'grid_lines',
]
