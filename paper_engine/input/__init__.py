"""
Input subpackage.

- events: raw pointer/key events and the normalized event vocabulary
- surface: DeviceSurface signal hub fed by the drawing widget
- normalizer: device classification, palm rejection, gesture events
"""

from .events import (
    InputEventKind,
    KeyboardEvent,
    PenButton,
    PointerType,
    RawPointerEvent,
)
from .normalizer import InputNormalizer, Subscription
from .surface import DeviceSurface

__all__ = [
    'InputEventKind',
    'KeyboardEvent',
    'PenButton',
    'PointerType',
    'RawPointerEvent',
    'InputNormalizer',
    'Subscription',
    'DeviceSurface',
]
