"""
Raw and normalized input event types.

Raw events are what a device surface reports (client coordinates, device
type, button state). Normalized events are what the input normalizer emits to
the rest of the engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


class PointerType(Enum):
    """Kind of pointing device behind a raw event."""
    MOUSE = "mouse"
    TOUCH = "touch"
    PEN = "pen"
    ERASER = "eraser"  # Stylus reporting its eraser end


# Button numbering follows the pointer-events convention
BUTTON_NONE = -1
BUTTON_PRIMARY = 0
BUTTON_MIDDLE = 1
BUTTON_SECONDARY = 2
BUTTON_ERASER = 5
BUTTONS_PRIMARY = 1  # bit in the ``buttons`` mask
BUTTONS_ERASER = 32


@dataclass
class RawPointerEvent:
    """Pointer sample as reported by the device surface."""
    pointer_id: int
    pointer_type: PointerType
    client_x: float
    client_y: float
    button: int = BUTTON_PRIMARY
    buttons: int = BUTTONS_PRIMARY
    pressure: Optional[float] = None  # None for devices without pressure


class InputEventKind(Enum):
    """Normalized events published by the input normalizer."""
    STROKE_START = "stroke_start"
    STROKE_MOVE = "stroke_move"
    STROKE_END = "stroke_end"
    KEY_DOWN = "key_down"
    CLICK = "click"
    PEN_BUTTON = "pen_button"
    PEN_ACTIVE = "pen_active"


class PenButton(Enum):
    """Tool hint coming from stylus buttons."""
    ERASER = "eraser"
    PEN = "pen"


@dataclass
class KeyboardEvent:
    """Key press forwarded verbatim, with a way to stop default handling."""
    key: str
    code: str = ''
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False
    on_prevent_default: Optional[Callable[[], None]] = field(default=None, repr=False, compare=False)
    default_prevented: bool = field(default=False, compare=False)

    def prevent_default(self):
        self.default_prevented = True
        if self.on_prevent_default is not None:
            self.on_prevent_default()


__all__ = [
    'PointerType',
    'BUTTON_NONE',
    'BUTTON_PRIMARY',
    'BUTTON_MIDDLE',
    'BUTTON_SECONDARY',
    'BUTTON_ERASER',
    'BUTTONS_PRIMARY',
    'BUTTONS_ERASER',
    'RawPointerEvent',
    'InputEventKind',
    'PenButton',
    'KeyboardEvent',
]
