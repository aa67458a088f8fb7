"""
InputNormalizer - Turns raw device input into gesture events

Responsibilities:
- Classify the device behind each pointer event (mouse/touch/pen/eraser tip)
- Palm rejection: ignore touch while a pen is down and shortly after it lifts,
  including the release and click of a rejected contact
- Only the pointer that opened a gesture may move or end it
- Map stylus buttons to tool hints
- Publish stroke start/move/end, click, key, pen-button and pen-active events

Knows nothing about tools or documents.
"""

import logging
import time
from typing import Callable, Optional, Set

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config
from ..core.types import Point
from .events import (
    BUTTON_ERASER,
    BUTTON_SECONDARY,
    BUTTONS_ERASER,
    InputEventKind,
    KeyboardEvent,
    PenButton,
    PointerType,
    RawPointerEvent,
)
from .surface import DeviceSurface

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Subscription:
    """Handle returned by InputNormalizer.on(); cancel() unsubscribes."""

    def __init__(self, normalizer: 'InputNormalizer', kind: InputEventKind, handler: Callable):
        self._normalizer = normalizer
        self.kind = kind
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self):
        if self._active:
            self._normalizer.off(self.kind, self.handler)
            self._active = False


class InputNormalizer(QObject):
    """
    Normalizes pointer and keyboard input from a DeviceSurface.

    Usage:
        normalizer = InputNormalizer(surface)
        normalizer.on(InputEventKind.STROKE_START, tools.handle_stroke_start)
        normalizer.attach()
    """

    # Signals, one per InputEventKind
    stroke_start = pyqtSignal(object)  # Point
    stroke_move = pyqtSignal(object)  # Point
    stroke_end = pyqtSignal(object)  # Point
    key_down = pyqtSignal(object)  # KeyboardEvent
    click = pyqtSignal(float, float)  # x, y relative to the surface
    pen_button = pyqtSignal(object)  # PenButton
    pen_active = pyqtSignal(bool)

    def __init__(
        self,
        surface: DeviceSurface,
        clock: Optional[Callable[[], float]] = None,
        palm_rejection_ms: float = Config.PALM_REJECTION_TIMEOUT_MS,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self._surface = surface
        self._clock = clock or _monotonic_ms
        self._palm_rejection_ms = palm_rejection_ms

        self._attached = False
        self._is_drawing = False
        self._active_pen_id: Optional[int] = None
        self._last_pen_time: Optional[float] = None
        # Palm-rejected touches, so their release does not count as a click
        self._rejected_pointers: Set[int] = set()

    # ==================== Subscription ====================

    def _signal_for(self, kind):
        return getattr(self, InputEventKind(kind).value)

    def on(self, kind: InputEventKind, handler: Callable) -> Subscription:
        """Register handler for an event kind."""
        kind = InputEventKind(kind)
        self._signal_for(kind).connect(handler)
        return Subscription(self, kind, handler)

    def off(self, kind: InputEventKind, handler: Callable):
        """Unregister handler. Unknown handlers are ignored."""
        try:
            self._signal_for(kind).disconnect(handler)
        except (TypeError, RuntimeError):
            logger.debug(f"Handler {handler!r} was not subscribed to {kind}")

    # ==================== Lifecycle ====================

    def attach(self):
        """Start listening to the device surface."""
        if self._attached:
            return
        self._surface.pointer_down.connect(self._on_pointer_down)
        self._surface.pointer_move.connect(self._on_pointer_move)
        self._surface.pointer_up.connect(self._on_pointer_up)
        self._surface.pointer_leave.connect(self._on_pointer_leave)
        self._surface.clicked.connect(self._on_click)
        self._surface.key_pressed.connect(self._on_key)
        self._attached = True

    def detach(self):
        """Stop listening to the device surface."""
        if not self._attached:
            return
        self._surface.pointer_down.disconnect(self._on_pointer_down)
        self._surface.pointer_move.disconnect(self._on_pointer_move)
        self._surface.pointer_up.disconnect(self._on_pointer_up)
        self._surface.pointer_leave.disconnect(self._on_pointer_leave)
        self._surface.clicked.disconnect(self._on_click)
        self._surface.key_pressed.disconnect(self._on_key)
        self._attached = False

    def is_drawing(self) -> bool:
        return self._is_drawing

    @property
    def pen_is_active(self) -> bool:
        return self._active_pen_id is not None

    # ==================== Classification ====================

    def _within_pen_quiet_window(self) -> bool:
        if self._last_pen_time is None:
            return False
        return self._clock() - self._last_pen_time < self._palm_rejection_ms

    @staticmethod
    def _is_eraser_tip(event: RawPointerEvent) -> bool:
        if event.pointer_type is PointerType.ERASER:
            return True
        return event.pointer_type is PointerType.PEN and (
            event.button == BUTTON_ERASER or (event.buttons & BUTTONS_ERASER) != 0
        )

    @staticmethod
    def _is_stylus(event: RawPointerEvent) -> bool:
        return event.pointer_type in (PointerType.PEN, PointerType.ERASER)

    def _to_point(self, client_x: float, client_y: float, pressure: Optional[float]) -> Point:
        origin = self._surface.bounding_rect()
        return Point(
            x=client_x - origin.x(),
            y=client_y - origin.y(),
            pressure=pressure or Config.DEFAULT_PRESSURE,
        )

    # ==================== Pointer Handling ====================

    def _owns_gesture(self, event: RawPointerEvent) -> bool:
        """True if event comes from the pointer that started the open gesture."""
        return self._is_drawing and self._surface.captured_pointer == event.pointer_id

    def _end_gesture(self, event: RawPointerEvent):
        self._is_drawing = False
        self._surface.release_pointer_capture(event.pointer_id)
        self.stroke_end.emit(self._to_point(event.client_x, event.client_y, event.pressure))

    def _on_pointer_down(self, event: RawPointerEvent):
        self._rejected_pointers.discard(event.pointer_id)

        if event.pointer_type is PointerType.TOUCH:
            if self._active_pen_id is not None or self._within_pen_quiet_window():
                logger.debug(f"Palm rejection: ignoring touch {event.pointer_id}")
                self._rejected_pointers.add(event.pointer_id)
                return

        if self._is_stylus(event):
            if self._active_pen_id is None:
                self.pen_active.emit(True)
            self._active_pen_id = event.pointer_id
            self._last_pen_time = self._clock()

        if event.button == BUTTON_SECONDARY:
            # Barrel button selects the pen; other devices' secondary button does nothing
            if self._is_stylus(event):
                self.pen_button.emit(PenButton.PEN)
            return

        if self._is_eraser_tip(event):
            self.pen_button.emit(PenButton.ERASER)

        self._is_drawing = True
        self._surface.set_pointer_capture(event.pointer_id)
        self.stroke_start.emit(self._to_point(event.client_x, event.client_y, event.pressure))

    def _on_pointer_move(self, event: RawPointerEvent):
        if self._is_stylus(event) and self._is_drawing:
            self._last_pen_time = self._clock()

        if not self._owns_gesture(event):
            return

        self.stroke_move.emit(self._to_point(event.client_x, event.client_y, event.pressure))

    def _on_pointer_up(self, event: RawPointerEvent):
        if self._is_stylus(event) and event.pointer_id == self._active_pen_id:
            self._active_pen_id = None
            self._last_pen_time = self._clock()
            self.pen_active.emit(False)

        if not self._owns_gesture(event):
            return

        if event.pointer_type is PointerType.TOUCH and self._within_pen_quiet_window():
            logger.debug(f"Palm rejection: ignoring touch release {event.pointer_id}")
            return

        self._end_gesture(event)

    def _on_pointer_leave(self, event: RawPointerEvent):
        self._rejected_pointers.discard(event.pointer_id)
        if not self._owns_gesture(event):
            return
        self._end_gesture(event)

    # ==================== Click & Keyboard ====================

    def _on_click(self, pointer_id: int, client_x: float, client_y: float):
        if pointer_id in self._rejected_pointers:
            self._rejected_pointers.discard(pointer_id)
            logger.debug(f"Palm rejection: ignoring click from touch {pointer_id}")
            return
        origin = self._surface.bounding_rect()
        self.click.emit(client_x - origin.x(), client_y - origin.y())

    def _on_key(self, event: KeyboardEvent):
        self.key_down.emit(event)


__all__ = ['InputNormalizer', 'Subscription']
