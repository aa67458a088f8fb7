"""
DeviceSurface - signal hub a drawing widget reports raw input through.

The input normalizer only talks to this object, so any widget (or a test)
can feed it events.
"""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QRectF, pyqtSignal


class DeviceSurface(QObject):
    """
    Raw input source in client coordinates.

    Usage:
        surface = DeviceSurface(rect_provider=lambda: QRectF(0, 0, 800, 600))
        surface.pointer_down.emit(RawPointerEvent(1, PointerType.MOUSE, 10, 10))
    """

    # Signals
    pointer_down = pyqtSignal(object)  # RawPointerEvent
    pointer_move = pyqtSignal(object)  # RawPointerEvent
    pointer_up = pyqtSignal(object)  # RawPointerEvent
    pointer_leave = pyqtSignal(object)  # RawPointerEvent
    clicked = pyqtSignal(int, float, float)  # pointer id, client x, client y
    key_pressed = pyqtSignal(object)  # KeyboardEvent

    def __init__(
        self,
        rect_provider: Optional[Callable[[], QRectF]] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self._rect_provider = rect_provider
        self._captured_pointer: Optional[int] = None

    def bounding_rect(self) -> QRectF:
        """Surface area in client coordinates."""
        if self._rect_provider is None:
            return QRectF()
        return self._rect_provider()

    def set_pointer_capture(self, pointer_id: int):
        """Route the open gesture to pointer_id; other pointers cannot move or end it."""
        self._captured_pointer = pointer_id

    def release_pointer_capture(self, pointer_id: int):
        if self._captured_pointer == pointer_id:
            self._captured_pointer = None

    @property
    def captured_pointer(self) -> Optional[int]:
        return self._captured_pointer


__all__ = ['DeviceSurface']
