"""
PaperCanvas - QWidget drawing surface

Translates Qt tablet, touch, mouse and key events into raw device events on
its DeviceSurface, and paints whatever the controller last rendered.

Features:
- Tablet events with pressure, eraser-end detection and barrel button
- Multi-touch points reported as separate touch pointers
- Mouse events synthesized by Qt from touch/tablet input are skipped
- Release without travel is also reported as a click
- Context menu suppressed
"""

from typing import Dict, Optional

from PyQt6.QtCore import QEvent, QPointF, QRectF, QSizeF, Qt
from PyQt6.QtGui import QEventPoint, QInputDevice, QKeyEvent, QPainter, QPointingDevice
from PyQt6.QtWidgets import QWidget

from ..config import Config
from ..core.preview import Preview
from ..core.types import Paper
from ..input.events import (
    BUTTON_ERASER,
    BUTTON_MIDDLE,
    BUTTON_NONE,
    BUTTON_PRIMARY,
    BUTTON_SECONDARY,
    BUTTONS_ERASER,
    KeyboardEvent,
    PointerType,
    RawPointerEvent,
)
from ..input.surface import DeviceSurface
from .renderer import render_paper

# Fixed pointer ids; touch points are offset by their Qt point id
MOUSE_POINTER_ID = 1
PEN_POINTER_ID = 2
TOUCH_POINTER_BASE = 100

# Mouse events coming from these devices are duplicates of tablet/touch input
SYNTHESIZING_DEVICES = (
    QInputDevice.DeviceType.TouchScreen,
    QInputDevice.DeviceType.Stylus,
    QInputDevice.DeviceType.Airbrush,
)

# Qt key -> key name used by the tools
NAMED_KEYS = {
    Qt.Key.Key_Escape.value: "Escape",
    Qt.Key.Key_Return.value: "Enter",
    Qt.Key.Key_Enter.value: "Enter",
    Qt.Key.Key_Backspace.value: "Backspace",
    Qt.Key.Key_Delete.value: "Delete",
    Qt.Key.Key_Tab.value: "Tab",
    Qt.Key.Key_Left.value: "ArrowLeft",
    Qt.Key.Key_Right.value: "ArrowRight",
    Qt.Key.Key_Up.value: "ArrowUp",
    Qt.Key.Key_Down.value: "ArrowDown",
    Qt.Key.Key_Shift.value: "Shift",
    Qt.Key.Key_Control.value: "Control",
    Qt.Key.Key_Alt.value: "Alt",
    Qt.Key.Key_Meta.value: "Meta",
}


def _button_code(button: Qt.MouseButton) -> int:
    if button == Qt.MouseButton.LeftButton:
        return BUTTON_PRIMARY
    if button == Qt.MouseButton.MiddleButton:
        return BUTTON_MIDDLE
    if button == Qt.MouseButton.RightButton:
        return BUTTON_SECONDARY
    return BUTTON_NONE


def _buttons_mask(buttons: Qt.MouseButton) -> int:
    mask = 0
    if buttons & Qt.MouseButton.LeftButton:
        mask |= 1
    if buttons & Qt.MouseButton.RightButton:
        mask |= 2
    if buttons & Qt.MouseButton.MiddleButton:
        mask |= 4
    return mask


def key_name(event: QKeyEvent) -> str:
    """Key name for a Qt key event: named keys, otherwise the typed character."""
    key = int(event.key())
    if key in NAMED_KEYS:
        return NAMED_KEYS[key]

    text = event.text()
    if len(text) == 1 and text.isprintable():
        return text

    # With ctrl/meta held, text() is a control character; fall back to the key code
    if Qt.Key.Key_A.value <= key <= Qt.Key.Key_Z.value:
        letter = chr(key)
        return letter if event.modifiers() & Qt.KeyboardModifier.ShiftModifier else letter.lower()
    if Qt.Key.Key_Space.value <= key <= Qt.Key.Key_AsciiTilde.value:
        return chr(key)
    return text


def key_code(event: QKeyEvent) -> str:
    """
    Key code name ("KeyA", "Digit1", "Space", "Escape", ...) for a Qt key event.

    Qt has no portable physical-key name, so this is derived from the
    logical key: on non-QWERTY layouts it follows the layout, and modifier
    keys carry no left/right side. Keys without a name give ''.
    """
    key = int(event.key())
    if Qt.Key.Key_A.value <= key <= Qt.Key.Key_Z.value:
        return f"Key{chr(key)}"
    if Qt.Key.Key_0.value <= key <= Qt.Key.Key_9.value:
        return f"Digit{chr(key)}"
    if key == Qt.Key.Key_Space.value:
        return "Space"
    if key == Qt.Key.Key_Enter.value:
        return "NumpadEnter"
    return NAMED_KEYS.get(key, '')


class PaperCanvas(QWidget):
    """
    Drawing surface widget.

    Usage:
        canvas = PaperCanvas()
        normalizer = InputNormalizer(canvas.surface)
        canvas.render(paper, preview)
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.surface = DeviceSurface(rect_provider=self._global_rect, parent=self)

        self._paper: Optional[Paper] = None
        self._preview: Optional[Preview] = None

        # Press positions for click detection, keyed by pointer id
        self._press_positions: Dict[int, QPointF] = {}
        self._last_mouse_pos: Optional[QPointF] = None

        self.setAttribute(Qt.WidgetAttribute.WA_TabletTracking, True)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.PreventContextMenu)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)
        self.setMinimumSize(200, 150)

    # ==================== View ====================

    def render(self, paper: Paper, preview: Optional[Preview] = None):
        """Show a paper and preview; repaint is scheduled, not immediate."""
        self._paper = paper
        self._preview = preview
        self.update()

    @property
    def paper(self) -> Optional[Paper]:
        return self._paper

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            if self._paper is not None:
                render_paper(painter, self._paper, self.width(), self.height(), self._preview)
        finally:
            painter.end()

    def _global_rect(self) -> QRectF:
        return QRectF(self.mapToGlobal(QPointF(0, 0)), QSizeF(self.size()))

    # ==================== Event Interception (for Tablet/Touch) ====================

    def event(self, event):
        """Intercept tablet and touch events before Qt turns them into mouse events."""
        event_type = event.type()

        if event_type in (QEvent.Type.TabletPress, QEvent.Type.TabletMove, QEvent.Type.TabletRelease):
            self._handle_tablet_event(event)
            return True

        if event_type in (QEvent.Type.TouchBegin, QEvent.Type.TouchUpdate,
                          QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
            self._handle_touch_event(event)
            return True

        return super().event(event)

    def _handle_tablet_event(self, event):
        is_eraser = event.pointerType() == QPointingDevice.PointerType.Eraser
        button = _button_code(event.button())
        buttons = _buttons_mask(event.buttons())
        if is_eraser:
            buttons |= BUTTONS_ERASER
            if button == BUTTON_PRIMARY:
                button = BUTTON_ERASER

        raw = RawPointerEvent(
            pointer_id=PEN_POINTER_ID,
            pointer_type=PointerType.ERASER if is_eraser else PointerType.PEN,
            client_x=event.globalPosition().x(),
            client_y=event.globalPosition().y(),
            button=button,
            buttons=buttons,
            pressure=event.pressure(),
        )

        event_type = event.type()
        if event_type == QEvent.Type.TabletPress:
            self._pointer_down(raw)
        elif event_type == QEvent.Type.TabletMove:
            self.surface.pointer_move.emit(raw)
        elif event_type == QEvent.Type.TabletRelease:
            self._pointer_up(raw)
        event.accept()

    def _handle_touch_event(self, event):
        for point in event.points():
            state = point.state()
            raw = RawPointerEvent(
                pointer_id=TOUCH_POINTER_BASE + point.id(),
                pointer_type=PointerType.TOUCH,
                client_x=point.globalPosition().x(),
                client_y=point.globalPosition().y(),
                pressure=point.pressure(),
            )
            if state == QEventPoint.State.Pressed:
                self._pointer_down(raw)
            elif state == QEventPoint.State.Updated:
                self.surface.pointer_move.emit(raw)
            elif state == QEventPoint.State.Released:
                if event.type() == QEvent.Type.TouchCancel:
                    self.surface.pointer_leave.emit(raw)
                else:
                    self._pointer_up(raw)
        event.accept()

    # ==================== Mouse Events ====================

    @staticmethod
    def _is_synthesized(event) -> bool:
        return event.device().type() in SYNTHESIZING_DEVICES

    def _mouse_raw(self, event) -> RawPointerEvent:
        return RawPointerEvent(
            pointer_id=MOUSE_POINTER_ID,
            pointer_type=PointerType.MOUSE,
            client_x=event.globalPosition().x(),
            client_y=event.globalPosition().y(),
            button=_button_code(event.button()),
            buttons=_buttons_mask(event.buttons()),
        )

    def mousePressEvent(self, event):
        if self._is_synthesized(event):
            event.ignore()
            return
        self.setFocus(Qt.FocusReason.MouseFocusReason)
        self._pointer_down(self._mouse_raw(event))
        event.accept()

    def mouseMoveEvent(self, event):
        if self._is_synthesized(event):
            event.ignore()
            return
        self._last_mouse_pos = event.globalPosition()
        self.surface.pointer_move.emit(self._mouse_raw(event))
        event.accept()

    def mouseReleaseEvent(self, event):
        if self._is_synthesized(event):
            event.ignore()
            return
        self._pointer_up(self._mouse_raw(event))
        event.accept()

    def leaveEvent(self, event):
        if self._last_mouse_pos is not None:
            self.surface.pointer_leave.emit(RawPointerEvent(
                pointer_id=MOUSE_POINTER_ID,
                pointer_type=PointerType.MOUSE,
                client_x=self._last_mouse_pos.x(),
                client_y=self._last_mouse_pos.y(),
                button=BUTTON_NONE,
                buttons=0,
            ))
        self._press_positions.pop(MOUSE_POINTER_ID, None)
        super().leaveEvent(event)

    # ==================== Keyboard ====================

    def keyPressEvent(self, event: QKeyEvent):
        modifiers = event.modifiers()
        key_event = KeyboardEvent(
            key=key_name(event),
            code=key_code(event),
            ctrl=bool(modifiers & Qt.KeyboardModifier.ControlModifier),
            shift=bool(modifiers & Qt.KeyboardModifier.ShiftModifier),
            alt=bool(modifiers & Qt.KeyboardModifier.AltModifier),
            meta=bool(modifiers & Qt.KeyboardModifier.MetaModifier),
            on_prevent_default=event.accept,
        )
        self.surface.key_pressed.emit(key_event)
        event.accept()

    # ==================== Shared ====================

    def _pointer_down(self, raw: RawPointerEvent):
        self._press_positions[raw.pointer_id] = QPointF(raw.client_x, raw.client_y)
        self.surface.pointer_down.emit(raw)

    def _pointer_up(self, raw: RawPointerEvent):
        self.surface.pointer_up.emit(raw)

        pressed_at = self._press_positions.pop(raw.pointer_id, None)
        if pressed_at is None:
            return
        travel = abs(raw.client_x - pressed_at.x()) + abs(raw.client_y - pressed_at.y())
        if travel <= Config.CLICK_SLOP_PX:
            self.surface.clicked.emit(raw.pointer_id, raw.client_x, raw.client_y)


__all__ = ['PaperCanvas', 'key_name', 'key_code']
