"""
ToolManager - Per-tool gesture state machine

Turns normalized gestures (stroke start/move/end, click, key down) into either
live previews or finished elements / erase requests.

Tools:
- pen: freehand stroke, committed on release whatever its length
- rectangle: drag box, committed if larger than the minimum drag size
- eraser: drag box, emits an EraseRequest if larger than the minimum drag size
- text: click places a caret, keys edit a single line
"""

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional, Tuple, Union

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config
from ..core.preview import Preview, PreviewKind, RectanglePreview, TextCursor
from ..core.types import EraseRequest, Point, Rect, Rectangle, Stroke, TextElement, generate_id
from ..input.events import KeyboardEvent

logger = logging.getLogger(__name__)


class Tool(str, Enum):
    """Available drawing tools"""
    PEN = "pen"
    ERASER = "eraser"
    RECTANGLE = "rectangle"
    TEXT = "text"


@dataclass
class ToolSettings:
    """Settings shared by all tools"""
    pen_color: str = Config.DEFAULT_PEN_COLOR
    pen_width: float = Config.DEFAULT_PEN_WIDTH
    eraser_width: float = Config.DEFAULT_ERASER_WIDTH
    font_size: float = Config.DEFAULT_FONT_SIZE
    text_color: str = Config.DEFAULT_TEXT_COLOR
    font_family: str = Config.DEFAULT_FONT_FAMILY


class ToolManager(QObject):
    """
    Holds the active tool and the single in-flight gesture.

    At most one of these is open at a time:
    - an open stroke (pen)
    - a drag origin + current corner (rectangle, eraser)
    - a text caret + accumulated text (text)

    Signals:
        element_completed: Finished Stroke/Rectangle/TextElement or EraseRequest
        preview_updated: Current Preview, or None when nothing is in flight
        tool_changed: New tool name
    """

    element_completed = pyqtSignal(object)
    preview_updated = pyqtSignal(object)
    tool_changed = pyqtSignal(str)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._tool = Tool.PEN
        self._settings = ToolSettings()

        # In-flight state
        self._stroke: Optional[Stroke] = None
        self._drag_origin: Optional[Tuple[float, float]] = None
        self._drag_current: Optional[Tuple[float, float]] = None
        self._caret: Optional[Tuple[float, float]] = None
        self._text = ""

    # ==================== Tool & Settings ====================

    def set_tool(self, tool: Union[Tool, str]):
        """Switch tool. Unknown names are ignored."""
        try:
            tool = Tool(tool)
        except ValueError:
            logger.debug(f"Ignoring unknown tool: {tool!r}")
            return

        self.finish_current_action()
        if tool is not self._tool:
            self._tool = tool
            self.tool_changed.emit(tool.value)

    def get_tool(self) -> Tool:
        return self._tool

    def set_settings(self, **changes):
        """Merge settings. Unknown keys are ignored."""
        known = {f.name for f in fields(ToolSettings)}
        accepted = {}
        for key, value in changes.items():
            if key in known:
                accepted[key] = value
            else:
                logger.debug(f"Ignoring unknown tool setting: {key}")
        if accepted:
            self._settings = replace(self._settings, **accepted)

    def get_settings(self) -> ToolSettings:
        return replace(self._settings)

    # ==================== Gestures ====================

    def handle_stroke_start(self, point: Point):
        if self._tool is Tool.PEN:
            self._stroke = Stroke(
                id=generate_id(),
                points=[point],
                color=self._settings.pen_color,
                width=self._settings.pen_width,
            )
        elif self._tool in (Tool.RECTANGLE, Tool.ERASER):
            self._drag_origin = (point.x, point.y)
            self._drag_current = (point.x, point.y)
        else:
            return
        self._emit_preview()

    def handle_stroke_move(self, point: Point):
        if self._tool is Tool.PEN and self._stroke is not None:
            self._stroke.points.append(point)
        elif self._tool in (Tool.RECTANGLE, Tool.ERASER) and self._drag_origin is not None:
            self._drag_current = (point.x, point.y)
        else:
            return
        self._emit_preview()

    def handle_stroke_end(self, point: Point):
        if self._tool is Tool.PEN and self._stroke is not None:
            stroke = self._stroke
            stroke.points.append(point)
            self._stroke = None
            self.element_completed.emit(stroke)
            self.preview_updated.emit(None)

        elif self._tool in (Tool.RECTANGLE, Tool.ERASER) and self._drag_origin is not None:
            self._drag_current = (point.x, point.y)
            rect = self._drag_rect()
            self._drag_origin = None
            self._drag_current = None

            if self._exceeds_min_size(rect):
                if self._tool is Tool.RECTANGLE:
                    self.element_completed.emit(Rectangle(
                        id=generate_id(),
                        x=rect.x,
                        y=rect.y,
                        width=rect.width,
                        height=rect.height,
                        color=self._settings.pen_color,
                        stroke_width=self._settings.pen_width,
                        filled=False,
                    ))
                else:
                    self.element_completed.emit(EraseRequest(rect=rect))
            else:
                logger.debug(f"Discarding {self._tool.value} drag below minimum size: {rect}")
            self.preview_updated.emit(None)

    def handle_click(self, x: float, y: float):
        """Place or move the text caret, committing pending text first."""
        if self._tool is not Tool.TEXT:
            return
        self._commit_text()
        self._caret = (x, y)
        self._text = ""
        self._emit_preview()

    def handle_key_down(self, event: KeyboardEvent) -> bool:
        """
        Edit the open text caret.

        Returns:
            True if the key was consumed
        """
        if self._tool is not Tool.TEXT or self._caret is None:
            return False

        key = event.key
        if key == "Escape":
            self._commit_text()
            self._caret = None
            self._text = ""
            self.preview_updated.emit(None)
            return True

        if key == "Enter":
            self._commit_text()
            x, y = self._caret
            self._caret = (x, y + self._settings.font_size + Config.TEXT_LINE_GAP)
            self._text = ""
            self._emit_preview()
            return True

        if key == "Backspace":
            self._text = self._text[:-1]
            self._emit_preview()
            return True

        if len(key) == 1 and not event.ctrl and not event.meta:
            self._text += key
            self._emit_preview()
            return True

        return False

    def finish_current_action(self):
        """Commit pending text and drop any open stroke or drag."""
        had_action = self._has_action()
        self._commit_text()

        self._stroke = None
        self._drag_origin = None
        self._drag_current = None
        self._caret = None
        self._text = ""

        if had_action:
            self.preview_updated.emit(None)

    # ==================== Preview ====================

    def get_active_preview(self) -> Optional[Preview]:
        """Live-feedback payload for whatever is in flight."""
        if self._stroke is not None:
            return Preview(PreviewKind.STROKE, replace(self._stroke, points=list(self._stroke.points)))

        if self._drag_origin is not None:
            rect = self._drag_rect()
            if self._tool is Tool.ERASER:
                return Preview(PreviewKind.ERASER_SELECTION, rect)
            return Preview(
                PreviewKind.RECTANGLE,
                RectanglePreview(rect, self._settings.pen_color, self._settings.pen_width),
            )

        if self._caret is not None:
            x, y = self._caret
            if not self._text:
                return Preview(PreviewKind.TEXT_CURSOR, TextCursor(x, y, self._settings.font_size))
            return Preview(PreviewKind.TEXT_PREVIEW, self._build_text("", x, y))

        return None

    # ==================== Internals ====================

    def _has_action(self) -> bool:
        return self._stroke is not None or self._drag_origin is not None or self._caret is not None

    def _emit_preview(self):
        self.preview_updated.emit(self.get_active_preview())

    def _drag_rect(self) -> Rect:
        x1, y1 = self._drag_origin
        x2, y2 = self._drag_current
        return Rect.from_corners(x1, y1, x2, y2)

    @staticmethod
    def _exceeds_min_size(rect: Rect) -> bool:
        return rect.width > Config.MIN_DRAG_SIZE and rect.height > Config.MIN_DRAG_SIZE

    def _build_text(self, element_id: str, x: float, y: float) -> TextElement:
        return TextElement(
            id=element_id,
            x=x,
            y=y,
            content=self._text,
            font_size=self._settings.font_size,
            color=self._settings.text_color,
            font_family=self._settings.font_family,
        )

    def _commit_text(self):
        """Emit the caret's text as an element if there is any."""
        if self._caret is None or not self._text:
            return
        x, y = self._caret
        element = self._build_text(generate_id(), x, y)
        self._text = ""
        self.element_completed.emit(element)


__all__ = ['Tool', 'ToolSettings', 'ToolManager']
