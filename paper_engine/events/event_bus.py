"""
EventBus - Application-wide UI state for Paper

Pattern: Observer/Publisher-Subscriber

Holds the state toolbars and status displays care about (active tool, colour,
size preset, grid type, pen activity, undo/redo availability, current paper)
and emits a signal whenever it changes.
"""

from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config


class EventBus(QObject):
    """
    Central event bus for decoupled communication between components

    Usage:
        event_bus = get_event_bus()
        event_bus.tool_changed.connect(toolbar.highlight_tool)
        event_bus.set_tool("eraser")
    """

    # Tool events
    tool_changed = pyqtSignal(str)  # tool name
    color_changed = pyqtSignal(str)  # hex colour
    size_preset_changed = pyqtSignal(str)  # preset name

    # Input events
    pen_active_changed = pyqtSignal(bool)

    # Document events
    history_changed = pyqtSignal(bool, bool)  # can_undo, can_redo
    paper_changed = pyqtSignal(str, str)  # paper_id, name
    paper_saved = pyqtSignal(str)  # paper_id
    grid_type_changed = pyqtSignal(str)  # grid type value

    # Error events
    error_occurred = pyqtSignal(str, str)  # error_type, error_message

    def __init__(self):
        super().__init__()

        # State storage
        self._tool: str = "pen"
        self._color: str = Config.DEFAULT_PEN_COLOR
        self._size_preset: str = Config.DEFAULT_SIZE_PRESET
        self._grid_type: str = Config.DEFAULT_GRID_TYPE
        self._pen_active: bool = False
        self._can_undo: bool = False
        self._can_redo: bool = False
        self._paper_id: Optional[str] = None
        self._paper_name: str = ""

    # Getters (read current state)

    def get_tool(self) -> str:
        """Get active tool name"""
        return self._tool

    def get_color(self) -> str:
        return self._color

    def get_size_preset(self) -> str:
        return self._size_preset

    def get_grid_type(self) -> str:
        return self._grid_type

    def is_pen_active(self) -> bool:
        """Check if a stylus is currently in contact"""
        return self._pen_active

    def can_undo(self) -> bool:
        return self._can_undo

    def can_redo(self) -> bool:
        return self._can_redo

    def get_paper_id(self) -> Optional[str]:
        return self._paper_id

    def get_paper_name(self) -> str:
        return self._paper_name

    # Setters (update state and emit signals)

    def set_tool(self, tool: str):
        """
        Set active tool

        Args:
            tool: "pen", "eraser", "rectangle" or "text"
        """
        if self._tool != tool:
            self._tool = tool
            self.tool_changed.emit(tool)

    def set_color(self, color: str):
        if self._color != color:
            self._color = color
            self.color_changed.emit(color)

    def set_size_preset(self, preset: str):
        if self._size_preset != preset:
            self._size_preset = preset
            self.size_preset_changed.emit(preset)

    def set_grid_type(self, grid_type: str):
        if self._grid_type != grid_type:
            self._grid_type = grid_type
            self.grid_type_changed.emit(grid_type)

    def set_pen_active(self, active: bool):
        if self._pen_active != active:
            self._pen_active = active
            self.pen_active_changed.emit(active)

    def set_history_state(self, can_undo: bool, can_redo: bool):
        """
        Set undo/redo availability

        Args:
            can_undo: True if there is a step to undo
            can_redo: True if there is a step to redo
        """
        if (self._can_undo, self._can_redo) != (can_undo, can_redo):
            self._can_undo = can_undo
            self._can_redo = can_redo
            self.history_changed.emit(can_undo, can_redo)

    def set_paper(self, paper_id: str, name: str):
        """
        Set the current paper

        Args:
            paper_id: Id of the live paper
            name: Its display name
        """
        if (self._paper_id, self._paper_name) != (paper_id, name):
            self._paper_id = paper_id
            self._paper_name = name
            self.paper_changed.emit(paper_id, name)

    # Convenience methods

    def report_error(self, error_type: str, message: str):
        """
        Report an error to the UI

        Args:
            error_type: Type of error (e.g., "storage", "import")
            message: Human-readable error message
        """
        self.error_occurred.emit(error_type, message)


# Singleton instance (lazy initialization)
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """
    Get global EventBus singleton instance

    Returns:
        Global EventBus instance
    """
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance


# Export
__all__ = ['EventBus', 'get_event_bus']
