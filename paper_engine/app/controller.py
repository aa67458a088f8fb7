"""
PaperController - Wires input, tools and document together

Flow:
    DeviceSurface -> InputNormalizer -> ToolManager -> PaperStateManager
                                            |                 |
                                         preview          paper_changed
                                            +------> view <---+

Also interprets keys the text tool does not consume (undo/redo and tool
shortcuts), applies stylus button hints, and mirrors UI-facing state on the
EventBus. Toolbar-style callbacks live here too.
"""

import logging
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QObject

from ..config import Config
from ..core.grid import cycle_grid_type
from ..core.preview import Preview
from ..core.types import EraseRequest, Paper, SavedPaperInfo
from ..events.event_bus import EventBus, get_event_bus
from ..input.events import InputEventKind, KeyboardEvent, PenButton
from ..input.normalizer import InputNormalizer
from ..services.state_manager import PaperStateManager
from ..tools.tool_manager import Tool, ToolManager
from ..widgets.renderer import export_png

logger = logging.getLogger(__name__)

# Unconsumed single-key shortcuts
TOOL_SHORTCUTS = {
    'p': Tool.PEN,
    'e': Tool.ERASER,
    'r': Tool.RECTANGLE,
    't': Tool.TEXT,
}
GRID_SHORTCUT = 'g'


class PaperController(QObject):
    """
    Application glue for one drawing surface.

    The view is any object with ``render(paper, preview)``; it is called
    after every document change and every preview update.

    Usage:
        controller = PaperController(normalizer, tools, state, view=canvas)
        controller.start()
    """

    def __init__(
        self,
        normalizer: InputNormalizer,
        tools: ToolManager,
        state: PaperStateManager,
        view=None,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self._normalizer = normalizer
        self._tools = tools
        self._state = state
        self._view = view
        self._event_bus = event_bus or get_event_bus()

        self._paper: Paper = state.get_paper()
        self._preview: Optional[Preview] = None
        self._started = False

        self._subscriptions = [
            normalizer.on(InputEventKind.STROKE_START, tools.handle_stroke_start),
            normalizer.on(InputEventKind.STROKE_MOVE, tools.handle_stroke_move),
            normalizer.on(InputEventKind.STROKE_END, tools.handle_stroke_end),
            normalizer.on(InputEventKind.CLICK, tools.handle_click),
            normalizer.on(InputEventKind.KEY_DOWN, self._on_key_down),
            normalizer.on(InputEventKind.PEN_BUTTON, self._on_pen_button),
            normalizer.on(InputEventKind.PEN_ACTIVE, self._event_bus.set_pen_active),
        ]

        tools.element_completed.connect(self._on_element_completed)
        tools.preview_updated.connect(self._on_preview_updated)
        tools.tool_changed.connect(self._event_bus.set_tool)
        state.paper_changed.connect(self._on_paper_changed)
        state.paper_saved.connect(self._event_bus.paper_saved)

    # ==================== Lifecycle ====================

    def start(self):
        """Start listening to the device surface and draw the first frame."""
        if self._started:
            return
        self._normalizer.attach()
        self._started = True
        self._event_bus.set_tool(self._tools.get_tool().value)
        self._sync(self._state.get_paper())

    def stop(self):
        """Detach input and write any pending save."""
        if not self._started:
            return
        self._normalizer.detach()
        self._tools.finish_current_action()
        self._state.flush_pending_save()
        self._started = False

    @property
    def preview(self) -> Optional[Preview]:
        return self._preview

    # ==================== Tool Output ====================

    def _on_element_completed(self, result):
        # Drop the preview before the document repaints with the committed element
        self._preview = None
        if isinstance(result, EraseRequest):
            self._state.erase_in_rect(result.rect)
        else:
            self._state.add_element(result)

    def _on_preview_updated(self, preview: Optional[Preview]):
        self._preview = preview
        self._render()

    # ==================== Input ====================

    def _on_key_down(self, event: KeyboardEvent):
        if event.ctrl or event.meta:
            if event.key == 'z':
                event.prevent_default()
                self._state.undo()
                return
            if event.key == 'y':
                event.prevent_default()
                self._state.redo()
                return

        if self._tools.handle_key_down(event):
            return

        key = event.key.lower()
        if key in TOOL_SHORTCUTS:
            self.change_tool(TOOL_SHORTCUTS[key])
        elif key == GRID_SHORTCUT:
            self.toggle_grid()

    def _on_pen_button(self, button: PenButton):
        if button is PenButton.ERASER:
            self.change_tool(Tool.ERASER)
        elif button is PenButton.PEN:
            self.change_tool(Tool.PEN)

    # ==================== Document ====================

    def _on_paper_changed(self, paper: Paper):
        self._sync(paper)

    def _sync(self, paper: Paper):
        self._paper = paper
        self._event_bus.set_paper(paper.id, paper.name)
        self._event_bus.set_grid_type(paper.grid_settings.type.value)
        self._event_bus.set_history_state(self._state.can_undo(), self._state.can_redo())
        self._render()

    def _render(self):
        if self._view is not None:
            self._view.render(self._paper, self._preview)

    # ==================== UI Callbacks ====================

    def change_tool(self, tool):
        self._tools.set_tool(tool)

    def change_color(self, color: str):
        """Set the colour used by both pen and text."""
        self._tools.set_settings(pen_color=color, text_color=color)
        self._event_bus.set_color(color)

    def change_size(self, preset: str):
        """
        Apply a size preset to pen width and font size.

        Args:
            preset: One of Config.SIZE_PRESETS; unknown names fall back to the default
        """
        if preset not in Config.SIZE_PRESETS:
            logger.debug(f"Unknown size preset {preset!r}, using {Config.DEFAULT_SIZE_PRESET}")
            preset = Config.DEFAULT_SIZE_PRESET
        pen_width, font_size = Config.SIZE_PRESETS[preset]
        self._tools.set_settings(pen_width=pen_width, font_size=font_size)
        self._event_bus.set_size_preset(preset)

    def toggle_grid(self):
        """Advance the grid to the next type in the cycle."""
        next_type = cycle_grid_type(self._paper.grid_settings.type)
        self._state.set_grid_settings(type=next_type)

    def change_grid_spacing(self, spacing: float):
        self._state.set_grid_settings(spacing=spacing)

    def undo(self) -> bool:
        return self._state.undo()

    def redo(self) -> bool:
        return self._state.redo()

    def clear(self):
        self._state.clear_elements()

    def new_paper(self, name: str = Config.DEFAULT_PAPER_NAME):
        """Save the current paper, then start an empty one."""
        self._tools.finish_current_action()
        self._state.save()
        self._state.new_paper(name)

    def load_paper(self, paper_id: str) -> bool:
        self._tools.finish_current_action()
        if not self._state.load(paper_id):
            self._event_bus.report_error("storage", f"Could not open paper {paper_id}")
            return False
        return True

    def import_json(self, text: str) -> bool:
        self._tools.finish_current_action()
        if not self._state.import_from_json(text):
            self._event_bus.report_error("import", "Not a valid paper file")
            return False
        return True

    def export_json(self) -> str:
        return self._state.export_to_json()

    def export_image(self, path: Path, width: int, height: int) -> bool:
        """Save the current paper as a PNG of the given size."""
        return export_png(self._state.get_paper(), path, width, height)

    def saved_papers(self) -> List[SavedPaperInfo]:
        return self._state.list_saved_papers()

    def delete_paper(self, paper_id: str) -> bool:
        return self._state.delete_paper(paper_id)

    def rename_paper(self, paper_id: str, new_name: str) -> bool:
        if not self._state.rename_paper(paper_id, new_name):
            self._event_bus.report_error("storage", f"Could not rename paper {paper_id}")
            return False
        return True


__all__ = ['PaperController', 'TOOL_SHORTCUTS']
