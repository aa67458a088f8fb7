"""
MainWindow - Paper application window

Hosts a single PaperCanvas and assembles the engine around it:

    PaperCanvas.surface -> InputNormalizer -> ToolManager
                                                  |
    JsonFileStore <- PaperStateManager <- PaperController
"""

import logging
from typing import Optional

from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QMainWindow, QStatusBar, QWidget

from ..app.controller import PaperController
from ..config import Config
from ..events.event_bus import EventBus, get_event_bus
from ..input.normalizer import InputNormalizer
from ..services.scheduler import QtScheduler
from ..services.state_manager import PaperStateManager
from ..services.storage import JsonFileStore, KeyValueStore
from ..tools.tool_manager import ToolManager
from .paper_canvas import PaperCanvas

logger = logging.getLogger(__name__)

STATUS_MESSAGE_MS = 3000


class MainWindow(QMainWindow):
    """
    Main application window

    Features:
    - Drawing canvas filling the window
    - Window title follows the current paper name
    - Status bar shows the active tool, saves and errors
    - Pending autosave is written on close
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)
        self._event_bus = event_bus or get_event_bus()

        self.canvas = PaperCanvas(self)
        self.setCentralWidget(self.canvas)
        self.setStatusBar(QStatusBar(self))

        self.state = PaperStateManager(store or JsonFileStore(), QtScheduler(self), parent=self)
        self.tools = ToolManager(self)
        self.normalizer = InputNormalizer(self.canvas.surface, parent=self)
        self.controller = PaperController(
            self.normalizer,
            self.tools,
            self.state,
            view=self.canvas,
            event_bus=self._event_bus,
            parent=self,
        )

        self._connect_signals()
        self.resize(Config.DEFAULT_WINDOW_WIDTH, Config.DEFAULT_WINDOW_HEIGHT)
        self.controller.start()
        self._update_title(self._event_bus.get_paper_name())
        self.canvas.setFocus()

    def _connect_signals(self):
        self._event_bus.paper_changed.connect(self._on_paper_changed)
        self._event_bus.tool_changed.connect(self._on_tool_changed)
        self._event_bus.paper_saved.connect(self._on_paper_saved)
        self._event_bus.error_occurred.connect(self._on_error)

    def _update_title(self, name: str):
        self.setWindowTitle(f"{name} - {Config.APP_NAME}" if name else Config.APP_NAME)

    # ==================== Event Bus Handlers ====================

    def _on_paper_changed(self, paper_id: str, name: str):
        self._update_title(name)

    def _on_tool_changed(self, tool: str):
        self.statusBar().showMessage(f"Tool: {tool}", STATUS_MESSAGE_MS)

    def _on_paper_saved(self, paper_id: str):
        self.statusBar().showMessage("Saved", STATUS_MESSAGE_MS)

    def _on_error(self, error_type: str, message: str):
        logger.warning(f"{error_type}: {message}")
        self.statusBar().showMessage(message, STATUS_MESSAGE_MS)

    # ==================== Window Events ====================

    def closeEvent(self, event: QCloseEvent):
        self.controller.stop()
        super().closeEvent(event)


__all__ = ['MainWindow']
