"""Controller wiring: gestures end-to-end, shortcuts, pen hints, callbacks."""

import pytest

from paper_engine.app.controller import PaperController
from paper_engine.config import Config
from paper_engine.core.preview import PreviewKind
from paper_engine.core.types import GridType, Rectangle, Stroke, TextElement
from paper_engine.input.events import BUTTON_SECONDARY, KeyboardEvent, PointerType
from paper_engine.tools.tool_manager import Tool

from conftest import Recorder, pointer


class FakeView:
    def __init__(self):
        self.frames = []

    def render(self, paper, preview):
        self.frames.append((paper, preview))

    @property
    def last_paper(self):
        return self.frames[-1][0]

    @property
    def last_preview(self):
        return self.frames[-1][1]


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def controller(normalizer, tools, state, view, event_bus):
    controller = PaperController(normalizer, tools, state, view=view, event_bus=event_bus)
    controller.start()
    return controller


def gesture(surface, start, end, pointer_type=PointerType.MOUSE, moves=()):
    # Surface origin is (100, 50) in client coordinates
    surface.pointer_down.emit(pointer(pointer_type, start[0] + 100, start[1] + 50))
    for x, y in moves:
        surface.pointer_move.emit(pointer(pointer_type, x + 100, y + 50))
    surface.pointer_up.emit(pointer(pointer_type, end[0] + 100, end[1] + 50))


def press(surface, key, **modifiers):
    event = KeyboardEvent(key=key, **modifiers)
    surface.key_pressed.emit(event)
    return event


def test_start_renders_initial_paper(controller, view, state, event_bus):
    assert view.last_paper == state.get_paper()
    assert view.last_preview is None
    assert event_bus.get_paper_id() == state.paper_id
    assert event_bus.get_tool() == "pen"


def test_pen_gesture_adds_stroke(controller, surface, state, view, event_bus):
    history = Recorder()
    event_bus.history_changed.connect(history)

    gesture(surface, (0, 0), (20, 20), moves=[(10, 10)])

    elements = state.get_paper().elements
    assert len(elements) == 1
    assert isinstance(elements[0], Stroke)
    assert len(elements[0].points) == 3
    assert view.last_preview is None
    assert view.last_paper.elements == elements
    assert history.calls == [(True, False)]


def test_preview_rendered_during_gesture(controller, surface, view):
    controller.change_tool("rectangle")
    surface.pointer_down.emit(pointer(PointerType.MOUSE, 110, 60))
    surface.pointer_move.emit(pointer(PointerType.MOUSE, 150, 90))

    assert view.last_preview.kind is PreviewKind.RECTANGLE
    assert controller.preview.kind is PreviewKind.RECTANGLE


def test_rectangle_gesture(controller, surface, state):
    controller.change_tool("rectangle")
    gesture(surface, (50, 50), (10, 20))

    rect = state.get_paper().elements[0]
    assert isinstance(rect, Rectangle)
    assert (rect.x, rect.y, rect.width, rect.height) == (10, 20, 40, 30)


def test_eraser_gesture_erases(controller, surface, state):
    controller.change_tool("rectangle")
    gesture(surface, (10, 10), (15, 15))
    controller.change_tool("eraser")
    gesture(surface, (0, 0), (100, 100))

    assert state.get_paper().elements == []
    assert state.can_undo()


def test_text_typing_via_click_and_keys(controller, surface, state):
    controller.change_tool("text")
    surface.clicked.emit(1, 130.0, 90.0)
    for char in "hi":
        press(surface, char)
    press(surface, "Escape")

    text = state.get_paper().elements[0]
    assert isinstance(text, TextElement)
    assert (text.x, text.y, text.content) == (30, 40, "hi")


def test_typed_letters_do_not_switch_tools_while_editing(controller, surface, tools):
    controller.change_tool("text")
    surface.clicked.emit(1, 130.0, 90.0)
    press(surface, "p")
    assert tools.get_tool() is Tool.TEXT


def test_undo_redo_shortcuts(controller, surface, state):
    gesture(surface, (0, 0), (5, 5))

    event = press(surface, "z", ctrl=True)
    assert event.default_prevented
    assert state.get_paper().elements == []

    event = press(surface, "y", meta=True)
    assert event.default_prevented
    assert len(state.get_paper().elements) == 1


@pytest.mark.parametrize("key, tool", [
    ("p", Tool.PEN),
    ("e", Tool.ERASER),
    ("R", Tool.RECTANGLE),
    ("t", Tool.TEXT),
])
def test_tool_shortcuts(controller, surface, tools, event_bus, key, tool):
    tools.set_tool("eraser" if tool is Tool.PEN else "pen")
    press(surface, key)
    assert tools.get_tool() is tool
    assert event_bus.get_tool() == tool.value


def test_grid_shortcut_cycles(controller, surface, state, event_bus):
    press(surface, "g")
    assert state.get_paper().grid_settings.type is GridType.HORIZONTAL
    press(surface, "G")
    assert state.get_paper().grid_settings.type is GridType.VERTICAL
    assert event_bus.get_grid_type() == "vertical"


def test_pen_buttons_switch_tool(controller, surface, tools, event_bus):
    surface.pointer_down.emit(pointer(PointerType.ERASER, 100, 50, pointer_id=2))
    assert tools.get_tool() is Tool.ERASER
    assert event_bus.get_tool() == "eraser"
    assert event_bus.is_pen_active()
    surface.pointer_up.emit(pointer(PointerType.ERASER, 100, 50, pointer_id=2))
    assert not event_bus.is_pen_active()

    surface.pointer_down.emit(pointer(PointerType.PEN, 100, 50, pointer_id=2, button=BUTTON_SECONDARY))
    assert tools.get_tool() is Tool.PEN


def test_change_color_and_size(controller, tools, event_bus):
    controller.change_color("#ff00ff")
    controller.change_size("thick")

    settings = tools.get_settings()
    assert (settings.pen_color, settings.text_color) == ("#ff00ff", "#ff00ff")
    assert (settings.pen_width, settings.font_size) == (8, 28)
    assert event_bus.get_color() == "#ff00ff"
    assert event_bus.get_size_preset() == "thick"


def test_unknown_size_falls_back_to_thin(controller, tools, event_bus):
    controller.change_size("bold")
    controller.change_size("enormous")
    settings = tools.get_settings()
    assert (settings.pen_width, settings.font_size) == Config.SIZE_PRESETS["thin"]
    assert event_bus.get_size_preset() == "thin"


def test_grid_callbacks(controller, state):
    controller.toggle_grid()
    controller.change_grid_spacing(35)
    controller.change_grid_spacing(500)

    grid = state.get_paper().grid_settings
    assert grid.type is GridType.HORIZONTAL
    assert grid.spacing == 35


def test_new_paper_saves_then_starts_fresh(controller, surface, state, store, event_bus):
    gesture(surface, (0, 0), (5, 5))
    old_id = state.paper_id

    controller.new_paper("Fresh")

    assert store.get_item(Config.storage_key(old_id)) is not None
    assert state.paper_id != old_id
    assert state.get_paper().elements == []
    assert event_bus.get_paper_name() == "Fresh"
    assert not event_bus.can_undo()


def test_new_paper_commits_pending_text_to_old_paper(controller, surface, state, store):
    controller.change_tool("text")
    surface.clicked.emit(1, 110.0, 60.0)
    press(surface, "x")
    old_id = state.paper_id

    controller.new_paper()

    assert '"content":"x"' in store.get_item(Config.storage_key(old_id))
    assert state.get_paper().elements == []


def test_load_rename_delete_callbacks(controller, surface, state, event_bus):
    gesture(surface, (0, 0), (5, 5))
    first_id = state.paper_id
    controller.new_paper("Second")

    assert [p.id for p in controller.saved_papers()] == [first_id]
    assert controller.rename_paper(first_id, "First")
    assert controller.load_paper(first_id)
    assert state.get_paper().name == "First"
    assert event_bus.get_paper_name() == "First"

    assert controller.delete_paper(first_id)
    assert controller.saved_papers() == []


def test_failed_load_reports_error(controller, event_bus):
    errors = Recorder()
    event_bus.error_occurred.connect(errors)

    assert not controller.load_paper("missing")
    assert not controller.rename_paper("missing", "x")
    assert not controller.import_json("nope")
    assert [call[0] for call in errors.calls] == ["storage", "storage", "import"]


def test_export_import_json(controller, surface, state):
    gesture(surface, (0, 0), (5, 5))
    original = state.get_paper()
    exported = controller.export_json()
    controller.clear()

    assert controller.import_json(exported)
    assert state.get_paper() == original


def test_clear_undo_redo_callbacks(controller, surface, state):
    gesture(surface, (0, 0), (5, 5))
    controller.clear()
    assert state.get_paper().elements == []
    assert controller.undo()
    assert len(state.get_paper().elements) == 1
    assert controller.redo()
    assert state.get_paper().elements == []


def test_stop_flushes_pending_save(controller, surface, state, store):
    gesture(surface, (0, 0), (5, 5))
    controller.stop()
    assert store.get_item(Config.storage_key(state.paper_id)) is not None

    surface.pointer_down.emit(pointer(PointerType.MOUSE, 100, 50))
    assert len(state.get_paper().elements) == 1


def test_palm_tap_leaves_text_caret_alone(controller, surface, tools, state):
    controller.change_tool("text")
    surface.clicked.emit(1, 130.0, 90.0)
    press(surface, "a")

    # Pen resting on the surface; the text tool ignores its gesture
    surface.pointer_down.emit(pointer(PointerType.PEN, 500, 500, pointer_id=2))
    surface.pointer_down.emit(pointer(PointerType.TOUCH, 600, 400, pointer_id=11))
    surface.pointer_up.emit(pointer(PointerType.TOUCH, 600, 400, pointer_id=11))
    surface.clicked.emit(11, 600.0, 400.0)

    assert state.get_paper().elements == []
    preview = tools.get_active_preview()
    assert preview.kind is PreviewKind.TEXT_PREVIEW
    assert (preview.data.x, preview.data.y) == (30, 40)
