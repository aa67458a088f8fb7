"""EventBus state mirroring."""

from paper_engine.events.event_bus import EventBus, get_event_bus

from conftest import Recorder


def test_setters_emit_only_on_change(event_bus):
    tools = Recorder()
    history = Recorder()
    event_bus.tool_changed.connect(tools)
    event_bus.history_changed.connect(history)

    event_bus.set_tool("pen")
    event_bus.set_tool("text")
    event_bus.set_tool("text")
    event_bus.set_history_state(False, False)
    event_bus.set_history_state(True, False)
    event_bus.set_history_state(True, False)

    assert tools.calls == ["text"]
    assert history.calls == [(True, False)]
    assert event_bus.get_tool() == "text"
    assert event_bus.can_undo() and not event_bus.can_redo()


def test_paper_identity(event_bus):
    papers = Recorder()
    event_bus.paper_changed.connect(papers)

    event_bus.set_paper("a", "Untitled")
    event_bus.set_paper("a", "Renamed")

    assert papers.calls == [("a", "Untitled"), ("a", "Renamed")]
    assert (event_bus.get_paper_id(), event_bus.get_paper_name()) == ("a", "Renamed")


def test_report_error(event_bus):
    errors = Recorder()
    event_bus.error_occurred.connect(errors)
    event_bus.report_error("import", "bad file")
    assert errors.calls == [("import", "bad file")]


def test_singleton():
    assert get_event_bus() is get_event_bus()
    assert isinstance(get_event_bus(), EventBus)
