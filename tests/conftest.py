"""Shared fixtures: deterministic time, a hand-driven scheduler, Qt setup."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Callable, List

import pytest
from PyQt6.QtCore import QRectF
from PyQt6.QtWidgets import QApplication

from paper_engine.events.event_bus import EventBus
from paper_engine.input.events import PointerType, RawPointerEvent
from paper_engine.input.normalizer import InputNormalizer
from paper_engine.input.surface import DeviceSurface
from paper_engine.services.scheduler import ScheduledTask, Scheduler
from paper_engine.services.state_manager import PaperStateManager
from paper_engine.services.storage import MemoryStore
from paper_engine.tools.tool_manager import ToolManager


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


class ManualTask(ScheduledTask):
    def __init__(self, due: int, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._active = True

    def cancel(self):
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def run(self):
        self._active = False
        self.callback()


class ManualScheduler(Scheduler):
    """Scheduler driven by a FakeClock; advance() runs whatever became due."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.tasks: List[ManualTask] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        task = ManualTask(self.clock() + delay_ms, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> List[ManualTask]:
        return [t for t in self.tasks if t.active]

    def advance(self, ms: int):
        self.clock.advance(ms)
        for task in list(self.tasks):
            if task.active and task.due <= self.clock():
                task.run()


class RecordingStore(MemoryStore):
    """MemoryStore that counts writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes: List[str] = []

    def set_item(self, key: str, value: str) -> bool:
        self.writes.append(key)
        return super().set_item(key, value)


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def state(store, scheduler, clock):
    return PaperStateManager(store, scheduler, clock=clock)


@pytest.fixture
def tools():
    return ToolManager()


@pytest.fixture
def surface():
    return DeviceSurface(rect_provider=lambda: QRectF(100, 50, 800, 600))


@pytest.fixture
def normalizer(surface, clock):
    normalizer = InputNormalizer(surface, clock=clock)
    normalizer.attach()
    return normalizer


@pytest.fixture
def event_bus():
    return EventBus()


def pointer(pointer_type=PointerType.MOUSE, x=0.0, y=0.0, pointer_id=1, **kwargs) -> RawPointerEvent:
    """Raw pointer event in client coordinates."""
    return RawPointerEvent(
        pointer_id=pointer_id,
        pointer_type=pointer_type,
        client_x=x,
        client_y=y,
        **kwargs
    )


class Recorder:
    """Collects signal payloads."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args[0] if len(args) == 1 else args)

    @property
    def last(self):
        return self.calls[-1]

    def __len__(self):
        return len(self.calls)
