"""
Deferred callbacks for debounced work (autosave).

The state manager asks a Scheduler for a cancellable task instead of owning a
timer, so tests can drive time by hand.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer


class ScheduledTask(ABC):
    """Handle to a pending callback."""

    @abstractmethod
    def cancel(self):
        """Stop the callback from running. No-op if already run or cancelled."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """True while the callback is still pending."""


class Scheduler(ABC):
    """Runs callbacks after a delay."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        """Run callback once after delay_ms milliseconds."""


class _QtTimerTask(ScheduledTask):
    """Single-shot QTimer wrapped as a ScheduledTask."""

    def __init__(self, delay_ms: int, callback: Callable[[], None], parent: Optional[QObject]):
        self._callback = callback
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(delay_ms)

    def _fire(self):
        self._timer.deleteLater()
        self._callback()

    def cancel(self):
        if self._timer.isActive():
            self._timer.stop()
            self._timer.deleteLater()

    @property
    def active(self) -> bool:
        return self._timer.isActive()


class QtScheduler(Scheduler):
    """Scheduler backed by the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None):
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        return _QtTimerTask(delay_ms, callback, self._parent)


__all__ = ['ScheduledTask', 'Scheduler', 'QtScheduler']
