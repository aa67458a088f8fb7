"""
Services for Paper Engine

Document state, persistence stores, and deferred-task scheduling.
"""

from .scheduler import QtScheduler, ScheduledTask, Scheduler
from .state_manager import PaperStateManager
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    'PaperStateManager',
    'KeyValueStore',
    'MemoryStore',
    'JsonFileStore',
    'Scheduler',
    'ScheduledTask',
    'QtScheduler',
]
