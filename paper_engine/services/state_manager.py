"""
PaperStateManager - Owner of the live paper and its undo/redo history

Pattern: single owner + change signal
- Callers get deep copies; the live paper never leaves this object
- Every element mutation pushes a history snapshot and schedules a
  debounced save through the injected Scheduler
- Persistence goes through an injected KeyValueStore under ``paper_<id>``
"""

import logging
import time
from dataclasses import replace
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import Config
from ..core.geometry import erase_elements
from ..core.grid import validate_grid_settings
from ..core.history import PaperHistory
from ..core.serializer import PaperFormatError, dumps_paper, loads_paper, summary_from_json
from ..core.types import (
    Element,
    GridSettings,
    Paper,
    Rect,
    SavedPaperInfo,
    copy_elements,
    generate_id,
    is_element,
)
from .scheduler import ScheduledTask, Scheduler
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class PaperStateManager(QObject):
    """
    Authoritative document state.

    Usage:
        manager = PaperStateManager(store, QtScheduler())
        manager.paper_changed.connect(canvas.on_paper_changed)
        manager.add_element(stroke)
        manager.undo()
    """

    # Signals
    paper_changed = pyqtSignal(object)  # Paper (copy)
    paper_saved = pyqtSignal(str)  # paper_id

    def __init__(
        self,
        store: KeyValueStore,
        scheduler: Scheduler,
        clock: Optional[Callable[[], int]] = None,
        autosave_delay_ms: int = Config.AUTOSAVE_DELAY_MS,
        history_capacity: int = Config.HISTORY_CAPACITY,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self._store = store
        self._scheduler = scheduler
        self._clock = clock or _now_ms
        self._autosave_delay_ms = autosave_delay_ms
        self._autosave_task: Optional[ScheduledTask] = None

        self._paper = self._create_paper(Config.DEFAULT_PAPER_NAME)
        self._history = PaperHistory(self._paper.elements, capacity=history_capacity)

    # ==================== Queries ====================

    def get_paper(self) -> Paper:
        """Deep copy of the live paper. Mutating it does not affect state."""
        return self._paper.copy()

    @property
    def paper_id(self) -> str:
        return self._paper.id

    @property
    def history_size(self) -> int:
        """Number of snapshots currently held."""
        return len(self._history)

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    # ==================== Element Mutations ====================

    def add_element(self, element: Element):
        """Append an element (copied) to the paper."""
        if not is_element(element):
            raise TypeError(f"Not a paper element: {type(element).__name__}")
        self._paper.elements.append(copy_elements([element])[0])
        self._commit()

    def remove_element(self, element_id: str):
        """Remove every element with the given id."""
        self._paper.elements = [el for el in self._paper.elements if el.id != element_id]
        self._commit()

    def clear_elements(self):
        self._paper.elements = []
        self._commit()

    def erase_in_rect(self, rect: Rect) -> bool:
        """
        Erase everything inside rect.

        Strokes are trimmed to the parts outside rect; rectangles and text are
        removed only when fully contained. Nothing is committed if no element
        changed.

        Returns:
            True if the paper changed
        """
        elements, changed = erase_elements(self._paper.elements, rect)
        if not changed:
            return False

        self._paper.elements = elements
        self._commit()
        logger.debug(f"Erased in {rect}, {len(elements)} elements remain")
        return True

    def set_grid_settings(self, **changes):
        """
        Merge grid setting changes into the paper.

        Invalid values are ignored. Grid changes are not part of undo history.
        """
        accepted = validate_grid_settings(changes)
        if not accepted:
            return

        self._paper.grid_settings = replace(self._paper.grid_settings, **accepted)
        self._paper.updated_at = self._clock()
        self._notify()
        self._schedule_autosave()

    # ==================== Undo/Redo ====================

    def undo(self) -> bool:
        elements = self._history.undo()
        if elements is None:
            return False
        self._restore(elements)
        return True

    def redo(self) -> bool:
        elements = self._history.redo()
        if elements is None:
            return False
        self._restore(elements)
        return True

    def _restore(self, elements: List[Element]):
        self._paper.elements = elements
        self._paper.updated_at = self._clock()
        self._notify()

    # ==================== Persistence ====================

    def save(self) -> str:
        """
        Write the live paper to the store.

        Returns:
            The serialized paper
        """
        self._cancel_autosave()
        data = dumps_paper(self._paper)
        if self._store.set_item(Config.storage_key(self._paper.id), data):
            self.paper_saved.emit(self._paper.id)
        else:
            logger.warning(f"Saving paper {self._paper.id} failed")
        return data

    def flush_pending_save(self) -> bool:
        """Run a pending debounced save now. Returns True if one was pending."""
        if self._autosave_task is None or not self._autosave_task.active:
            return False
        self.save()
        return True

    def load(self, paper_id: str) -> bool:
        """
        Replace the live paper with a stored one.

        Returns:
            False if the paper is missing or unreadable (state untouched)
        """
        self.flush_pending_save()

        data = self._store.get_item(Config.storage_key(paper_id))
        if data is None:
            logger.info(f"No stored paper with id {paper_id}")
            return False

        try:
            paper = loads_paper(data)
        except PaperFormatError as e:
            logger.warning(f"Stored paper {paper_id} is unreadable: {e}")
            return False

        self._replace_paper(paper)
        logger.info(f"Loaded paper '{paper.name}' ({paper.id})")
        return True

    def export_to_json(self) -> str:
        """Human-readable JSON of the live paper."""
        return dumps_paper(self._paper, indent=2)

    def import_from_json(self, text: str) -> bool:
        """
        Replace the live paper with one parsed from JSON text.

        Returns:
            False if the text is not a valid paper (state untouched)
        """
        try:
            paper = loads_paper(text)
        except PaperFormatError as e:
            logger.warning(f"Import failed: {e}")
            return False

        self.flush_pending_save()
        self._replace_paper(paper)
        logger.info(f"Imported paper '{paper.name}' ({paper.id})")
        return True

    def new_paper(self, name: str = Config.DEFAULT_PAPER_NAME):
        """Start an empty paper."""
        self.flush_pending_save()
        self._replace_paper(self._create_paper(name))

    def list_saved_papers(self) -> List[SavedPaperInfo]:
        """Stored papers, most recently updated first. Unreadable entries are skipped."""
        papers: List[SavedPaperInfo] = []
        for key in self._store.keys():
            if not key.startswith(Config.STORAGE_KEY_PREFIX):
                continue
            data = self._store.get_item(key)
            if data is None:
                continue
            try:
                papers.append(summary_from_json(data))
            except PaperFormatError as e:
                logger.debug(f"Skipping unreadable entry {key}: {e}")
        return sorted(papers, key=lambda info: info.updated_at, reverse=True)

    def delete_paper(self, paper_id: str) -> bool:
        """Remove a stored paper. The live paper stays open."""
        if paper_id == self._paper.id:
            self._cancel_autosave()
        return self._store.remove_item(Config.storage_key(paper_id))

    def rename_paper(self, paper_id: str, new_name: str) -> bool:
        """
        Rename a stored paper (and the live paper if it is the same one).

        Returns:
            False if no readable stored paper has that id
        """
        key = Config.storage_key(paper_id)
        data = self._store.get_item(key)
        if data is None:
            return False

        try:
            stored = loads_paper(data)
        except PaperFormatError as e:
            logger.warning(f"Cannot rename unreadable paper {paper_id}: {e}")
            return False

        stored.name = new_name
        stored.updated_at = self._clock()
        if not self._store.set_item(key, dumps_paper(stored)):
            return False

        if self._paper.id == paper_id:
            self._paper.name = new_name
            self._paper.updated_at = stored.updated_at
            self._notify()
        return True

    # ==================== Internals ====================

    def _create_paper(self, name: str) -> Paper:
        now = self._clock()
        return Paper(
            id=generate_id(),
            name=name,
            elements=[],
            grid_settings=GridSettings(),
            created_at=now,
            updated_at=now,
        )

    def _replace_paper(self, paper: Paper):
        self._paper = paper
        self._history.reset(paper.elements)
        self._notify()

    def _commit(self):
        """Finish an element mutation: stamp, snapshot, notify, autosave."""
        self._paper.updated_at = self._clock()
        self._history.push(self._paper.elements)
        self._notify()
        self._schedule_autosave()

    def _notify(self):
        self.paper_changed.emit(self._paper.copy())

    def _schedule_autosave(self):
        self._cancel_autosave()
        self._autosave_task = self._scheduler.call_later(self._autosave_delay_ms, self._autosave)

    def _cancel_autosave(self):
        if self._autosave_task is not None:
            self._autosave_task.cancel()
            self._autosave_task = None

    def _autosave(self):
        self._autosave_task = None
        self.save()


__all__ = ['PaperStateManager']
