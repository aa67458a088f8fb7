"""
Key/value stores for saved papers.

The state manager only needs string keys and string values, so the store is
an injected dependency:
- MemoryStore: dictionary-backed, for tests and throwaway sessions
- JsonFileStore: one ``<key>.json`` file per key inside a folder
"""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ..config import Config

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String-keyed store of string values."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value for key, or None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> bool:
        """Store value under key. Returns True on success."""

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """Remove key if present. Returns True unless the removal failed."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All keys currently stored."""


class MemoryStore(KeyValueStore):
    """In-memory store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    def remove_item(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStore(KeyValueStore):
    """
    Stores each value as a JSON file on disk.

    File structure:
        <base>/
        ├── paper_1a2b3c4d5e6f.json
        └── paper_0f9e8d7c6b5a.json
    """

    SUFFIX = '.json'
    _VALID_KEY = re.compile(r'^[A-Za-z0-9_.\-]+$')

    def __init__(self, base_path: Optional[Path] = None):
        if base_path is None:
            base_path = Config.get_papers_dir()
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    def _path_for(self, key: str) -> Optional[Path]:
        """Map a key to its file, or None if the key is not file-safe."""
        if not self._VALID_KEY.match(key) or key in ('.', '..'):
            logger.warning(f"Rejecting unsafe storage key: {key!r}")
            return None
        return self._base / f'{key}{self.SUFFIX}'

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if path is None or not path.exists():
            return None
        try:
            return path.read_text(encoding='utf-8')
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def set_item(self, key: str, value: str) -> bool:
        path = self._path_for(key)
        if path is None:
            return False
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(value)
            return True
        except OSError as e:
            logger.error(f"Could not write to {path}: {e}")
            return False

    def remove_item(self, key: str) -> bool:
        path = self._path_for(key)
        if path is None:
            return False
        try:
            if path.exists():
                path.unlink()
            return True
        except OSError as e:
            logger.error(f"Could not delete {path}: {e}")
            return False

    def keys(self) -> List[str]:
        return sorted(p.stem for p in self._base.glob(f'*{self.SUFFIX}') if p.is_file())


__all__ = ['KeyValueStore', 'MemoryStore', 'JsonFileStore']
