"""
Global configuration for Paper Engine

Central home for engine constants (history depth, debounce delays, palm
rejection window, gesture thresholds) and for the on-disk locations used by
the desktop application.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Final, Tuple


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "Paper"
    APP_VERSION: Final[str] = "1.0.0"
    APP_AUTHOR: Final[str] = "Paper Engine"

    # Paths
    APP_ROOT: Final[Path] = Path(__file__).parent
    PAPERS_FOLDER_NAME: Final[str] = "papers"
    LOGS_FOLDER_NAME: Final[str] = "logs"
    LOG_FILE_NAME: Final[str] = "paper_engine.log"

    # Persistence
    STORAGE_KEY_PREFIX: Final[str] = "paper_"
    AUTOSAVE_DELAY_MS: Final[int] = 500
    DEFAULT_PAPER_NAME: Final[str] = "Untitled"

    # History
    HISTORY_CAPACITY: Final[int] = 50

    # Input
    PALM_REJECTION_TIMEOUT_MS: Final[int] = 500
    DEFAULT_PRESSURE: Final[float] = 0.5
    CLICK_SLOP_PX: Final[float] = 4.0  # Max travel for a release to count as a click

    # Tools
    MIN_DRAG_SIZE: Final[float] = 2.0  # Rect/eraser drags must exceed this on both axes
    TEXT_LINE_GAP: Final[float] = 4.0  # Gap between lines when Enter opens a new caret
    TEXT_WIDTH_FACTOR: Final[float] = 0.6  # Approx glyph width as a fraction of font size

    DEFAULT_PEN_COLOR: Final[str] = "#000000"
    DEFAULT_PEN_WIDTH: Final[float] = 2
    DEFAULT_ERASER_WIDTH: Final[float] = 20
    DEFAULT_FONT_SIZE: Final[float] = 16
    DEFAULT_TEXT_COLOR: Final[str] = "#000000"
    DEFAULT_FONT_FAMILY: Final[str] = "sans-serif"

    # Size presets: name -> (pen width, font size)
    SIZE_PRESETS: Final[Dict[str, Tuple[float, float]]] = {
        "fine": (1, 12),
        "thin": (2, 16),
        "medium": (4, 20),
        "thick": (8, 28),
        "bold": (12, 36),
    }
    DEFAULT_SIZE_PRESET: Final[str] = "thin"

    # Grid
    GRID_MAX_SPACING: Final[float] = 200
    DEFAULT_GRID_TYPE: Final[str] = "none"
    DEFAULT_GRID_SPACING: Final[float] = 20
    DEFAULT_GRID_COLOR: Final[str] = "#cccccc"
    DEFAULT_GRID_OPACITY: Final[float] = 0.5

    # Window settings
    DEFAULT_WINDOW_WIDTH: Final[int] = 1200
    DEFAULT_WINDOW_HEIGHT: Final[int] = 800
    BACKGROUND_COLOR: Final[str] = "#ffffff"

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses system AppData/Local (Windows) or .local/share (Linux)
        so saved papers persist across application updates.
        """
        # If 'portable.txt' exists next to the package, keep data beside it
        portable_flag = cls.APP_ROOT.parent / 'portable.txt'
        if portable_flag.exists():
            user_dir = cls.APP_ROOT.parent / 'data'
        elif sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / 'Paper'
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / 'Paper'
        else:
            user_dir = Path.home() / '.local' / 'share' / 'Paper'

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_papers_dir(cls) -> Path:
        """Get the folder holding one JSON file per saved paper."""
        papers_dir = cls.get_user_data_dir() / cls.PAPERS_FOLDER_NAME
        papers_dir.mkdir(parents=True, exist_ok=True)
        return papers_dir

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get the log folder."""
        return cls.get_user_data_dir() / cls.LOGS_FOLDER_NAME

    @classmethod
    def storage_key(cls, paper_id: str) -> str:
        """Get the store key for a paper id."""
        return f"{cls.STORAGE_KEY_PREFIX}{paper_id}"


__all__ = ['Config']
