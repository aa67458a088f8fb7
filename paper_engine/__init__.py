"""
Paper Engine

Drawing interaction and history engine: device input normalization with palm
rejection, a per-tool gesture state machine, and an undoable, autosaved paper
document.
"""

from .config import Config

__version__ = Config.APP_VERSION

__all__ = ['Config', '__version__']
