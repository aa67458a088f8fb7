"""Utility modules for Paper Engine"""

from .logging_config import LoggingConfig

__all__ = ['LoggingConfig']
