"""
Widgets for Paper Engine

- renderer: QPainter drawing of papers and previews
- paper_canvas: drawing surface widget
- main_window: application window (import from the module directly)
"""

from .paper_canvas import PaperCanvas

__all__ = ['PaperCanvas']
