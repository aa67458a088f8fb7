"""
App subpackage - controller tying input, tools and document together
"""

from .controller import PaperController

__all__ = ['PaperController']
