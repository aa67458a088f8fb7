"""
Tools subpackage - gesture-to-element state machine
"""

from .tool_manager import Tool, ToolManager, ToolSettings

__all__ = ['Tool', 'ToolManager', 'ToolSettings']
