"""
Shared registry that the built-in tools register themselves with.
"""

from weather_tools.core.registry import ToolRegistry

registry = ToolRegistry()
