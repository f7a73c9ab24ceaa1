"""
Core module for the weather_tools package.

Provides the tool registry that exposes weather lookups to an agent.
"""

from weather_tools.core.decorators import tool_output
from weather_tools.core.exceptions import (
    ToolError,
    ToolNotFoundError,
    ToolParseError,
    ToolValidationError,
)
from weather_tools.core.datamodels import ToolEntry, ToolOutput, ToolResult
from weather_tools.core.registry import ToolRegistry

__all__ = [
    # Registry
    "ToolRegistry",
    # Models
    "ToolEntry",
    "ToolOutput",
    "ToolResult",
    # Exceptions
    "ToolError",
    "ToolNotFoundError",
    "ToolValidationError",
    "ToolParseError",
    # Decorators
    "tool_output",
]
