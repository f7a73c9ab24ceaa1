"""
weather_tools - Weather lookup tools for conversational agents

Resolves a place name with the Open-Meteo geocoding API and returns a small
normalized weather record for now, a past date or a future date. The tools
are registered in a pydantic-backed registry that renders their schemas for
an LLM agent and can be served over MCP.

Example usage:
    from weather_tools import registry

    result = registry.execute("get_weather_by_date", {
        "location": "Paris",
        "date": "2024-01-15",
    })
    print(result.output.llm_format)
"""

__version__ = "0.1.0"

# Core exports
from weather_tools.core import (
    ToolEntry,
    ToolError,
    ToolNotFoundError,
    ToolOutput,
    ToolParseError,
    ToolRegistry,
    ToolResult,
    ToolValidationError,
    tool_output,
)


# Tools registry (lazy import so importing the core stays side-effect free)
def __getattr__(name):
    if name == "registry":
        from weather_tools.tools import registry
        return registry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Core
    "ToolRegistry",
    "ToolEntry",
    "ToolOutput",
    "ToolResult",
    "ToolError",
    "ToolNotFoundError",
    "ToolValidationError",
    "ToolParseError",
    "tool_output",
    # Tools (lazy loaded)
    "registry",
]
