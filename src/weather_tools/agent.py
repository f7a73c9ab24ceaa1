"""
Weather agent definition: the instructions an LLM agent runs with and the
system prompt that pairs them with the registered tools.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from weather_tools.core.registry import ToolRegistry

AGENT_NAME = "Weather Agent"

WEATHER_AGENT_INSTRUCTIONS = """\
You are a helpful weather assistant that provides accurate weather information.

Your primary function is to help users get weather details for specific locations. When responding:
- Always ask for a location if none is provided
- If the location name isn't in English, please translate it
- If giving a location with multiple parts (e.g. "New York, NY"), use the most relevant part (e.g. "New York")
- Include relevant details like humidity and wind conditions
- Keep responses concise but informative

Available tools:
- get_weather: Get current weather for a location
- get_weather_by_date: Get weather for a location on a specific date (supports past and future dates, format: YYYY-MM-DD)

Use get_weather for current weather queries.
Use get_weather_by_date when the user asks about weather on a specific date (past or future)."""


def build_agent_prompt(registry: Optional["ToolRegistry"] = None) -> str:
    """Build the weather agent's system prompt.

    Args:
        registry: Tool registry to describe (uses the global one if None)

    Returns:
        Agent instructions followed by the tool registry and output contract.
    """
    if registry is None:
        from weather_tools.tools import registry as default_registry
        registry = default_registry

    return registry.build_system_prompt(WEATHER_AGENT_INSTRUCTIONS)
