"""
Tools and shared registry for the weather_tools package.

Importing this package registers the weather tools with `registry`.
"""

# Import registry first
from weather_tools.tools._registry import registry

from weather_tools.tools.weather import get_weather, get_weather_by_date

__all__ = [
    # Registry
    "registry",
    # Tools
    "get_weather",
    "get_weather_by_date",
]
