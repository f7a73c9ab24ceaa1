"""
Weather tool implementation.
"""

from weather_tools.tools.weather.core import (
    get_weather,
    get_weather_by_date,
    _summarize,
)

__all__ = ["get_weather", "get_weather_by_date", "_summarize"]
