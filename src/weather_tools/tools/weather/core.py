"""
Weather tools - current and date-specific weather from the Open-Meteo API.
"""

import logging
from typing import Any

from pydantic import Field

from weather_tools.core import tool_output
from weather_tools.tools._registry import registry
from weather_tools.weather.models import DatedWeatherRecord, WeatherRecord
from weather_tools.weather.service import get_weather_service

logger = logging.getLogger(__name__)


def _summarize(record: dict[str, Any]) -> str:
    """One-line summary of a serialized WeatherRecord."""
    when = f" on {record['date']}" if record.get("date") else ""
    return (
        f"{record['location']}{when}: {record['temperature']:.1f}°C "
        f"(feels like {record['feelsLike']:.1f}°C), {record['conditions']}, "
        f"humidity {record['humidity']:.0f}%, wind {record['windSpeed']:.1f} km/h "
        f"(gusts {record['windGust']:.1f} km/h)"
    )


@registry.register(aliases=["weather", "current_weather"])
@tool_output(llm_format=_summarize)
def get_weather(
    location: str = Field(description="City name"),
) -> WeatherRecord:
    """Get current weather for a location.

    Resolves the city name with the Open-Meteo geocoding API, then reads the
    live current-conditions snapshot for its coordinates.

    Args:
        location: Name of the city in English (e.g., "Tokyo", "New York").

    Returns:
        WeatherRecord with temperature and feels-like (°C), relative humidity
        (%), wind speed and gusts (km/h), a condition description and the
        canonical location name.

    Raises:
        LocationNotFoundError: If the city cannot be geocoded.
        CurrentConditionsUnavailableError: If the snapshot is incomplete.
        WeatherServiceError: If an upstream request fails.

    Example:
        >>> get_weather("Paris").data
        {"temperature": 15.2, "feelsLike": 13.9, "humidity": 71.0,
         "windSpeed": 9.4, "windGust": 20.2, "conditions": "Partly cloudy",
         "location": "Paris"}
    """
    logger.info(f"[get_weather] {location}")
    return get_weather_service().current_weather(location)


@registry.register(aliases=["weather_on", "weather_by_date"])
@tool_output(llm_format=_summarize)
def get_weather_by_date(
    location: str = Field(description="City name"),
    date: str = Field(
        description="Date in YYYY-MM-DD format (e.g., 2024-01-15)",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
    ),
) -> DatedWeatherRecord:
    """Get weather for a location on a specific date (supports past and future dates).

    Past dates are read from the historical archive (the reading in the
    middle of the day), today's date from current conditions, and future
    dates from the daily forecast (temperatures averaged from the day's
    max and min).

    Args:
        location: Name of the city in English.
        date: Calendar date as YYYY-MM-DD.

    Returns:
        DatedWeatherRecord: the get_weather fields plus the requested `date`.

    Raises:
        InvalidDateError: If `date` is not a valid calendar date.
        LocationNotFoundError: If the city cannot be geocoded.
        NoDataForDateError: If the archive has no readings for a past date.
        ForecastUnavailableError: If the forecast does not cover the date.
        WeatherServiceError: If an upstream request fails.
    """
    logger.info(f"[get_weather_by_date] {location} on {date}")
    return get_weather_service().weather_for_date(location, date)
