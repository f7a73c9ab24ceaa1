"""Weather lookup exceptions.

All of them derive from ToolError so a tool caller can catch one base class.
"""
from __future__ import annotations

from weather_tools.core.exceptions import ToolError


class WeatherError(ToolError):
    """Base exception for weather lookups."""


class LocationNotFoundError(WeatherError):
    """The geocoding service returned no match for the location."""


class InvalidDateError(WeatherError):
    """The requested date is not a valid YYYY-MM-DD calendar date."""


class InvalidTimezoneError(WeatherError, ValueError):
    """A reference time zone name is not a known IANA zone."""


class WeatherServiceError(WeatherError):
    """An upstream request failed or returned an error status."""


class WeatherDataUnavailable(WeatherError):
    """The upstream response did not contain the data needed for a record."""


class NoDataForDateError(WeatherDataUnavailable):
    """The archive has no hourly readings for a past date."""


class ForecastUnavailableError(WeatherDataUnavailable):
    """The daily forecast does not cover a future date."""


class CurrentConditionsUnavailableError(WeatherDataUnavailable):
    """The current-conditions snapshot was missing or incomplete."""
