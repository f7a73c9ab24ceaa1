"""
Weather lookups against the Open-Meteo APIs.

    from weather_tools.weather import WeatherService

    with WeatherService.from_config() as service:
        record = service.weather_for_date("Paris", "2024-01-15")
"""

from weather_tools.weather.client import OpenMeteoClient, TransportConfig, create_http_client
from weather_tools.weather.conditions import describe_weather_code
from weather_tools.weather.exceptions import (
    CurrentConditionsUnavailableError,
    ForecastUnavailableError,
    InvalidDateError,
    InvalidTimezoneError,
    LocationNotFoundError,
    NoDataForDateError,
    WeatherDataUnavailable,
    WeatherError,
    WeatherServiceError,
)
from weather_tools.weather.geocoding import Geocoder
from weather_tools.weather.models import (
    CurrentDate,
    DatedWeatherRecord,
    FutureDate,
    Location,
    Now,
    PastDate,
    TemporalTarget,
    WeatherRecord,
)
from weather_tools.weather.resolver import WeatherResolver, parse_date, reference_zone
from weather_tools.weather.service import (
    WeatherService,
    get_weather_service,
    set_weather_service,
)

__all__ = [
    # Services
    "WeatherService",
    "Geocoder",
    "WeatherResolver",
    "OpenMeteoClient",
    "TransportConfig",
    "create_http_client",
    "get_weather_service",
    "set_weather_service",
    # Helpers
    "describe_weather_code",
    "parse_date",
    "reference_zone",
    # Models
    "Location",
    "WeatherRecord",
    "DatedWeatherRecord",
    "TemporalTarget",
    "Now",
    "PastDate",
    "CurrentDate",
    "FutureDate",
    # Exceptions
    "WeatherError",
    "LocationNotFoundError",
    "InvalidDateError",
    "InvalidTimezoneError",
    "WeatherServiceError",
    "WeatherDataUnavailable",
    "NoDataForDateError",
    "ForecastUnavailableError",
    "CurrentConditionsUnavailableError",
]
