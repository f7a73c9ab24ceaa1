"""
Weather service - geocodes a place name and resolves its weather.

Each lookup makes two sequential requests (geocode, then one weather
endpoint). Nothing is cached between lookups.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Callable, Optional

import httpx

from weather_tools.config.config import Config, get_config
from weather_tools.weather.client import OpenMeteoClient, TransportConfig, create_http_client
from weather_tools.weather.geocoding import Geocoder
from weather_tools.weather.models import DatedWeatherRecord, Now, WeatherRecord
from weather_tools.weather.resolver import WeatherResolver, parse_date

logger = logging.getLogger(__name__)


class WeatherService:
    """Entry point for weather lookups by place name.

    Usage:
        with WeatherService.from_config() as service:
            service.current_weather("Paris")
            service.weather_for_date("Paris", "2024-01-15")
    """

    def __init__(
        self,
        client: OpenMeteoClient,
        reference_timezone: str = "UTC",
        clock: Callable[[], dt.datetime] | None = None,
    ):
        self.client = client
        self.geocoder = Geocoder(client)
        self.resolver = WeatherResolver(client, reference_timezone, clock)

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> "WeatherService":
        """Build a service from configuration.

        Args:
            config: Settings to use (the user config file if None)
            transport: Optional httpx transport to route requests through
            clock: Optional timezone-aware clock for date bucketing
        """
        config = config if config is not None else get_config()
        http = create_http_client(TransportConfig.from_config(config), transport=transport)
        client = OpenMeteoClient(
            http,
            geocoding_url=config.get("geocoding_url"),
            forecast_url=config.get("forecast_url"),
            archive_url=config.get("archive_url"),
        )
        return cls(client, reference_timezone=config.get("reference_timezone"), clock=clock)

    def current_weather(self, location_text: str) -> WeatherRecord:
        """Current conditions for a place name."""
        location = self.geocoder.resolve(location_text)
        return self.resolver.resolve_weather(location, Now())

    def weather_for_date(self, location_text: str, date_str: str) -> DatedWeatherRecord:
        """Weather for a place name on a YYYY-MM-DD date (past, today or future)."""
        # Reject malformed dates before spending a geocoding request
        parse_date(date_str)
        location = self.geocoder.resolve(location_text)
        target = self.resolver.classify(date_str, location)
        return self.resolver.resolve_weather(location, target)

    def close(self) -> None:
        self.client.http.close()

    def __enter__(self) -> "WeatherService":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


# Shared instance used by the registered tools
_service: Optional[WeatherService] = None
_service_lock = threading.Lock()


def get_weather_service() -> WeatherService:
    """Get the shared WeatherService, creating it from the config on first use."""
    global _service
    with _service_lock:
        if _service is None:
            _service = WeatherService.from_config()
        return _service


def set_weather_service(service: Optional[WeatherService]) -> None:
    """Replace the shared WeatherService (None resets to config defaults)."""
    global _service
    with _service_lock:
        previous, _service = _service, service
    if previous is not None and previous is not service:
        previous.close()
