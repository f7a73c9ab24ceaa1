"""
Shared fixtures: a fake Open-Meteo upstream served through httpx.MockTransport.
"""

from datetime import datetime, timezone

import httpx
import pytest

from weather_tools.config import Config
from weather_tools.weather import WeatherService

# All date bucketing in the tests is relative to this instant
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
TODAY = "2025-06-15"

GEOCODE_PARIS = {
    "results": [{
        "id": 2988507,
        "name": "Paris",
        "latitude": 48.85341,
        "longitude": 2.3488,
        "country": "France",
        "timezone": "Europe/Paris",
    }],
    "generationtime_ms": 0.7,
}

CURRENT_PARIS = {
    "latitude": 48.86,
    "longitude": 2.34,
    "current": {
        "time": "2025-06-15T12:00",
        "interval": 900,
        "temperature_2m": 22.5,
        "apparent_temperature": 21.8,
        "relative_humidity_2m": 55,
        "wind_speed_10m": 11.2,
        "wind_gusts_10m": 25.6,
        "weather_code": 2,
    },
}


def make_archive(hours=24):
    """Hourly archive payload whose value at index i is derived from i."""
    return {
        "hourly": {
            "time": [f"2025-06-10T{h:02d}:00" for h in range(hours)],
            "temperature_2m": [float(h) for h in range(hours)],
            "apparent_temperature": [h - 1.0 for h in range(hours)],
            "relative_humidity_2m": [50 + h for h in range(hours)],
            "wind_speed_10m": [h / 2 for h in range(hours)],
            "wind_gusts_10m": [float(h * 2) for h in range(hours)],
            "weather_code": [0 if h < hours // 2 else 61 for h in range(hours)],
        },
    }


def make_forecast():
    """Seven-day daily forecast starting today."""
    return {
        "timezone": "Europe/Paris",
        "daily": {
            "time": [f"2025-06-{d}" for d in range(15, 22)],
            "temperature_2m_max": [20.0, 21.0, 10.0, 23.0, 24.0, 25.0, 26.0],
            "temperature_2m_min": [12.0, 13.0, 2.0, 15.0, 16.0, 17.0, 18.0],
            "apparent_temperature_max": [19.0, 20.0, 8.0, 22.0, 23.0, 24.0, 25.0],
            "apparent_temperature_min": [11.0, 12.0, 0.0, 14.0, 15.0, 16.0, 17.0],
            "relative_humidity_2m_mean": [60, 61, 88, 63, 64, 65, 66],
            "wind_speed_10m_max": [10.0, 11.0, 30.5, 13.0, 14.0, 15.0, 16.0],
            "wind_gusts_10m_max": [20.0, 21.0, 55.1, 23.0, 24.0, 25.0, 26.0],
            "weather_code": [0, 1, 65, 3, 45, 51, 95],
        },
    }


class FakeOpenMeteo:
    """Routes requests to canned payloads and records every request made."""

    def __init__(self, geocoding=None, current=None, archive=None, forecast=None):
        self.geocoding = GEOCODE_PARIS if geocoding is None else geocoding
        self.current = CURRENT_PARIS if current is None else current
        self.archive = make_archive() if archive is None else archive
        self.forecast = make_forecast() if forecast is None else forecast
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host.startswith("geocoding-api"):
            payload = self.geocoding
        elif host.startswith("archive-api"):
            payload = self.archive
        elif "current" in request.url.params:
            payload = self.current
        else:
            payload = self.forecast
        return httpx.Response(200, json=payload)

    def endpoints(self) -> list[str]:
        """Host and path of each request, in order."""
        return [f"{r.url.host}{r.url.path}" for r in self.requests]


def make_service(handler, clock=lambda: NOW, **config) -> WeatherService:
    """WeatherService wired to a fake upstream handler."""
    return WeatherService.from_config(
        Config(**config),
        transport=httpx.MockTransport(handler),
        clock=clock,
    )


@pytest.fixture
def upstream():
    return FakeOpenMeteo()


@pytest.fixture
def service(upstream):
    svc = make_service(upstream)
    yield svc
    svc.close()
