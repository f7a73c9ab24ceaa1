"""HTTP access to the Open-Meteo APIs.

Transport settings (timeout, proxy, TLS verification) are passed in
explicitly through TransportConfig; nothing here reads global state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import httpx

from weather_tools.config.config import DEFAULTS
from weather_tools.weather.exceptions import WeatherServiceError

if TYPE_CHECKING:
    from weather_tools.config.config import Config

logger = logging.getLogger(__name__)

CURRENT_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "wind_speed_10m",
    "wind_gusts_10m",
    "weather_code",
)
HOURLY_FIELDS = CURRENT_FIELDS
DAILY_FIELDS = (
    "temperature_2m_max",
    "temperature_2m_min",
    "apparent_temperature_max",
    "apparent_temperature_min",
    "relative_humidity_2m_mean",
    "wind_speed_10m_max",
    "wind_gusts_10m_max",
    "weather_code",
)


@dataclass(frozen=True)
class TransportConfig:
    """Settings for the HTTP client used by a weather service."""
    timeout: float = DEFAULTS["timeout"]
    proxy: Optional[str] = None
    verify: bool = True
    user_agent: str = DEFAULTS["user_agent"]

    @classmethod
    def from_config(cls, config: "Config") -> "TransportConfig":
        return cls(
            timeout=float(config.get("timeout")),
            proxy=config.get("proxy"),
            verify=bool(config.get("verify_ssl")),
            user_agent=config.get("user_agent"),
        )


def create_http_client(
    transport_config: TransportConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an httpx client for the given transport settings.

    Args:
        transport_config: Timeout, proxy and TLS settings (defaults if None)
        transport: Optional httpx transport to send requests through
            instead of the network

    Returns:
        A configured httpx.Client; the caller owns and closes it.
    """
    transport_config = transport_config or TransportConfig()
    return httpx.Client(
        headers={"User-Agent": transport_config.user_agent},
        timeout=httpx.Timeout(transport_config.timeout),
        proxy=transport_config.proxy,
        verify=transport_config.verify,
        follow_redirects=True,
        transport=transport,
    )


def _error_reason(response: httpx.Response) -> str:
    """Extract Open-Meteo's error reason, falling back to the status line."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("reason"):
        return str(payload["reason"])
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class OpenMeteoClient:
    """Thin wrapper over the geocoding, forecast and archive endpoints.

    Each method issues exactly one GET and returns the decoded JSON body.
    Failures of the transport or non-2xx responses raise WeatherServiceError.
    """

    def __init__(
        self,
        http: httpx.Client,
        geocoding_url: str = DEFAULTS["geocoding_url"],
        forecast_url: str = DEFAULTS["forecast_url"],
        archive_url: str = DEFAULTS["archive_url"],
    ):
        self.http = http
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self.archive_url = archive_url

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.http.get(url, params=params)
        except httpx.HTTPError as e:
            raise WeatherServiceError(f"Request to {url} failed: {e}") from e

        if response.is_error:
            raise WeatherServiceError(f"Weather service error: {_error_reason(response)}")

        try:
            return response.json()
        except ValueError as e:
            raise WeatherServiceError(f"Invalid JSON from {url}") from e

    def search(self, name: str) -> Any:
        """Look up the single best match for a place name."""
        return self._get_json(self.geocoding_url, {"name": name, "count": 1})

    def current(self, latitude: float, longitude: float) -> Any:
        """Fetch the live current-conditions snapshot."""
        return self._get_json(self.forecast_url, {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(CURRENT_FIELDS),
        })

    def archive(self, latitude: float, longitude: float, day: str) -> Any:
        """Fetch hourly archived readings for a single day (YYYY-MM-DD)."""
        return self._get_json(self.archive_url, {
            "latitude": latitude,
            "longitude": longitude,
            "start_date": day,
            "end_date": day,
            "hourly": ",".join(HOURLY_FIELDS),
        })

    def daily_forecast(self, latitude: float, longitude: float) -> Any:
        """Fetch the daily forecast in the location's own time zone."""
        return self._get_json(self.forecast_url, {
            "latitude": latitude,
            "longitude": longitude,
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
        })
