"""
Geocoding - resolve a place name to coordinates.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from weather_tools.weather.client import OpenMeteoClient
from weather_tools.weather.exceptions import LocationNotFoundError
from weather_tools.weather.models import GeocodingResponse, Location

logger = logging.getLogger(__name__)


class Geocoder:
    """Resolves free-text place names through the Open-Meteo geocoding API."""

    def __init__(self, client: OpenMeteoClient):
        self.client = client

    def resolve(self, location_text: str) -> Location:
        """Get coordinates for a place name.

        The name should already be in a language the geocoding service
        understands (English works best).

        Args:
            location_text: Place name, e.g. "Paris".

        Returns:
            Location with the canonical name and coordinates of the best match.

        Raises:
            LocationNotFoundError: If the name is blank or has no match.
            WeatherServiceError: If the request fails.
        """
        text = (location_text or "").strip()
        if not text:
            raise LocationNotFoundError("Location must not be empty")

        payload = self.client.search(text)
        try:
            results = GeocodingResponse.model_validate(payload).results
        except ValidationError as e:
            raise LocationNotFoundError(f"Location '{text}' not found") from e

        if not results:
            raise LocationNotFoundError(f"Location '{text}' not found")

        top = results[0]
        logger.debug(f"Resolved '{text}' to {top.name} ({top.latitude}, {top.longitude})")
        return Location(
            name=top.name,
            latitude=top.latitude,
            longitude=top.longitude,
            timezone=top.timezone,
        )
