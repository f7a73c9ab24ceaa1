"""
Data models for weather lookups.

Location and WeatherRecord are what the tools hand around. The Open-Meteo
response models below them describe exactly the parts of each upstream
payload that a record is built from; one model per endpoint variant.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """A geocoded place."""

    model_config = ConfigDict(frozen=True)

    name: str
    latitude: float
    longitude: float
    timezone: Optional[str] = None


class WeatherRecord(BaseModel):
    """Normalized weather reading returned by the tools.

    Serialized with camelCase names (feelsLike, windSpeed, windGust).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    temperature: float
    feels_like: float = Field(alias="feelsLike")
    humidity: float
    wind_speed: float = Field(alias="windSpeed")
    wind_gust: float = Field(alias="windGust")
    conditions: str
    location: str


class DatedWeatherRecord(WeatherRecord):
    """WeatherRecord for a date-qualified lookup; echoes the requested date."""

    date: str


# ---------------------------------------------------------------------------
# Temporal targets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Now:
    """Live conditions, no date attached."""


@dataclass(frozen=True)
class PastDate:
    """A date before today; served from the hourly archive."""
    date: dt.date
    label: str


@dataclass(frozen=True)
class CurrentDate:
    """Today's date; served like Now but echoes the date."""
    date: dt.date
    label: str


@dataclass(frozen=True)
class FutureDate:
    """A date after today; served from the daily forecast."""
    date: dt.date
    label: str


TemporalTarget = Union[Now, PastDate, CurrentDate, FutureDate]


# ---------------------------------------------------------------------------
# Open-Meteo response shapes
# ---------------------------------------------------------------------------

class GeocodingResult(BaseModel):
    name: str
    latitude: float
    longitude: float
    timezone: Optional[str] = None


class GeocodingResponse(BaseModel):
    # Open-Meteo omits "results" entirely when nothing matches
    results: Optional[list[GeocodingResult]] = None


class CurrentConditions(BaseModel):
    temperature_2m: float
    apparent_temperature: float
    relative_humidity_2m: float
    wind_speed_10m: float
    wind_gusts_10m: float
    weather_code: int


class CurrentResponse(BaseModel):
    current: Optional[CurrentConditions] = None


class HourlySeries(BaseModel):
    time: list[str] = Field(default_factory=list)
    temperature_2m: list[Optional[float]] = Field(default_factory=list)
    apparent_temperature: list[Optional[float]] = Field(default_factory=list)
    relative_humidity_2m: list[Optional[float]] = Field(default_factory=list)
    wind_speed_10m: list[Optional[float]] = Field(default_factory=list)
    wind_gusts_10m: list[Optional[float]] = Field(default_factory=list)
    weather_code: list[Optional[int]] = Field(default_factory=list)


class ArchiveResponse(BaseModel):
    hourly: Optional[HourlySeries] = None


class DailySeries(BaseModel):
    time: list[str] = Field(default_factory=list)
    temperature_2m_max: list[Optional[float]] = Field(default_factory=list)
    temperature_2m_min: list[Optional[float]] = Field(default_factory=list)
    apparent_temperature_max: list[Optional[float]] = Field(default_factory=list)
    apparent_temperature_min: list[Optional[float]] = Field(default_factory=list)
    relative_humidity_2m_mean: list[Optional[float]] = Field(default_factory=list)
    wind_speed_10m_max: list[Optional[float]] = Field(default_factory=list)
    wind_gusts_10m_max: list[Optional[float]] = Field(default_factory=list)
    weather_code: list[Optional[int]] = Field(default_factory=list)


class ForecastResponse(BaseModel):
    daily: Optional[DailySeries] = None
