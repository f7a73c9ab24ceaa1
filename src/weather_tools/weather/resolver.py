"""
Weather resolver - picks the right upstream endpoint for a date and
normalizes its response into a WeatherRecord.

Dates are bucketed against "today" as a calendar date in an explicit
reference zone:

    past    -> hourly archive, reading at the middle of the day's series
    today   -> live current conditions (date echoed in the record)
    future  -> daily forecast, temperatures averaged from max/min
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ValidationError

from weather_tools.weather.client import DAILY_FIELDS, HOURLY_FIELDS, OpenMeteoClient
from weather_tools.weather.conditions import describe_weather_code
from weather_tools.weather.exceptions import (
    CurrentConditionsUnavailableError,
    ForecastUnavailableError,
    InvalidDateError,
    InvalidTimezoneError,
    NoDataForDateError,
)
from weather_tools.weather.models import (
    ArchiveResponse,
    CurrentDate,
    CurrentResponse,
    DatedWeatherRecord,
    ForecastResponse,
    FutureDate,
    Location,
    Now,
    PastDate,
    TemporalTarget,
    WeatherRecord,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Special reference zone: use the geocoded location's own zone
LOCATION_ZONE = "location"


def parse_date(date_str: str) -> dt.date:
    """Parse a YYYY-MM-DD string into a date.

    Raises:
        InvalidDateError: If the string is not a valid calendar date.
    """
    try:
        return dt.datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as e:
        raise InvalidDateError(f"Invalid date '{date_str}': expected YYYY-MM-DD") from e


def load_zone(name: str) -> dt.tzinfo:
    """Return tzinfo for an IANA zone name ("UTC" needs no tz database)."""
    if name.upper() == "UTC":
        return dt.timezone.utc
    return ZoneInfo(name)


def reference_zone(name: str) -> Optional[dt.tzinfo]:
    """Resolve a reference_timezone setting; None means the location's own zone.

    Raises:
        InvalidTimezoneError: If the name is not a known zone.
    """
    if name == LOCATION_ZONE:
        return None
    try:
        return load_zone(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(f"Unknown time zone: {name}") from e


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _values_at(series: BaseModel, fields: Sequence[str], index: int) -> Optional[list]:
    """Values of several parallel columns at one index, or None if any is missing."""
    values = []
    for field in fields:
        column = getattr(series, field)
        if index >= len(column) or column[index] is None:
            return None
        values.append(column[index])
    return values


class WeatherResolver:
    """Fetches and normalizes weather for a resolved location.

    Args:
        client: Open-Meteo client used for the single weather request.
        reference_timezone: Zone in which "today" is determined. An IANA
            name, "UTC", or "location" for the location's own zone (UTC
            when the geocoder did not report one).
        clock: Returns the current time; must be timezone-aware.
    """

    def __init__(
        self,
        client: OpenMeteoClient,
        reference_timezone: str = "UTC",
        clock: Callable[[], dt.datetime] | None = None,
    ):
        self.client = client
        self.reference_timezone = reference_timezone
        self.clock = clock or _utc_now
        self._zone = reference_zone(reference_timezone)

    def zone_for(self, location: Location | None = None) -> dt.tzinfo:
        """Reference zone used to decide which day "today" is."""
        if self._zone is not None:
            return self._zone
        if location is None or not location.timezone:
            return dt.timezone.utc
        try:
            return load_zone(location.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown zone '{location.timezone}' for {location.name}, using UTC")
            return dt.timezone.utc

    def today(self, location: Location | None = None) -> dt.date:
        return self.clock().astimezone(self.zone_for(location)).date()

    def classify(self, date_str: str, location: Location | None = None) -> TemporalTarget:
        """Bucket a YYYY-MM-DD string as past, today or future."""
        day = parse_date(date_str)
        today = self.today(location)
        if day < today:
            target = PastDate(day, date_str)
        elif day > today:
            target = FutureDate(day, date_str)
        else:
            target = CurrentDate(day, date_str)
        logger.debug(f"{date_str} relative to {today}: {type(target).__name__}")
        return target

    def resolve_weather(self, location: Location, target: TemporalTarget) -> WeatherRecord:
        """Fetch weather for the target and reduce it to a single record.

        Raises:
            NoDataForDateError: Past date with no archived readings.
            ForecastUnavailableError: Future date outside the forecast.
            CurrentConditionsUnavailableError: Snapshot missing or incomplete.
            WeatherServiceError: If the request fails.
        """
        if isinstance(target, PastDate):
            return self._from_archive(location, target)
        if isinstance(target, FutureDate):
            return self._from_forecast(location, target)
        if isinstance(target, (Now, CurrentDate)):
            return self._from_current(location, target)
        raise TypeError(f"Unsupported target: {target!r}")

    def _from_current(self, location: Location, target: Now | CurrentDate) -> WeatherRecord:
        payload = self.client.current(location.latitude, location.longitude)
        try:
            current = CurrentResponse.model_validate(payload).current
        except ValidationError as e:
            raise CurrentConditionsUnavailableError(
                f"No current weather available for {location.name}"
            ) from e
        if current is None:
            raise CurrentConditionsUnavailableError(
                f"No current weather available for {location.name}"
            )

        fields = dict(
            temperature=current.temperature_2m,
            feels_like=current.apparent_temperature,
            humidity=current.relative_humidity_2m,
            wind_speed=current.wind_speed_10m,
            wind_gust=current.wind_gusts_10m,
            conditions=describe_weather_code(current.weather_code),
            location=location.name,
        )
        if isinstance(target, CurrentDate):
            return DatedWeatherRecord(**fields, date=target.label)
        return WeatherRecord(**fields)

    def _from_archive(self, location: Location, target: PastDate) -> DatedWeatherRecord:
        missing = f"No weather data available for {target.label}"
        payload = self.client.archive(
            location.latitude, location.longitude, target.date.isoformat()
        )
        try:
            hourly = ArchiveResponse.model_validate(payload).hourly
        except ValidationError as e:
            raise NoDataForDateError(missing) from e
        if hourly is None or not hourly.temperature_2m:
            raise NoDataForDateError(missing)

        # Midpoint of the day's series stands in for the whole day
        index = len(hourly.temperature_2m) // 2
        values = _values_at(hourly, HOURLY_FIELDS, index)
        if values is None:
            raise NoDataForDateError(missing)
        temperature, feels_like, humidity, wind_speed, wind_gust, code = values

        return DatedWeatherRecord(
            temperature=temperature,
            feels_like=feels_like,
            humidity=humidity,
            wind_speed=wind_speed,
            wind_gust=wind_gust,
            conditions=describe_weather_code(code),
            location=location.name,
            date=target.label,
        )

    def _from_forecast(self, location: Location, target: FutureDate) -> DatedWeatherRecord:
        payload = self.client.daily_forecast(location.latitude, location.longitude)
        try:
            daily = ForecastResponse.model_validate(payload).daily
        except ValidationError as e:
            raise ForecastUnavailableError(
                f"No forecast data available for {target.label}"
            ) from e
        if daily is None or not daily.time:
            raise ForecastUnavailableError(f"No forecast data available for {target.label}")

        day = target.date.isoformat()
        index = next((i for i, t in enumerate(daily.time) if t.startswith(day)), None)
        values = _values_at(daily, DAILY_FIELDS, index) if index is not None else None
        if values is None:
            raise ForecastUnavailableError(f"Forecast not available for {target.label}")
        (t_max, t_min, feels_max, feels_min,
         humidity, wind_speed, wind_gust, code) = values

        return DatedWeatherRecord(
            temperature=(t_max + t_min) / 2,
            feels_like=(feels_max + feels_min) / 2,
            humidity=humidity,
            wind_speed=wind_speed,
            wind_gust=wind_gust,
            conditions=describe_weather_code(code),
            location=location.name,
            date=target.label,
        )
