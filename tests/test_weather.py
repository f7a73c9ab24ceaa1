#!/usr/bin/env python3
"""
Tests for the weather package - geocoding, date bucketing and response
normalization against a fake Open-Meteo upstream.
"""

import threading
import time
from datetime import date, datetime, timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
import pytest
from pydantic import ValidationError

from conftest import NOW, TODAY, FakeOpenMeteo, make_archive, make_forecast, make_service
from weather_tools.weather import (
    CurrentConditionsUnavailableError,
    CurrentDate,
    DatedWeatherRecord,
    ForecastUnavailableError,
    FutureDate,
    InvalidDateError,
    InvalidTimezoneError,
    Location,
    LocationNotFoundError,
    NoDataForDateError,
    Now,
    OpenMeteoClient,
    PastDate,
    WeatherError,
    WeatherRecord,
    WeatherService,
    WeatherServiceError,
    create_http_client,
    describe_weather_code,
    get_weather_service,
    parse_date,
    set_weather_service,
)
from weather_tools.weather.conditions import WMO_CONDITIONS

PARIS = Location(name="Paris", latitude=48.85341, longitude=2.3488, timezone="Europe/Paris")


# ============================================================================
# Condition Code Tests
# ============================================================================

class TestDescribeWeatherCode:
    """Tests for WMO code descriptions."""

    def test_known_codes(self):
        """Test codes from the WMO table."""
        assert describe_weather_code(0) == "Clear sky"
        assert describe_weather_code(61) == "Slight rain"
        assert describe_weather_code(99) == "Thunderstorm with heavy hail"

    def test_unknown_code(self):
        """Test codes outside the table map to Unknown."""
        assert describe_weather_code(9999) == "Unknown"
        assert describe_weather_code(4) == "Unknown"
        assert describe_weather_code(-1) == "Unknown"

    def test_table_size(self):
        """Test the table covers the 28 standard Open-Meteo codes."""
        assert len(WMO_CONDITIONS) == 28


# ============================================================================
# Date Parsing Tests
# ============================================================================

class TestParseDate:
    """Tests for parse_date()."""

    def test_valid_date(self):
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    @pytest.mark.parametrize("value", ["2024-02-30", "15/01/2024", "tomorrow", "", None])
    def test_invalid_date(self, value):
        """Test malformed or impossible dates raise InvalidDateError."""
        with pytest.raises(InvalidDateError):
            parse_date(value)


# ============================================================================
# Geocoder Tests
# ============================================================================

class TestGeocoder:
    """Tests for Geocoder.resolve()."""

    def test_resolve_uses_canonical_name(self, service, upstream):
        """Test the result carries the geocoder's name, not the raw input."""
        location = service.geocoder.resolve("  paris ")

        assert location == PARIS
        request = upstream.requests[0]
        assert request.url.params["name"] == "paris"
        assert request.url.params["count"] == "1"

    def test_resolve_encodes_name(self, service, upstream):
        """Test names with spaces and accents reach the API intact."""
        service.geocoder.resolve("São Paulo")
        assert upstream.requests[0].url.params["name"] == "São Paulo"

    @pytest.mark.parametrize("payload", [
        {"results": []},
        {"generationtime_ms": 0.5},
        {"results": [{"latitude": 1.0}]},
        [],
    ])
    def test_resolve_not_found(self, payload):
        """Test empty, absent or malformed results raise LocationNotFoundError."""
        svc = make_service(FakeOpenMeteo(geocoding=payload))
        with pytest.raises(LocationNotFoundError, match="Atlantis"):
            svc.geocoder.resolve("Atlantis")

    def test_resolve_blank_makes_no_request(self, service, upstream):
        """Test blank input fails without calling the API."""
        with pytest.raises(LocationNotFoundError):
            service.geocoder.resolve("   ")
        assert upstream.requests == []


# ============================================================================
# Date Classification Tests
# ============================================================================

class TestClassify:
    """Tests for WeatherResolver.classify()."""

    def test_past_today_future(self, service):
        """Test each bucket relative to the clock's date."""
        resolver = service.resolver

        assert resolver.classify("2025-06-14") == PastDate(date(2025, 6, 14), "2025-06-14")
        assert resolver.classify(TODAY) == CurrentDate(date(2025, 6, 15), TODAY)
        assert resolver.classify("2025-06-16") == FutureDate(date(2025, 6, 16), "2025-06-16")

    def test_ignores_time_of_day(self, upstream):
        """Test only calendar dates are compared."""
        late = make_service(upstream, clock=lambda: datetime(2025, 6, 15, 23, 59, tzinfo=timezone.utc))
        early = make_service(upstream, clock=lambda: datetime(2025, 6, 15, 0, 0, tzinfo=timezone.utc))

        assert isinstance(late.resolver.classify(TODAY), CurrentDate)
        assert isinstance(early.resolver.classify(TODAY), CurrentDate)
        assert isinstance(late.resolver.classify("2025-06-16"), FutureDate)

    def test_invalid_date(self, service):
        """Test malformed dates raise InvalidDateError."""
        with pytest.raises(InvalidDateError, match="YYYY-MM-DD"):
            service.resolver.classify("June 15")

    def test_unknown_reference_timezone(self, upstream):
        """Test an unknown zone name is rejected up front as a weather error."""
        with pytest.raises(InvalidTimezoneError, match="Unknown time zone") as exc:
            make_service(upstream, reference_timezone="Not/AZone")
        assert isinstance(exc.value, WeatherError)
        assert isinstance(exc.value, ValueError)

    def test_location_zone_falls_back_to_utc(self, upstream):
        """Test 'location' mode uses UTC when the location has no zone."""
        svc = make_service(upstream, reference_timezone="location")
        nowhere = Location(name="Null Island", latitude=0.0, longitude=0.0)

        assert svc.resolver.zone_for(nowhere) is timezone.utc
        assert svc.resolver.zone_for(None) is timezone.utc
        assert isinstance(svc.resolver.classify(TODAY, nowhere), CurrentDate)

    def test_location_zone(self, upstream):
        """Test 'location' mode decides "today" in the location's own zone."""
        try:
            ZoneInfo("Asia/Tokyo")
        except ZoneInfoNotFoundError:
            pytest.skip("tz database not available")

        # 20:00 UTC on the 15th is already the 16th in Tokyo
        clock = lambda: datetime(2025, 6, 15, 20, 0, tzinfo=timezone.utc)
        tokyo = Location(name="Tokyo", latitude=35.69, longitude=139.69, timezone="Asia/Tokyo")

        by_location = make_service(upstream, clock=clock, reference_timezone="location")
        by_utc = make_service(upstream, clock=clock)

        assert isinstance(by_location.resolver.classify("2025-06-16", tokyo), CurrentDate)
        assert isinstance(by_utc.resolver.classify("2025-06-16", tokyo), FutureDate)


# ============================================================================
# Weather Resolution Tests
# ============================================================================

class TestResolveWeather:
    """Tests for WeatherResolver.resolve_weather()."""

    def test_now(self, service, upstream):
        """Test the live snapshot is used directly."""
        record = service.resolver.resolve_weather(PARIS, Now())

        assert record == WeatherRecord(
            temperature=22.5,
            feels_like=21.8,
            humidity=55,
            wind_speed=11.2,
            wind_gust=25.6,
            conditions="Partly cloudy",
            location="Paris",
        )
        assert type(record) is WeatherRecord
        assert "date" not in record.model_dump()
        request = upstream.requests[0]
        assert request.url.path == "/v1/forecast"
        assert request.url.params["current"] == (
            "temperature_2m,apparent_temperature,relative_humidity_2m,"
            "wind_speed_10m,wind_gusts_10m,weather_code"
        )
        assert request.url.params["latitude"] == "48.85341"

    def test_current_date_matches_now(self, service):
        """Test today's date returns the Now record plus the date."""
        now_record = service.resolver.resolve_weather(PARIS, Now())
        today_record = service.resolver.resolve_weather(PARIS, service.resolver.classify(TODAY))

        assert isinstance(today_record, DatedWeatherRecord)
        assert today_record.date == TODAY
        assert today_record.model_dump(exclude={"date"}) == now_record.model_dump()

    def test_past_uses_archive_midpoint(self, service, upstream):
        """Test past dates read hourly index n // 2 from the archive."""
        record = service.resolver.resolve_weather(PARIS, service.resolver.classify("2025-06-10"))

        assert record.temperature == 12.0
        assert record.feels_like == 11.0
        assert record.humidity == 62
        assert record.wind_speed == 6.0
        assert record.wind_gust == 24.0
        assert record.conditions == "Slight rain"
        assert record.date == "2025-06-10"

        request = upstream.requests[0]
        assert request.url.host == "archive-api.open-meteo.com"
        assert request.url.path == "/v1/archive"
        assert request.url.params["start_date"] == "2025-06-10"
        assert request.url.params["end_date"] == "2025-06-10"
        assert "temperature_2m" in request.url.params["hourly"]

    def test_past_odd_length_series(self):
        """Test the midpoint index for a short series."""
        svc = make_service(FakeOpenMeteo(archive=make_archive(hours=5)))
        record = svc.resolver.resolve_weather(PARIS, PastDate(date(2025, 6, 10), "2025-06-10"))
        assert record.temperature == 2.0

    @pytest.mark.parametrize("payload", [
        {"hourly": {"time": [], "temperature_2m": []}},
        {"hourly": None},
        {},
        {"hourly": {"temperature_2m": "n/a"}},
    ])
    def test_past_without_data(self, payload):
        """Test empty, absent or malformed hourly data raises NoDataForDateError."""
        svc = make_service(FakeOpenMeteo(archive=payload))
        with pytest.raises(NoDataForDateError, match="2025-06-10"):
            svc.resolver.resolve_weather(PARIS, PastDate(date(2025, 6, 10), "2025-06-10"))

    def test_past_with_missing_readings(self):
        """Test null or truncated columns at the midpoint raise NoDataForDateError."""
        archive = make_archive()
        archive["hourly"]["wind_gusts_10m"][12] = None
        svc = make_service(FakeOpenMeteo(archive=archive))
        with pytest.raises(NoDataForDateError):
            svc.resolver.resolve_weather(PARIS, PastDate(date(2025, 6, 10), "2025-06-10"))

        archive = make_archive()
        archive["hourly"]["weather_code"] = [0, 0]
        svc = make_service(FakeOpenMeteo(archive=archive))
        with pytest.raises(NoDataForDateError):
            svc.resolver.resolve_weather(PARIS, PastDate(date(2025, 6, 10), "2025-06-10"))

    def test_future_averages_daily_extremes(self, service, upstream):
        """Test future dates average the matched day's max and min."""
        record = service.resolver.resolve_weather(PARIS, service.resolver.classify("2025-06-17"))

        assert record.temperature == 6.0
        assert record.feels_like == 4.0
        assert record.humidity == 88
        assert record.wind_speed == 30.5
        assert record.wind_gust == 55.1
        assert record.conditions == "Heavy rain"
        assert record.date == "2025-06-17"

        request = upstream.requests[0]
        assert request.url.path == "/v1/forecast"
        assert request.url.params["timezone"] == "auto"
        assert "relative_humidity_2m_mean" in request.url.params["daily"]

    def test_future_matches_timestamp_prefix(self):
        """Test daily entries with a time suffix still match the date."""
        forecast = make_forecast()
        forecast["daily"]["time"] = [f"{t}T00:00" for t in forecast["daily"]["time"]]
        svc = make_service(FakeOpenMeteo(forecast=forecast))

        record = svc.resolver.resolve_weather(PARIS, FutureDate(date(2025, 6, 17), "2025-06-17"))
        assert record.temperature == 6.0

    def test_future_outside_forecast(self, service):
        """Test a date beyond the forecast range raises ForecastUnavailableError."""
        with pytest.raises(ForecastUnavailableError, match="2025-07-30"):
            service.resolver.resolve_weather(PARIS, service.resolver.classify("2025-07-30"))

    @pytest.mark.parametrize("payload", [
        {"daily": {"time": []}},
        {"daily": None},
        {},
        {"daily": {"time": "2025-06-17"}},
    ])
    def test_future_without_data(self, payload):
        """Test empty, absent or malformed daily data raises ForecastUnavailableError."""
        svc = make_service(FakeOpenMeteo(forecast=payload))
        with pytest.raises(ForecastUnavailableError):
            svc.resolver.resolve_weather(PARIS, FutureDate(date(2025, 6, 17), "2025-06-17"))

    def test_future_with_missing_columns(self):
        """Test a matched day without all values raises ForecastUnavailableError."""
        forecast = make_forecast()
        del forecast["daily"]["wind_gusts_10m_max"]
        svc = make_service(FakeOpenMeteo(forecast=forecast))
        with pytest.raises(ForecastUnavailableError):
            svc.resolver.resolve_weather(PARIS, FutureDate(date(2025, 6, 17), "2025-06-17"))

    @pytest.mark.parametrize("payload", [
        {},
        {"current": {"temperature_2m": 20.0}},
    ])
    def test_now_without_data(self, payload):
        """Test a missing or incomplete snapshot raises CurrentConditionsUnavailableError."""
        svc = make_service(FakeOpenMeteo(current=payload))
        with pytest.raises(CurrentConditionsUnavailableError, match="Paris"):
            svc.resolver.resolve_weather(PARIS, Now())

    def test_unknown_weather_code(self):
        """Test unmapped codes produce Unknown instead of failing."""
        current = {"current": {
            "temperature_2m": 1.0,
            "apparent_temperature": 0.0,
            "relative_humidity_2m": 90,
            "wind_speed_10m": 3.0,
            "wind_gusts_10m": 6.0,
            "weather_code": 9999,
        }}
        svc = make_service(FakeOpenMeteo(current=current))
        assert svc.resolver.resolve_weather(PARIS, Now()).conditions == "Unknown"


# ============================================================================
# WeatherService Tests
# ============================================================================

class TestWeatherService:
    """Tests for the geocode-then-fetch pipeline."""

    def test_current_weather(self, service, upstream):
        """Test current weather makes exactly two requests."""
        record = service.current_weather("paris")

        assert record.location == "Paris"
        assert type(record) is WeatherRecord
        assert upstream.endpoints() == [
            "geocoding-api.open-meteo.com/v1/search",
            "api.open-meteo.com/v1/forecast",
        ]

    def test_weather_for_date_routes_by_bucket(self, upstream):
        """Test each date bucket hits its own endpoint."""
        svc = make_service(upstream)

        svc.weather_for_date("Paris", "2025-06-01")
        svc.weather_for_date("Paris", TODAY)
        svc.weather_for_date("Paris", "2025-06-17")

        weather_requests = upstream.requests[1::2]
        assert weather_requests[0].url.path == "/v1/archive"
        assert "current" in weather_requests[1].url.params
        assert "daily" in weather_requests[2].url.params

    def test_repeated_queries_are_not_cached(self, service, upstream):
        """Test identical queries repeat both requests."""
        service.current_weather("Paris")
        service.current_weather("Paris")
        assert len(upstream.requests) == 4

    def test_location_not_found_skips_weather_fetch(self):
        """Test no weather request follows an empty geocoding result."""
        upstream = FakeOpenMeteo(geocoding={"results": []})
        svc = make_service(upstream)

        with pytest.raises(LocationNotFoundError):
            svc.weather_for_date("Atlantis", "2025-06-10")
        assert len(upstream.requests) == 1

    def test_invalid_date_makes_no_request(self, service, upstream):
        """Test a malformed date fails before geocoding."""
        with pytest.raises(InvalidDateError):
            service.weather_for_date("Paris", "2025-13-01")
        assert upstream.requests == []

    def test_http_error_status(self):
        """Test error statuses raise WeatherServiceError with the upstream reason."""
        def handler(request):
            return httpx.Response(400, json={"error": True, "reason": "Parameter 'start_date' is out of allowed range"})

        svc = make_service(handler)
        with pytest.raises(WeatherServiceError, match="out of allowed range"):
            svc.current_weather("Paris")

    def test_http_error_without_reason(self):
        """Test statuses without a JSON reason report the status line."""
        svc = make_service(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(WeatherServiceError, match="503"):
            svc.current_weather("Paris")

    def test_network_error(self):
        """Test transport failures raise WeatherServiceError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        svc = make_service(handler)
        with pytest.raises(WeatherServiceError, match="connection refused"):
            svc.current_weather("Paris")

    def test_timeout(self):
        """Test timeouts surface as WeatherServiceError."""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        svc = make_service(handler, timeout=0.5)
        assert svc.client.http.timeout.read == 0.5
        with pytest.raises(WeatherServiceError, match="timed out"):
            svc.current_weather("Paris")

    def test_invalid_json(self):
        """Test a non-JSON body raises WeatherServiceError."""
        svc = make_service(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(WeatherServiceError, match="Invalid JSON"):
            svc.current_weather("Paris")

    def test_custom_endpoints_and_user_agent(self):
        """Test configured URLs and User-Agent are used for requests."""
        seen = []

        def handler(request):
            seen.append(request)
            if request.url.path == "/geo":
                return httpx.Response(200, json={"results": [{"name": "Oslo", "latitude": 59.9, "longitude": 10.7}]})
            return httpx.Response(200, json=FakeOpenMeteo().current)

        svc = make_service(
            handler,
            geocoding_url="http://mirror.local/geo",
            forecast_url="http://mirror.local/fc",
            user_agent="test-agent/1.0",
        )
        record = svc.current_weather("Oslo")

        assert record.location == "Oslo"
        assert [r.url.path for r in seen] == ["/geo", "/fc"]
        assert seen[0].headers["User-Agent"] == "test-agent/1.0"

    def test_context_manager_closes_client(self, upstream):
        """Test leaving the with-block closes the HTTP client."""
        with make_service(upstream) as svc:
            svc.current_weather("Paris")
        assert svc.client.http.is_closed


class TestWeatherRecord:
    """Tests for WeatherRecord serialization."""

    def test_serializes_camel_case(self):
        """Test records dump with the agent-facing field names."""
        record = DatedWeatherRecord(
            temperature=6.0, feels_like=4.0, humidity=88, wind_speed=30.5,
            wind_gust=55.1, conditions="Heavy rain", location="Paris", date="2025-06-17",
        )
        assert record.model_dump(by_alias=True) == {
            "temperature": 6.0,
            "feelsLike": 4.0,
            "humidity": 88.0,
            "windSpeed": 30.5,
            "windGust": 55.1,
            "conditions": "Heavy rain",
            "location": "Paris",
            "date": "2025-06-17",
        }

    def test_records_are_immutable(self):
        """Test records cannot be modified after construction."""
        record = WeatherRecord.model_validate({
            "temperature": 1, "feelsLike": 0, "humidity": 50, "windSpeed": 2,
            "windGust": 4, "conditions": "Overcast", "location": "Oslo",
        })
        with pytest.raises(ValidationError):
            record.temperature = 5.0

    def test_dated_record_requires_date(self):
        """Test dated records cannot be built without a date."""
        with pytest.raises(ValidationError):
            DatedWeatherRecord(
                temperature=1, feels_like=0, humidity=50, wind_speed=2,
                wind_gust=4, conditions="Overcast", location="Oslo",
            )


class TestSharedService:
    """Tests for the shared service used by the tools."""

    def test_concurrent_first_use_builds_one_service(self):
        """Test racing first calls share a single service."""
        built = []

        def slow_from_config():
            time.sleep(0.05)
            http = create_http_client(transport=httpx.MockTransport(FakeOpenMeteo()))
            svc = WeatherService(OpenMeteoClient(http), clock=lambda: NOW)
            built.append(svc)
            return svc

        set_weather_service(None)
        results = []
        with patch.object(WeatherService, "from_config", side_effect=slow_from_config):
            threads = [
                threading.Thread(target=lambda: results.append(get_weather_service()))
                for _ in range(8)
            ]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        try:
            assert len(built) == 1
            assert all(svc is built[0] for svc in results)
        finally:
            set_weather_service(None)

    def test_replacing_closes_previous(self):
        """Test installing a new service closes the one it replaces."""
        first = make_service(FakeOpenMeteo())
        second = make_service(FakeOpenMeteo())

        set_weather_service(first)
        set_weather_service(second)
        try:
            assert first.client.http.is_closed
            assert not second.client.http.is_closed
            assert get_weather_service() is second
        finally:
            set_weather_service(None)
        assert second.client.http.is_closed
