# ABOUTME: Tests for the Open-Meteo marine and weather API clients
# ABOUTME: Uses mocked responses to avoid real API calls in tests

import pytest
import requests
from unittest.mock import MagicMock, patch

from surfability.weather.models import CurrentWeather
from surfability.weather.sources import MarineClient, WeatherClient, WeatherUnavailableError

WEATHER_RESPONSE = {
    "current": {
        "temperature_2m": 26.4,
        "weather_code": 2,
        "wind_speed_10m": 12.0,
        "wind_direction_10m": 270,
    },
    "hourly": {
        "time": ["2025-06-13T00:00", "2025-06-13T01:00"],
        "wind_speed_10m": [10.0, 11.0],
        "wind_direction_10m": [260, 265],
    },
}


def mock_response(payload=None, status=200):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


class TestMarineClient:
    """Tests for MarineClient"""

    def test_fetch_returns_json(self):
        payload = {"hourly": {"wave_height": [1.2]}}
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.return_value = mock_response(payload)

            result = MarineClient(lat=29.9, lon=-81.3).fetch()

            assert result == payload
            params = mock_get.call_args[1]["params"]
            assert params["latitude"] == 29.9
            assert "swell_wave_direction" in params["hourly"]
            assert params["current"] == "sea_surface_temperature"
            assert mock_get.call_args[1]["timeout"] == 8

    def test_fetch_returns_none_on_http_error(self):
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.return_value = mock_response({}, status=502)

            assert MarineClient().fetch() is None

    def test_fetch_returns_none_on_timeout(self):
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.side_effect = requests.Timeout("slow")

            assert MarineClient().fetch() is None


class TestWeatherClient:
    """Tests for WeatherClient"""

    def test_fetch_returns_json(self):
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.return_value = mock_response(WEATHER_RESPONSE)

            result = WeatherClient().fetch()

            assert result["current"]["wind_speed_10m"] == 12.0
            params = mock_get.call_args[1]["params"]
            assert params["forecast_days"] == 2
            assert params["timezone"] == "America/New_York"

    def test_fetch_raises_on_http_error(self):
        """The weather API is the one source with no fallback"""
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.return_value = mock_response({}, status=500)

            with pytest.raises(WeatherUnavailableError):
                WeatherClient().fetch()

    def test_fetch_raises_on_network_error(self):
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.side_effect = requests.ConnectionError("refused")

            with pytest.raises(WeatherUnavailableError):
                WeatherClient().fetch()

    def test_fetch_raises_on_missing_sections(self):
        with patch('surfability.weather.sources.requests.get') as mock_get:
            mock_get.return_value = mock_response({"current": {}})

            with pytest.raises(WeatherUnavailableError):
                WeatherClient().fetch()

    def test_parse_current(self):
        current = WeatherClient.parse_current(WEATHER_RESPONSE, water_temperature_c=24.0)

        assert isinstance(current, CurrentWeather)
        assert current.air_temperature_c == 26.4
        assert current.weather_code == 2
        assert current.weather_description == "Partly cloudy"
        assert current.wind_direction_deg == 270
        assert current.water_temperature_c == 24.0

    def test_parse_current_unknown_weather_code(self):
        data = {"current": {**WEATHER_RESPONSE["current"], "weather_code": 42}}

        assert WeatherClient.parse_current(data).weather_description == "Unknown conditions"

    def test_parse_current_raises_on_malformed_data(self):
        with pytest.raises(WeatherUnavailableError):
            WeatherClient.parse_current({"current": {"temperature_2m": 20}})
