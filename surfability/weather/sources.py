# ABOUTME: Open-Meteo marine and weather API clients
# ABOUTME: Marine data is optional (None on failure); weather failure is fatal

import logging
import requests
from typing import Optional

from surfability.config import Config
from surfability.weather.codes import describe_weather
from surfability.weather.models import CurrentWeather

log = logging.getLogger(__name__)


class WeatherUnavailableError(RuntimeError):
    """Raised when the general weather API can't be used; no fallback exists."""


class MarineClient:
    """Client for the Open-Meteo marine forecast API"""

    HOURLY_FIELDS = "wave_height,wave_period,swell_wave_direction,sea_surface_temperature"

    def __init__(self, lat: float = None, lon: float = None, timeout: float = None):
        self.lat = lat if lat is not None else Config.LOCATION_LAT
        self.lon = lon if lon is not None else Config.LOCATION_LON
        self.timeout = timeout or Config.MARINE_TIMEOUT_SECONDS

    def fetch(self) -> Optional[dict]:
        """
        Fetch hourly wave data and sea surface temperature.

        Returns:
            Parsed JSON on success, None on any error.
        """
        params = {
            "latitude": self.lat,
            "longitude": self.lon,
            "hourly": self.HOURLY_FIELDS,
            "current": "sea_surface_temperature",
            "timezone": Config.LOCATION_TIMEZONE,
        }
        try:
            response = requests.get(Config.MARINE_API_URL, params=params, timeout=self.timeout)
            if response.status_code != 200:
                log.warning(f"Marine API returned HTTP {response.status_code}, falling back")
                return None
            return response.json()
        except (requests.RequestException, ValueError) as e:
            log.warning(f"Marine API failed, falling back: {e}")
            return None


class WeatherClient:
    """Client for the Open-Meteo general forecast API (wind, air temp, conditions)"""

    def __init__(self, lat: float = None, lon: float = None, timeout: float = None):
        self.lat = lat if lat is not None else Config.LOCATION_LAT
        self.lon = lon if lon is not None else Config.LOCATION_LON
        self.timeout = timeout or Config.WEATHER_TIMEOUT_SECONDS

    def fetch(self) -> dict:
        """
        Fetch current conditions and the hourly wind series.

        Returns:
            Parsed JSON with "current" and "hourly" sections

        Raises:
            WeatherUnavailableError: on HTTP error, timeout or a malformed body
        """
        params = {
            "latitude": self.lat,
            "longitude": self.lon,
            "current": "temperature_2m,weather_code,wind_speed_10m,wind_direction_10m",
            "hourly": "wind_speed_10m,wind_direction_10m",
            "timezone": Config.LOCATION_TIMEZONE,
            "forecast_days": 2,
        }
        try:
            response = requests.get(Config.WEATHER_API_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            log.error(f"Weather API request failed: {e}")
            raise WeatherUnavailableError(f"Weather API unavailable: {e}") from e

        if "current" not in data or "hourly" not in data:
            log.error(f"Weather API response missing sections: {list(data)}")
            raise WeatherUnavailableError("Weather API response missing current/hourly data")
        return data

    @staticmethod
    def parse_current(data: dict, water_temperature_c: Optional[float] = None) -> CurrentWeather:
        """Pull the current-conditions block out of a weather response."""
        try:
            current = data["current"]
            code = int(current["weather_code"])
            return CurrentWeather(
                air_temperature_c=float(current["temperature_2m"]),
                weather_code=code,
                weather_description=describe_weather(code),
                wind_speed_kmh=float(current["wind_speed_10m"]),
                wind_direction_deg=float(current["wind_direction_10m"]),
                water_temperature_c=water_temperature_c,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherUnavailableError(f"Malformed current weather: {e}") from e
