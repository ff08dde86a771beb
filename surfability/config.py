# ABOUTME: Application configuration including location, station IDs and API settings
# ABOUTME: Centralized config read from environment (.env supported)

import os
from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """Application configuration"""

    # Location: St. Augustine, FL
    LOCATION_NAME = "St. Augustine, FL"
    LOCATION_LAT = 29.9
    LOCATION_LON = -81.3
    LOCATION_TIMEZONE = os.getenv("LOCATION_TIMEZONE", "America/New_York")

    # NDBC buoy 41117 (St. Augustine, FL) spectral wave summary
    BUOY_STATION_ID = os.getenv("BUOY_STATION_ID", "41117")
    BUOY_URL_TEMPLATE = "https://www.ndbc.noaa.gov/data/realtime2/{station}.spec"

    # NOAA CO-OPS station 8720587 (St. Augustine Beach, FL)
    TIDE_STATION_ID = os.getenv("TIDE_STATION_ID", "8720587")
    TIDE_API_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    # "observed" queries the tide station, "heuristic" uses time of day only
    TIDE_MODE = os.getenv("TIDE_MODE", "observed").lower()

    MARINE_API_URL = "https://marine-api.open-meteo.com/v1/marine"
    WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"

    # Scoring
    RATING_SCHEME = os.getenv("RATING_SCHEME", "canonical")

    # Upstream timeouts
    BUOY_TIMEOUT_SECONDS = float(os.getenv("BUOY_TIMEOUT_SECONDS", "10"))
    MARINE_TIMEOUT_SECONDS = float(os.getenv("MARINE_TIMEOUT_SECONDS", "8"))
    WEATHER_TIMEOUT_SECONDS = float(os.getenv("WEATHER_TIMEOUT_SECONDS", "10"))
    TIDE_TIMEOUT_SECONDS = float(os.getenv("TIDE_TIMEOUT_SECONDS", "8"))

    # Caching: upstream responses are reused for 5 minutes
    CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "300"))
    CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "16"))

    # Web server
    PORT = int(os.getenv("PORT", "3000"))
    CORS_ORIGINS = _csv(os.getenv(
        "CORS_ORIGINS",
        "https://localhost:8444,http://localhost:8444,"
        "https://localhost:3000,http://localhost:3000,"
        "https://127.0.0.1:8444,http://127.0.0.1:8444"
    ))

    # Debug mode
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"
