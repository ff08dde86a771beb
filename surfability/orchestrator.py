# ABOUTME: Main application orchestrator coordinating fetchers, scoring and summaries
# ABOUTME: Resolves each surf field through an ordered fallback chain and builds the response

import logging
import math
from datetime import datetime
from typing import Any, Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from surfability.cache.manager import CacheManager
from surfability.config import Config
from surfability.debug import debug_log
from surfability.scoring.calculator import ScoreCalculator
from surfability.scoring.models import get_scheme
from surfability.scoring.summarizer import ForecastSummarizer, upcoming_points
from surfability.weather.buoy import BuoyClient
from surfability.weather.models import (
    DEFAULT_TIDE, BuoyReading, HourlyForecastPoint, SurfReading, TideEvent, TideSnapshot
)
from surfability.weather.sources import MarineClient, WeatherClient
from surfability.weather.tides import TideClient, heuristic_snapshot
from surfability.weather.units import (
    celsius_to_fahrenheit, kmh_to_knots, meters_to_feet, METERS_TO_FEET
)

log = logging.getLogger(__name__)

# Placeholders used when neither the buoy nor the marine API has a value
DEFAULT_WAVE_HEIGHT_FT = 1.5
DEFAULT_WAVE_PERIOD_S = 6.0
DEFAULT_SWELL_DIRECTION_DEG = 90.0  # East
DEFAULT_WATER_TEMP_C = 22.0  # ~72°F

# Sources whose tide height is real enough to earn the tide height bonus
MEASURED_TIDE_SOURCES = {"observed", "predicted"}


class FallbackChain:
    """
    Ordered list of candidate providers for one value.

    Providers are tried in order; the first non-None result wins.
    """

    def __init__(self, name: str, candidates: Sequence[tuple[str, Callable[[], Any]]]):
        self.name = name
        self.candidates = list(candidates)

    def resolve(self) -> tuple[Any, Optional[str]]:
        """
        Returns:
            (value, source name) for the first provider with a value,
            (None, None) if every provider came up empty.
        """
        for source, provider in self.candidates:
            value = provider()
            if value is not None:
                debug_log(f"{self.name} resolved from {source}: {value}", "FALLBACK")
                return value, source
        return None, None


def _as_number(value: Any) -> Optional[float]:
    """Finite float, or None for missing and malformed values."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _series_value(data: Optional[dict], section: str, field: str, index: int = 0) -> Optional[float]:
    """data[section][field][index] or None if any part is missing or malformed."""
    if not data:
        return None
    try:
        value = data[section][field][index]
    except (KeyError, IndexError, TypeError):
        return None
    return _as_number(value)


def _current_value(data: Optional[dict], field: str) -> Optional[float]:
    if not data:
        return None
    return _as_number((data.get("current") or {}).get(field))


def _buoy_value(buoy: Optional[BuoyReading], attribute: str) -> Callable[[], Optional[float]]:
    return lambda: getattr(buoy, attribute) if buoy is not None else None


def _marine_feet(marine: Optional[dict]) -> Callable[[], Optional[float]]:
    def provider():
        meters = _series_value(marine, "hourly", "wave_height")
        return meters_to_feet(meters) if meters is not None else None
    return provider


def _constant(value: float) -> Callable[[], float]:
    return lambda: value


def _round1(value: Optional[float]) -> Optional[float]:
    return round(value, 1) if value is not None else None


def _event_dict(event: Optional[TideEvent]) -> Optional[dict]:
    if event is None:
        return None
    return {
        "time": event.time.isoformat(),
        "type": "High" if event.is_high else "Low",
        "height_ft": _round1(event.height_ft),
    }


class AppOrchestrator:
    """Orchestrates all app components to produce a surfability report"""

    def __init__(
        self,
        cache: CacheManager = None,
        buoy_client: BuoyClient = None,
        marine_client: MarineClient = None,
        weather_client: WeatherClient = None,
        tide_client: TideClient = None,
        calculator: ScoreCalculator = None,
        summarizer: ForecastSummarizer = None,
        tide_mode: str = None,
    ):
        self.cache = cache or CacheManager(
            ttl_seconds=Config.CACHE_TTL_SECONDS,
            max_entries=Config.CACHE_MAX_ENTRIES
        )
        self.buoy_client = buoy_client or BuoyClient()
        self.marine_client = marine_client or MarineClient()
        self.weather_client = weather_client or WeatherClient()
        self.tide_client = tide_client or TideClient()
        self.calculator = calculator or ScoreCalculator(scheme=get_scheme(Config.RATING_SCHEME))
        self.summarizer = summarizer or ForecastSummarizer(self.calculator)
        self.tide_mode = tide_mode or Config.TIDE_MODE

    # ==================== Sources ====================

    def _fetch_tide(self, now: datetime) -> TideSnapshot:
        if self.tide_mode == "heuristic":
            return heuristic_snapshot(now)

        def fetch():
            snapshot = self.tide_client.snapshot(now.replace(tzinfo=None))
            # Don't cache the default so the next request retries the station
            return None if snapshot is DEFAULT_TIDE else snapshot

        return self.cache.get_or_fetch("tide", fetch) or DEFAULT_TIDE

    def fetch_sources(self, now: datetime) -> dict:
        """
        Fetch every upstream source through the cache.

        Buoy, marine and tide failures come back as None/DEFAULT_TIDE.
        Weather failures raise WeatherUnavailableError.
        """
        buoy = self.cache.get_or_fetch("buoy", self.buoy_client.fetch)
        marine = self.cache.get_or_fetch("marine", self.marine_client.fetch)
        weather = self.cache.get_or_fetch("weather", self.weather_client.fetch)
        tide = self._fetch_tide(now)

        log.info(
            f"Sources: buoy={'yes' if buoy else 'no'} "
            f"marine={'yes' if marine and marine.get('hourly') else 'no'} "
            f"tide={tide.source}"
        )
        return {"buoy": buoy, "marine": marine, "weather": weather, "tide": tide}

    # ==================== Fallback Chains ====================

    @staticmethod
    def wave_chains(buoy: Optional[BuoyReading], marine: Optional[dict]) -> dict[str, FallbackChain]:
        """Buoy first, then the marine forecast's first hour, then a fixed default."""
        return {
            "wave_height_ft": FallbackChain("wave_height_ft", [
                ("buoy", _buoy_value(buoy, "wave_height_ft")),
                ("marine", _marine_feet(marine)),
                ("default", _constant(DEFAULT_WAVE_HEIGHT_FT)),
            ]),
            "wave_period_s": FallbackChain("wave_period_s", [
                ("buoy", _buoy_value(buoy, "wave_period_s")),
                ("marine", lambda: _series_value(marine, "hourly", "wave_period")),
                ("default", _constant(DEFAULT_WAVE_PERIOD_S)),
            ]),
            "swell_direction_deg": FallbackChain("swell_direction_deg", [
                ("buoy", _buoy_value(buoy, "mean_wave_direction_deg")),
                ("marine", lambda: _series_value(marine, "hourly", "swell_wave_direction")),
                ("default", _constant(DEFAULT_SWELL_DIRECTION_DEG)),
            ]),
        }

    @staticmethod
    def water_temperature_chain(marine: Optional[dict]) -> FallbackChain:
        return FallbackChain("water_temperature_c", [
            ("marine_current", lambda: _current_value(marine, "sea_surface_temperature")),
            ("marine_hourly", lambda: _series_value(marine, "hourly", "sea_surface_temperature")),
            ("default", _constant(DEFAULT_WATER_TEMP_C)),
        ])

    @staticmethod
    def data_source(buoy: Optional[BuoyReading], marine: Optional[dict]) -> str:
        if buoy is not None:
            return "NOAA Buoy + Weather API"
        if marine and marine.get("hourly"):
            return "Marine + Weather API"
        return "Weather API + defaults"

    # ==================== Forecast ====================

    @staticmethod
    def build_hourly_points(weather: dict, marine: Optional[dict]) -> list[HourlyForecastPoint]:
        """
        Zip the weather and marine hourly series by index.

        Missing marine values fall back to 1.5 ft / 6 s / 90° for that hour
        only. Hours with no wind data are skipped.
        """
        hourly = weather.get("hourly", {})
        times = hourly.get("time", [])
        default_height_m = DEFAULT_WAVE_HEIGHT_FT / METERS_TO_FEET

        points = []
        for i, time_str in enumerate(times):
            wind_speed = _series_value(weather, "hourly", "wind_speed_10m", i)
            wind_direction = _series_value(weather, "hourly", "wind_direction_10m", i)
            if wind_speed is None or wind_direction is None:
                continue

            height = _series_value(marine, "hourly", "wave_height", i)
            period = _series_value(marine, "hourly", "wave_period", i)
            direction = _series_value(marine, "hourly", "swell_wave_direction", i)
            points.append(HourlyForecastPoint(
                time=time_str,
                wave_height_m=height if height is not None else default_height_m,
                wave_period_s=period if period is not None else DEFAULT_WAVE_PERIOD_S,
                swell_direction_deg=direction if direction is not None else DEFAULT_SWELL_DIRECTION_DEG,
                wind_speed_kmh=wind_speed,
                wind_direction_deg=wind_direction,
            ))
        return points

    # ==================== Response ====================

    def get_surfability(self, now: Optional[datetime] = None) -> dict:
        """
        Build the full surfability report.

        Args:
            now: Current time (defaults to now in the location timezone)

        Returns:
            Response dict ready to serialize as JSON

        Raises:
            WeatherUnavailableError: if the weather API is down
        """
        now = now or datetime.now(ZoneInfo(Config.LOCATION_TIMEZONE))
        sources = self.fetch_sources(now)
        buoy, marine, weather, tide = (
            sources["buoy"], sources["marine"], sources["weather"], sources["tide"]
        )

        resolved = {name: chain.resolve()[0] for name, chain in self.wave_chains(buoy, marine).items()}
        water_temp, _ = self.water_temperature_chain(marine).resolve()
        current = self.weather_client.parse_current(weather, water_temperature_c=water_temp)

        reading = SurfReading(
            wave_height_ft=resolved["wave_height_ft"],
            wave_period_s=resolved["wave_period_s"],
            swell_direction_deg=resolved["swell_direction_deg"],
            wind_direction_deg=current.wind_direction_deg,
            wind_speed_kts=kmh_to_knots(current.wind_speed_kmh),
            tide=tide.state,
            tide_height_ft=tide.height_ft if tide.source in MEASURED_TIDE_SOURCES else None,
        )
        result = self.calculator.score(reading)
        log.info(f"Current conditions: {reading} -> {result.score} ({result.rating})")

        points = upcoming_points(self.build_hourly_points(weather, marine), now)
        duration = self.summarizer.summarize_window(points, tide.state)

        return {
            "location": Config.LOCATION_NAME,
            "timestamp": now.isoformat(),
            "surfable": result.surfable,
            "rating": result.fun_rating,
            "score": result.score,
            "goodSurfDuration": duration,
            "details": {
                "wave_height_ft": _round1(reading.wave_height_ft),
                "wave_period_sec": _round1(reading.wave_period_s),
                "swell_direction_deg": round(reading.swell_direction_deg),
                "wind_direction_deg": round(reading.wind_direction_deg),
                "wind_speed_kts": _round1(reading.wind_speed_kts),
                "tide_state": tide.state.value,
                "tide_height_ft": _round1(tide.height_ft),
                "tide_source": tide.source,
                "next_high": _event_dict(tide.next_high),
                "next_low": _event_dict(tide.next_low),
                "data_source": self.data_source(buoy, marine),
                "traditional_rating": result.rating,
            },
            "weather": {
                "air_temperature_c": _round1(current.air_temperature_c),
                "air_temperature_f": _round1(celsius_to_fahrenheit(current.air_temperature_c)),
                "water_temperature_c": _round1(water_temp),
                "water_temperature_f": _round1(celsius_to_fahrenheit(water_temp)),
                "weather_code": current.weather_code,
                "weather_description": current.weather_description,
            },
        }
