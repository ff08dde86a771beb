# ABOUTME: Data models for surf conditions, buoy readings, tides and forecasts
# ABOUTME: Request-scoped value objects shared by the parser, scorer and assembler

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from surfability.weather.units import kmh_to_knots, meters_to_feet


class TideState(str, Enum):
    """Tide phase labels"""
    LOW = "Low"
    RISING = "Rising"
    MID = "Mid"
    HIGH = "High"
    FALLING = "Falling"
    HIGH_RISING = "High Rising"
    LOW_FALLING = "Low Falling"
    UNKNOWN = "Unknown"


def _finite(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


def _magnitude(name: str, value: float) -> float:
    value = _finite(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def _angle(name: str, value: float) -> float:
    return _finite(name, value) % 360


@dataclass
class SurfReading:
    """Fully resolved conditions ready for scoring"""
    wave_height_ft: float
    wave_period_s: float
    swell_direction_deg: float
    wind_direction_deg: float
    wind_speed_kts: float
    tide: TideState
    tide_height_ft: Optional[float] = None

    def __post_init__(self):
        self.wave_height_ft = _magnitude("wave_height_ft", self.wave_height_ft)
        self.wave_period_s = _magnitude("wave_period_s", self.wave_period_s)
        self.wind_speed_kts = _magnitude("wind_speed_kts", self.wind_speed_kts)
        self.swell_direction_deg = _angle("swell_direction_deg", self.swell_direction_deg)
        self.wind_direction_deg = _angle("wind_direction_deg", self.wind_direction_deg)
        self.tide = TideState(self.tide)
        if self.tide_height_ft is not None:
            # Tide heights are relative to MLLW and can dip below zero
            self.tide_height_ft = _finite("tide_height_ft", self.tide_height_ft)

    def __str__(self) -> str:
        return (
            f"Waves: {self.wave_height_ft:.1f}ft @ {self.wave_period_s:.1f}s "
            f"from {self.swell_direction_deg:.0f}°, "
            f"Wind: {self.wind_speed_kts:.1f}kts from {self.wind_direction_deg:.0f}°, "
            f"Tide: {self.tide.value}"
        )


@dataclass
class BuoyReading:
    """Latest wave observation parsed from an NDBC .spec feed"""
    wave_height_ft: float
    wave_period_s: float
    mean_wave_direction_deg: float

    def __str__(self) -> str:
        return (
            f"{self.wave_height_ft:.1f} ft, {self.wave_period_s:.1f} sec, "
            f"{self.mean_wave_direction_deg:.0f}°"
        )


@dataclass
class TideEvent:
    """A predicted high or low tide"""
    time: datetime
    kind: str  # "H" or "L"
    height_ft: float

    @property
    def is_high(self) -> bool:
        return self.kind == "H"


@dataclass
class TideSnapshot:
    """Current tide height and state plus the surrounding high/low events"""
    height_ft: float
    state: TideState
    next_high: Optional[TideEvent] = None
    next_low: Optional[TideEvent] = None
    previous_high: Optional[TideEvent] = None
    previous_low: Optional[TideEvent] = None
    source: str = "default"  # observed, predicted, heuristic or default


DEFAULT_TIDE = TideSnapshot(height_ft=1.5, state=TideState.MID, source="default")


@dataclass
class HourlyForecastPoint:
    """One forecast hour zipped from the marine and weather series"""
    time: str
    wave_height_m: float
    wave_period_s: float
    swell_direction_deg: float
    wind_speed_kmh: float
    wind_direction_deg: float

    def to_surf_reading(self, tide: TideState) -> SurfReading:
        return SurfReading(
            wave_height_ft=meters_to_feet(self.wave_height_m),
            wave_period_s=self.wave_period_s,
            swell_direction_deg=self.swell_direction_deg,
            wind_direction_deg=self.wind_direction_deg,
            wind_speed_kts=kmh_to_knots(self.wind_speed_kmh),
            tide=tide,
        )


@dataclass
class CurrentWeather:
    """Current weather from the general forecast API"""
    air_temperature_c: float
    weather_code: int
    weather_description: str
    wind_speed_kmh: float
    wind_direction_deg: float
    water_temperature_c: Optional[float] = None
