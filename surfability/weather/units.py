# ABOUTME: Unit conversion helpers for wave, wind and temperature values
# ABOUTME: Upstream feeds report metric units; scoring works in feet and knots

METERS_TO_FEET = 3.28084
MS_TO_KNOTS = 1.943844
KMH_TO_KNOTS = 0.539957


def meters_to_feet(meters: float) -> float:
    return meters * METERS_TO_FEET


def ms_to_knots(ms: float) -> float:
    """Convert meters per second to knots."""
    return ms * MS_TO_KNOTS


def kmh_to_knots(kmh: float) -> float:
    """Convert km/h to knots (Open-Meteo's default wind unit)."""
    return kmh * KMH_TO_KNOTS


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32
