# ABOUTME: Core surfability scoring for a single set of surf conditions
# ABOUTME: Additive points for waves, period, swell, wind and tide mapped to rating tiers

import logging
import random
from typing import Callable, Sequence

from surfability.scoring.models import (
    CANONICAL_SCHEME, EXCELLENT, GOOD, MARGINAL, POOR, RatingScheme, ScoreResult
)
from surfability.weather.models import SurfReading, TideState

log = logging.getLogger(__name__)

Chooser = Callable[[Sequence[str]], str]

# Fun rating phrases with some attitude, keyed by tier
FUN_RATINGS = {
    EXCELLENT: [
        "Epic", "Firing", "Going Off", "Pumping", "Primo", "Cranking", "Nuking",
    ],
    GOOD: [
        "Fun", "Solid", "Decent", "Surfable", "Worth It", "Not Bad", "Rideable",
    ],
    MARGINAL: [
        "Marginal", "Questionable", "Sketchy", "Iffy", "Meh", "Barely", "Struggling",
    ],
    POOR: [
        "Flat", "Blown Out", "Junk", "Trash", "Hopeless", "Closed Out",
        "Victory at Sea", "Ankle Biters", "Lake Mode", "Check the Cam",
        "Stay Home", "Netflix Day",
    ],
}

# East to southeast swell works best on the NE Florida Atlantic coast
SWELL_BEST_MIN = 45
SWELL_BEST_MAX = 135
SWELL_OK_MIN = 30
SWELL_OK_MAX = 150

# W to NW wind blows offshore here
OFFSHORE_MIN = 225
OFFSHORE_MAX = 315

GOOD_TIDES = {TideState.MID, TideState.RISING, TideState.FALLING}


class ScoreCalculator:
    """Calculates 0-100+ surfability scores"""

    def __init__(self, scheme: RatingScheme = CANONICAL_SCHEME, chooser: Chooser = random.choice):
        self.scheme = scheme
        self.chooser = chooser

    @staticmethod
    def wave_height_points(height_ft: float) -> int:
        if 2 <= height_ft <= 8:
            return 25
        if 1.5 <= height_ft < 2:
            return 15  # Small but rideable
        return 0

    @staticmethod
    def wave_period_points(period_s: float) -> int:
        if period_s >= 10:
            return 25
        if period_s >= 7:
            return 20
        if period_s >= 5:
            return 10
        return 0

    @staticmethod
    def swell_direction_points(direction_deg: float) -> int:
        if SWELL_BEST_MIN <= direction_deg <= SWELL_BEST_MAX:
            return 20
        if SWELL_OK_MIN <= direction_deg <= SWELL_OK_MAX:
            return 10
        return 0

    @staticmethod
    def wind_points(speed_kts: float, direction_deg: float) -> int:
        if speed_kts < 5:
            return 15  # Glassy, direction doesn't matter
        if OFFSHORE_MIN <= direction_deg <= OFFSHORE_MAX:
            return 20 if speed_kts <= 15 else 10
        if speed_kts < 10:
            return 10  # Light onshore
        return 0

    @staticmethod
    def tide_points(tide: TideState) -> int:
        return 10 if tide in GOOD_TIDES else 0

    @staticmethod
    def tide_height_points(height_ft) -> int:
        if height_ft is not None and 0.5 <= height_ft <= 2.5:
            return 5
        return 0

    def raw_score(self, reading: SurfReading) -> int:
        """Sum of component points; no clamping."""
        return (
            self.wave_height_points(reading.wave_height_ft)
            + self.wave_period_points(reading.wave_period_s)
            + self.swell_direction_points(reading.swell_direction_deg)
            + self.wind_points(reading.wind_speed_kts, reading.wind_direction_deg)
            + self.tide_points(reading.tide)
            + self.tide_height_points(reading.tide_height_ft)
        )

    def score(self, reading: SurfReading) -> ScoreResult:
        """
        Score a fully resolved set of conditions.

        Args:
            reading: Conditions with every field populated

        Returns:
            ScoreResult with the score, surfable flag, tier and a random
            fun rating for that tier
        """
        score = self.raw_score(reading)
        rating = self.scheme.rating_for(score)
        labels = FUN_RATINGS.get(rating)

        return ScoreResult(
            score=score,
            surfable=self.scheme.is_surfable(score),
            rating=rating,
            fun_rating=self.chooser(labels) if labels else None,
        )
