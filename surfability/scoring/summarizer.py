# ABOUTME: Summarizes the next day of hourly forecasts into a short duration phrase
# ABOUTME: Scores each hour, tracks good/marginal streaks, maps the longest to a message

import logging
import random
from datetime import datetime
from typing import Optional, Sequence

from surfability.scoring.calculator import Chooser, ScoreCalculator
from surfability.scoring.models import GOOD
from surfability.weather.models import HourlyForecastPoint, TideState

log = logging.getLogger(__name__)

FORECAST_HOURS = 24
NO_FORECAST_MESSAGE = "No forecast data available."
BRIEF_WINDOWS_MESSAGE = "Brief surfable windows expected"

# Brutally honest messages for flat/poor conditions
FLAT_MESSAGES = [
    "Flat spell continues...",
    "Time to practice your pop-ups on land",
    "Great day for a beach walk",
    "Maybe check the bay?",
    "Longboard day if you're desperate",
    "Netflix has some good surf movies",
    "Perfect time to wax your board",
]


def upcoming_points(
    points: Optional[Sequence[HourlyForecastPoint]],
    now: datetime,
    limit: int = FORECAST_HOURS,
) -> list[HourlyForecastPoint]:
    """
    Keep forecast hours at or after now, up to limit.

    Naive timestamps are read in now's timezone (Open-Meteo reports local
    times when a timezone is requested).
    """
    upcoming = []
    for point in points or []:
        try:
            when = datetime.fromisoformat(point.time)
        except (TypeError, ValueError):
            log.debug(f"Skipping forecast point with bad time {point.time!r}")
            continue
        if when.tzinfo is None and now.tzinfo is not None:
            when = when.replace(tzinfo=now.tzinfo)
        elif when.tzinfo is not None and now.tzinfo is None:
            when = when.replace(tzinfo=None)
        if when >= now:
            upcoming.append(point)
        if len(upcoming) >= limit:
            break
    return upcoming


class ForecastSummarizer:
    """Turns hourly forecasts into a 'how long will it be good' phrase"""

    def __init__(self, calculator: ScoreCalculator = None, chooser: Chooser = random.choice):
        self.calculator = calculator or ScoreCalculator()
        self.chooser = chooser

    @property
    def good_cutoff(self) -> int:
        return self.calculator.scheme.cutoff_for(GOOD)

    @property
    def marginal_cutoff(self) -> int:
        return self.calculator.scheme.surfable_threshold

    def longest_streaks(self, scores: Sequence[int]) -> tuple[int, int, int]:
        """
        Longest good streak, longest marginal streak and total surfable hours.

        A streak is a run of consecutive hours in the same bucket; a poor
        hour ends both.
        """
        good_streaks = []
        marginal_streaks = []
        current_good = 0
        current_marginal = 0
        surfable_hours = 0

        for score in scores:
            if score >= self.good_cutoff:
                current_good += 1
                if current_marginal:
                    marginal_streaks.append(current_marginal)
                    current_marginal = 0
                surfable_hours += 1
            elif score >= self.marginal_cutoff:
                current_marginal += 1
                if current_good:
                    good_streaks.append(current_good)
                    current_good = 0
                surfable_hours += 1
            else:
                if current_good:
                    good_streaks.append(current_good)
                    current_good = 0
                if current_marginal:
                    marginal_streaks.append(current_marginal)
                    current_marginal = 0

        if current_good:
            good_streaks.append(current_good)
        if current_marginal:
            marginal_streaks.append(current_marginal)

        return max(good_streaks, default=0), max(marginal_streaks, default=0), surfable_hours

    def describe(self, max_good: int, max_marginal: int, surfable_hours: int) -> str:
        if max_good >= 8:
            return "Good surf for most of the day!"
        if max_good >= 6:
            return f"Good surf for {max_good} solid hours!"
        if max_good >= 3:
            return f"Good surf for about {max_good} hours"
        if max_good >= 1:
            return f"Brief good surf window (~{max_good}hr)"
        if max_marginal >= 8:
            return "Marginal conditions for most of the day"
        if max_marginal >= 4:
            return f"Marginal conditions for {max_marginal} hours"
        if max_marginal >= 2:
            return f"Sketchy conditions for {max_marginal} hours"
        if surfable_hours >= 1:
            return BRIEF_WINDOWS_MESSAGE
        return self.chooser(FLAT_MESSAGES)

    def summarize_window(
        self,
        points: Optional[Sequence[HourlyForecastPoint]],
        tide: TideState,
    ) -> str:
        """
        Describe how long surfable conditions last over the forecast window.

        Args:
            points: Upcoming hourly forecasts (already filtered to >= now),
                at most 24 are used
            tide: Tide state applied to every hour

        Returns:
            Short human-readable message
        """
        if not points:
            return NO_FORECAST_MESSAGE

        scores = [
            self.calculator.raw_score(point.to_surf_reading(tide))
            for point in list(points)[:FORECAST_HOURS]
        ]
        max_good, max_marginal, surfable_hours = self.longest_streaks(scores)
        log.debug(
            f"Forecast streaks: good={max_good} marginal={max_marginal} "
            f"surfable_hours={surfable_hours}"
        )
        return self.describe(max_good, max_marginal, surfable_hours)
