# ABOUTME: Tests for surfability scoring logic
# ABOUTME: Validates component points, rating tiers and that fun labels never change the score

import itertools
import pytest

from surfability.scoring.calculator import FUN_RATINGS, ScoreCalculator
from surfability.scoring.models import LEGACY_SCHEME, ScoreResult
from surfability.weather.models import SurfReading, TideState


def first_choice(options):
    return options[0]


def make_reading(**overrides) -> SurfReading:
    values = dict(
        wave_height_ft=5,
        wave_period_s=11,
        swell_direction_deg=90,
        wind_speed_kts=3,
        wind_direction_deg=0,
        tide="Mid",
    )
    values.update(overrides)
    return SurfReading(**values)


def test_epic_conditions_score_excellent():
    """5ft @ 11s from the east, glassy, mid tide: 25+25+20+15+10"""
    calculator = ScoreCalculator(chooser=first_choice)

    result = calculator.score(make_reading())

    assert isinstance(result, ScoreResult)
    assert result.score == 95
    assert result.rating == "Excellent"
    assert result.surfable is True
    assert result.fun_rating == "Epic"


def test_flat_blown_out_conditions_score_zero():
    calculator = ScoreCalculator(chooser=first_choice)

    result = calculator.score(make_reading(
        wave_height_ft=0.5,
        wave_period_s=3,
        swell_direction_deg=0,
        wind_speed_kts=20,
        wind_direction_deg=0,
        tide="Low",
    ))

    assert result.score == 0
    assert result.rating == "Poor"
    assert result.surfable is False
    assert result.fun_rating == "Flat"


@pytest.mark.parametrize("height, points", [
    (1.0, 0), (1.5, 15), (1.99, 15), (2.0, 25), (8.0, 25), (8.1, 0),
])
def test_wave_height_points(height, points):
    assert ScoreCalculator.wave_height_points(height) == points


@pytest.mark.parametrize("period, points", [
    (4.9, 0), (5, 10), (6.9, 10), (7, 20), (9.9, 20), (10, 25), (16, 25),
])
def test_wave_period_points(period, points):
    assert ScoreCalculator.wave_period_points(period) == points


@pytest.mark.parametrize("direction, points", [
    (0, 0), (29, 0), (30, 10), (44, 10), (45, 20), (135, 20), (140, 10), (150, 10), (151, 0),
])
def test_swell_direction_points(direction, points):
    assert ScoreCalculator.swell_direction_points(direction) == points


@pytest.mark.parametrize("speed, direction, points", [
    (4.9, 90, 15),    # glassy beats everything
    (4.9, 270, 15),
    (10, 270, 20),    # light offshore
    (15, 225, 20),
    (15.1, 315, 10),  # strong offshore
    (8, 90, 10),      # light onshore
    (12, 90, 0),      # onshore chop
    (12, 316, 0),
])
def test_wind_points(speed, direction, points):
    assert ScoreCalculator.wind_points(speed, direction) == points


@pytest.mark.parametrize("tide, points", [
    (TideState.MID, 10), (TideState.RISING, 10), (TideState.FALLING, 10),
    (TideState.LOW, 0), (TideState.HIGH, 0), (TideState.HIGH_RISING, 0),
    (TideState.LOW_FALLING, 0), (TideState.UNKNOWN, 0),
])
def test_tide_points(tide, points):
    assert ScoreCalculator.tide_points(tide) == points


def test_tide_height_bonus():
    calculator = ScoreCalculator(chooser=first_choice)

    assert calculator.score(make_reading(tide_height_ft=1.2)).score == 100
    assert calculator.score(make_reading(tide_height_ft=3.5)).score == 95
    assert calculator.score(make_reading(tide_height_ft=None)).score == 95


def test_max_score_with_every_bonus():
    calculator = ScoreCalculator(chooser=first_choice)

    result = calculator.score(make_reading(wind_speed_kts=10, wind_direction_deg=270, tide_height_ft=1.0))

    assert result.score == 105


@pytest.mark.parametrize("score, rating, surfable", [
    (44, "Poor", False), (45, "Marginal", True), (64, "Marginal", True),
    (65, "Good", True), (79, "Good", True), (80, "Excellent", True),
])
def test_canonical_tiers(score, rating, surfable):
    calculator = ScoreCalculator()

    assert calculator.scheme.rating_for(score) == rating
    assert calculator.scheme.is_surfable(score) is surfable


def test_legacy_scheme_is_selectable():
    calculator = ScoreCalculator(scheme=LEGACY_SCHEME, chooser=first_choice)

    # 25 + 20 + 0 + 0 + 0 = 45: marginal in canonical, Poor-but-surfable in legacy
    result = calculator.score(make_reading(
        wave_period_s=8, swell_direction_deg=0, wind_speed_kts=12, wind_direction_deg=90, tide="Low"
    ))

    assert result.score == 45
    assert result.rating == "Poor"
    assert result.surfable is True


def test_fun_rating_comes_from_tier_list():
    picked = []

    def chooser(options):
        picked.append(options)
        return options[-1]

    result = ScoreCalculator(chooser=chooser).score(make_reading())

    assert picked == [FUN_RATINGS["Excellent"]]
    assert result.fun_rating == "Nuking"


def test_score_is_deterministic_apart_from_fun_rating():
    """Different random picks never move the score, rating or surfable flag"""
    readings = [
        make_reading(wave_height_ft=h, wave_period_s=p, wind_speed_kts=w, tide=t)
        for h, p, w, t in itertools.product(
            [0.5, 1.7, 4.0], [4, 8, 12], [2, 8, 20], ["Low", "Mid"]
        )
    ]
    first = ScoreCalculator(chooser=first_choice)
    last = ScoreCalculator(chooser=lambda options: options[-1])

    for reading in readings:
        a = first.score(reading)
        b = last.score(reading)
        assert (a.score, a.rating, a.surfable) == (b.score, b.rating, b.surfable)
        assert isinstance(a.score, int)
        assert 0 <= a.score <= 115
