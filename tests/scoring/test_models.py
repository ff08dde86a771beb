# ABOUTME: Tests for scoring models and rating schemes
# ABOUTME: Validates ScoreResult structure and named scheme lookup

import pytest

from surfability.scoring.models import (
    CANONICAL_SCHEME, LEGACY_SCHEME, ScoreResult, get_scheme
)


def test_score_result_stores_all_fields():
    result = ScoreResult(score=70, surfable=True, rating="Good", fun_rating="Solid")

    assert result.score == 70
    assert result.surfable is True
    assert result.rating == "Good"
    assert result.fun_rating == "Solid"


def test_score_result_rejects_negative_score():
    with pytest.raises(ValueError):
        ScoreResult(score=-5, surfable=False, rating="Poor")


def test_get_scheme_by_name():
    assert get_scheme("canonical") is CANONICAL_SCHEME
    assert get_scheme("legacy") is LEGACY_SCHEME


def test_get_scheme_unknown_name():
    with pytest.raises(ValueError):
        get_scheme("vibes")


def test_cutoff_for_tier():
    assert CANONICAL_SCHEME.cutoff_for("Good") == 65
    assert CANONICAL_SCHEME.cutoff_for("Excellent") == 80
    assert CANONICAL_SCHEME.cutoff_for("Poor") is None


def test_legacy_scheme_has_three_tiers():
    assert LEGACY_SCHEME.rating_for(80) == "Excellent"
    assert LEGACY_SCHEME.rating_for(60) == "Good"
    assert LEGACY_SCHEME.rating_for(45) == "Poor"
    assert LEGACY_SCHEME.is_surfable(40) is True
    assert LEGACY_SCHEME.is_surfable(39) is False
