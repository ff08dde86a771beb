# ABOUTME: Data models for surfability scores and rating schemes
# ABOUTME: Rating tiers and the surfable cutoff live in a named, swappable scheme

from dataclasses import dataclass
from typing import Optional

EXCELLENT = "Excellent"
GOOD = "Good"
MARGINAL = "Marginal"
POOR = "Poor"


@dataclass(frozen=True)
class RatingScheme:
    """Score cutoffs for rating tiers"""
    name: str
    tiers: tuple[tuple[int, str], ...]  # (min_score, tier), highest first
    surfable_threshold: int
    fallback_tier: str = POOR

    def rating_for(self, score: int) -> str:
        for min_score, tier in self.tiers:
            if score >= min_score:
                return tier
        return self.fallback_tier

    def cutoff_for(self, tier: str) -> Optional[int]:
        for min_score, name in self.tiers:
            if name == tier:
                return min_score
        return None

    def is_surfable(self, score: int) -> bool:
        return score >= self.surfable_threshold


CANONICAL_SCHEME = RatingScheme(
    name="canonical",
    tiers=((80, EXCELLENT), (65, GOOD), (45, MARGINAL)),
    surfable_threshold=45,
)

# Cutoffs used by earlier versions of the service
LEGACY_SCHEME = RatingScheme(
    name="legacy",
    tiers=((75, EXCELLENT), (50, GOOD)),
    surfable_threshold=40,
)

RATING_SCHEMES = {scheme.name: scheme for scheme in (CANONICAL_SCHEME, LEGACY_SCHEME)}


def get_scheme(name: str) -> RatingScheme:
    try:
        return RATING_SCHEMES[name]
    except KeyError:
        raise ValueError(f"Unknown rating scheme {name!r}, expected one of {sorted(RATING_SCHEMES)}")


@dataclass
class ScoreResult:
    """Score for a single set of conditions"""
    score: int
    surfable: bool
    rating: str
    fun_rating: Optional[str] = None

    def __post_init__(self):
        if self.score < 0:
            raise ValueError(f"Score must be non-negative, got {self.score}")
