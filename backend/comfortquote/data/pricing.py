"""Base tier prices and factor multiplier tables for residential HVAC."""

from __future__ import annotations

from comfortquote.models.enums import (
    AccessDifficulty,
    HomeAgeBucket,
    SystemType,
    Tier,
)

# Reference home size; a 2,000 sqft home has a size multiplier of 1.0.
BASELINE_SQUARE_FOOTAGE = 2000.0
SQFT_MULTIPLIER_MIN = 0.8
SQFT_MULTIPLIER_MAX = 2.0

# Tier -> (min, max) before any multiplier.
BASE_TIER_RANGES: dict[Tier, tuple[int, int]] = {
    Tier.GOOD: (5000, 7500),
    Tier.BETTER: (7500, 11000),
    Tier.BEST: (11000, 16000),
}

# Tier -> (min floor, max floor) after the home multiplier.
TIER_FLOORS: dict[Tier, tuple[int, int]] = {
    Tier.GOOD: (4000, 5000),
    Tier.BETTER: (6000, 8000),
    Tier.BEST: (9000, 12000),
}

# Smallest allowed distance between adjacent bounds, across and within tiers.
MIN_TIER_GAP = 500

# Unlisted values fall back to 1.00.
SYSTEM_TYPE_MULTIPLIERS: dict[str, float] = {
    SystemType.HEAT_PUMP: 1.2,
    SystemType.DUAL_FUEL: 1.3,
}

ACCESS_MULTIPLIERS: dict[str, float] = {
    AccessDifficulty.DIFFICULT: 1.15,
    AccessDifficulty.AVERAGE: 1.08,
}

HOME_AGE_MULTIPLIERS: dict[str, float] = {
    HomeAgeBucket.OLDER: 1.1,
    HomeAgeBucket.NEWER: 0.95,
}

DEFAULT_MULTIPLIER = 1.0
