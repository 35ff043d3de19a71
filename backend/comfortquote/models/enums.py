"""Enums for the ComfortQuote domain models."""

from enum import StrEnum


class CostBand(StrEnum):
    """Coarse installation cost band derived from a ZIP code prefix."""

    LOW = "low"
    AVERAGE = "average"
    HIGH = "high"


class Tier(StrEnum):
    """Good / Better / Best equipment tiers, cheapest first."""

    GOOD = "good"
    BETTER = "better"
    BEST = "best"


class SystemType(StrEnum):
    """System types understood by the pricing tables.

    Any other string is accepted on input and priced like central air.
    """

    CENTRAL_AIR = "central-air"
    HEAT_PUMP = "heat-pump"
    DUAL_FUEL = "dual-fuel"
    FURNACE_ONLY = "furnace-only"


class AccessDifficulty(StrEnum):
    """How hard the installation site is to work in."""

    EASY = "easy"
    AVERAGE = "average"
    DIFFICULT = "difficult"


class HomeAgeBucket(StrEnum):
    """Home age values that move the price; everything else is neutral."""

    OLDER = "older"
    NEWER = "newer"


class ReadinessTier(StrEnum):
    """Contractor-facing readiness language for a lead."""

    EXPLORING = "Exploring options"
    PLANNING = "Actively planning"
    READY = "Ready for on-site evaluation"


class LeadQualityIndicator(StrEnum):
    """Summary labels shown to contractors instead of raw scores."""

    HIGH_INTENT = "High intent"
    REVIEWED_OPTIONS = "Reviewed options"
    VIEWED_FINANCING = "Viewed financing"
    SAVED_OR_SHARED = "Saved/shared estimate"


class SignalEventType(StrEnum):
    """Engagement events the results page reports for lead tracking."""

    COMPLETED = "completed"
    COMPARISON_VIEW = "comparison_view"
    FINANCING_VIEW = "financing_view"
    RESULTS_TIME = "results_time"
    RESULTS_LOAD = "results_load"
    SAVE = "save"
    SHARE = "share"
    TIER_SELECTION = "tier_selection"
    SCROLL_DEPTH = "scroll_depth"
    NEXT_STEPS_VIEW = "next_steps_view"
