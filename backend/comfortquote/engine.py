"""Core estimate engine for residential HVAC replacement pricing.

The EstimateEngine turns a home description into Good / Better / Best price
ranges:

1. **Home multiplier** — Multiply together the size factor (square footage
   relative to a 2,000 sqft home, clamped to 0.8-2.0), the system type factor,
   the installation access factor, and the home age factor.
2. **Base tiers** — Scale the fixed tier ranges by the home multiplier, round
   to whole currency units and raise each bound to its tier floor.
3. **Tier ordering** — Push bounds upward so every bound sits at least 500
   above the one before it (good.min < good.max < better.min < ... < best.max).
4. **Regional adjustment** — Scale by the ZIP code's regional band multiplier,
   apply the regional floors, and re-run the ordering pass.
5. **Identification** — Hash the pricing-relevant input into a deterministic
   ``est-`` ID, and attach a separate per-call ``sub-`` ID for bookkeeping.

Efficiency level, smart features, the existing system, permits and timeline
are carried through to the result but do not change the price.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from comfortquote.data.pricing import (
    ACCESS_MULTIPLIERS,
    BASE_TIER_RANGES,
    BASELINE_SQUARE_FOOTAGE,
    DEFAULT_MULTIPLIER,
    HOME_AGE_MULTIPLIERS,
    MIN_TIER_GAP,
    SQFT_MULTIPLIER_MAX,
    SQFT_MULTIPLIER_MIN,
    SYSTEM_TYPE_MULTIPLIERS,
    TIER_FLOORS,
)
from comfortquote.data.repository import round_half_up
from comfortquote.exceptions import (
    EstimateGenerationError,
    EstimateValidationError,
    FieldError,
)
from comfortquote.formatting import format_number
from comfortquote.hashing import new_submission_id, stable_hash
from comfortquote.models.enums import Tier
from comfortquote.models.estimate import (
    EstimateInput,
    EstimateResult,
    RegionalMultiplier,
    TierRange,
    TierRanges,
)

if TYPE_CHECKING:
    from comfortquote.data.repository import RegionalBandResolver

logger = logging.getLogger(__name__)

ESTIMATE_VERSION = "v1"
ESTIMATE_ID_PREFIX = "est-"

# Top-level input field (wire name) -> message shown for any problem with it.
_FIELD_MESSAGES: dict[str, str] = {
    "squareFootage": "Square footage must be a number greater than 0",
    "preferences": "Preferences are required",
}

_RangeMap = dict[Tier, tuple[int, int]]


class EstimateEngine:
    """Deterministic estimate generator.

    Args:
        resolver: Maps the input ZIP code to a regional cost band.

    Example::

        from comfortquote.data.repository import RegionalBandResolver

        engine = EstimateEngine(RegionalBandResolver())
        result = engine.generate({"zipCode": "10001", "squareFootage": 2000,
                                  "preferences": {"systemType": "heat-pump"}})
    """

    def __init__(self, resolver: RegionalBandResolver) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> RegionalBandResolver:
        return self._resolver

    def generate(self, data: EstimateInput | Mapping[str, Any]) -> EstimateResult:
        """Produce an estimate for a home.

        Args:
            data: An ``EstimateInput`` or a mapping using the camelCase wire
                field names.

        Returns:
            An EstimateResult. ``estimate_id`` and ``tier_ranges`` depend only
            on the input; ``created_at`` and ``submission_id`` differ per call.

        Raises:
            EstimateValidationError: If the input is not an object, or
                ``squareFootage`` / ``preferences`` are missing or malformed.
            EstimateGenerationError: If the finished estimate breaks its own
                invariants.
        """
        estimate_input = self.validate(data)

        ranges, regional = self._price(estimate_input)
        assumptions = self._build_assumptions(estimate_input)
        estimate_id = ESTIMATE_ID_PREFIX + stable_hash(normalize_input(estimate_input))

        if not estimate_id or not ranges:
            msg = "Estimate generation produced an empty ID or empty tier ranges"
            raise EstimateGenerationError(msg)

        result = EstimateResult(
            estimate_id=estimate_id,
            input=estimate_input,
            tier_ranges=_to_tier_ranges(ranges),
            regional_band=regional,
            assumptions=assumptions,
            version=ESTIMATE_VERSION,
            submission_id=new_submission_id(),
        )
        logger.debug(
            "Generated estimate %s (band=%s, good=%s, best=%s)",
            estimate_id,
            regional.band.value,
            ranges[Tier.GOOD],
            ranges[Tier.BEST],
        )
        return result

    def tier_ranges(self, data: EstimateInput | Mapping[str, Any]) -> TierRanges:
        """Price a home without building a full estimate."""
        ranges, _ = self._price(self.validate(data))
        return _to_tier_ranges(ranges)

    @staticmethod
    def validate(data: EstimateInput | Mapping[str, Any]) -> EstimateInput:
        """Coerce raw input into an EstimateInput.

        Raises:
            EstimateValidationError: With one FieldError per rejected field.
        """
        if isinstance(data, EstimateInput):
            return data
        if not isinstance(data, Mapping):
            msg = "Estimate input must be an object"
            raise EstimateValidationError(msg, [FieldError("input", msg)])

        try:
            return EstimateInput.model_validate(data)
        except ValidationError as exc:
            errors = _field_errors(exc)
            msg = "; ".join(dict.fromkeys(e.message for e in errors))
            raise EstimateValidationError(msg, errors) from exc

    @staticmethod
    def home_multiplier(estimate_input: EstimateInput) -> float:
        """Combined size, system type, access and age multiplier."""
        sqft_multiplier = min(
            max(estimate_input.square_footage / BASELINE_SQUARE_FOOTAGE, SQFT_MULTIPLIER_MIN),
            SQFT_MULTIPLIER_MAX,
        )
        system_multiplier = SYSTEM_TYPE_MULTIPLIERS.get(
            estimate_input.preferences.system_type.strip(), DEFAULT_MULTIPLIER
        )
        factors = estimate_input.installation_factors
        access_multiplier = ACCESS_MULTIPLIERS.get(
            ((factors.access_difficulty if factors else None) or "").strip(), DEFAULT_MULTIPLIER
        )
        age_multiplier = HOME_AGE_MULTIPLIERS.get(
            estimate_input.home_age.strip(), DEFAULT_MULTIPLIER
        )
        return sqft_multiplier * system_multiplier * access_multiplier * age_multiplier

    def _price(self, estimate_input: EstimateInput) -> tuple[_RangeMap, RegionalMultiplier]:
        multiplier = self.home_multiplier(estimate_input)
        ranges: _RangeMap = {}
        for tier, (base_low, base_high) in BASE_TIER_RANGES.items():
            floor_low, floor_high = TIER_FLOORS[tier]
            ranges[tier] = (
                max(floor_low, round_half_up(base_low * multiplier)),
                max(floor_high, round_half_up(base_high * multiplier)),
            )
        ranges = enforce_tier_order(ranges)

        # Regional scaling can pull adjacent bounds back together.
        regional = self._resolver.resolve(estimate_input.zip_code)
        ranges = enforce_tier_order(
            {
                tier: self._resolver.apply(low, high, regional.multiplier)
                for tier, (low, high) in ranges.items()
            }
        )
        return ranges, regional

    @staticmethod
    def _build_assumptions(estimate_input: EstimateInput) -> list[str]:
        return [
            f"Based on {format_number(estimate_input.square_footage)} sqft home",
            f"{estimate_input.preferences.efficiency_level} efficiency tier",
            # Fixed text; access difficulty is priced but not described here.
            "Standard installation complexity",
            f"Regional pricing for ZIP {estimate_input.zip_code}",
        ]


def enforce_tier_order(ranges: _RangeMap, gap: int = MIN_TIER_GAP) -> _RangeMap:
    """Raise bounds so each one is at least ``gap`` above the previous one.

    Walks good.min, good.max, better.min, ... best.max in order and only ever
    moves a bound upward.
    """
    ordered: _RangeMap = {}
    floor: int | None = None
    for tier in Tier:
        low, high = ranges[tier]
        if floor is not None:
            low = max(low, floor)
        high = max(high, low + gap)
        ordered[tier] = (low, high)
        floor = high + gap
    return ordered


def normalize_input(estimate_input: EstimateInput) -> dict[str, Any]:
    """The pricing-relevant fields that identify an estimate, in hash order."""
    preferences = estimate_input.preferences
    return {
        "zipCode": estimate_input.zip_code.strip(),
        "squareFootage": estimate_input.square_footage,
        "floors": estimate_input.floors,
        "homeAge": estimate_input.home_age.strip(),
        "efficiencyLevel": preferences.efficiency_level.strip(),
        "systemType": preferences.system_type.strip(),
        "smartFeatures": bool(preferences.smart_features),
    }


def _to_tier_ranges(ranges: _RangeMap) -> TierRanges:
    try:
        return TierRanges(
            **{
                tier.value: TierRange(low=low, high=high)
                for tier, (low, high) in ranges.items()
            }
        )
    except ValidationError as exc:
        msg = f"Tier ranges failed their ordering checks: {ranges}"
        raise EstimateGenerationError(msg) from exc


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        field = ".".join(loc) or "input"
        message = _FIELD_MESSAGES.get(loc[0] if loc else "", error["msg"])
        errors.append(FieldError(field, message))
    return errors
