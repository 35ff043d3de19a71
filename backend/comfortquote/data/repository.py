"""Regional band lookup for ZIP codes."""

from __future__ import annotations

import math
import re

from comfortquote.data.regional_bands import (
    DEFAULT_COST_BAND,
    MIN_ZIP_LENGTH,
    REGIONAL_EXPLANATIONS,
    REGIONAL_MAX_FLOOR,
    REGIONAL_MIN_FLOOR,
    REGIONAL_MULTIPLIERS,
    ZIP_PREFIX_BANDS,
)
from comfortquote.models.enums import CostBand
from comfortquote.models.estimate import RegionalMultiplier

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity (JS ``Math.round``)."""
    return math.floor(value + 0.5)


class RegionalBandResolver:
    """Maps ZIP codes to regional cost bands.

    Wraps the fixed prefix-interval table. Lookups never raise: an empty,
    short, or non-numeric ZIP code resolves to the average band.
    """

    def __init__(
        self,
        prefix_bands: list[tuple[CostBand, list[tuple[int, int]]]] | None = None,
        multipliers: dict[CostBand, RegionalMultiplier] | None = None,
    ) -> None:
        self._prefix_bands = list(prefix_bands if prefix_bands is not None else ZIP_PREFIX_BANDS)
        self._multipliers = dict(multipliers if multipliers is not None else REGIONAL_MULTIPLIERS)

    def cost_band_for_zip(self, zip_code: str | None) -> CostBand:
        """Classify a ZIP code by the numeric value of its first three characters."""
        if not zip_code or len(zip_code) < MIN_ZIP_LENGTH:
            return DEFAULT_COST_BAND

        match = _LEADING_INT.match(zip_code[:3])
        if match is None:
            return DEFAULT_COST_BAND
        prefix = int(match.group(1))

        for band, intervals in self._prefix_bands:
            for start, end in intervals:
                if start <= prefix < end:
                    return band
        return DEFAULT_COST_BAND

    def resolve(self, zip_code: str | None) -> RegionalMultiplier:
        """Get the regional multiplier for a ZIP code."""
        return self._multipliers[self.cost_band_for_zip(zip_code)]

    @staticmethod
    def apply(low: float, high: float, multiplier: float) -> tuple[int, int]:
        """Scale one price range by a regional multiplier.

        Bounds are rounded to whole currency units and floored at the
        regional minimums (3,000 / 4,000).
        """
        return (
            max(REGIONAL_MIN_FLOOR, round_half_up(low * multiplier)),
            max(REGIONAL_MAX_FLOOR, round_half_up(high * multiplier)),
        )

    @staticmethod
    def explanation(band: CostBand) -> str:
        """Why pricing in this band differs from the national average."""
        return REGIONAL_EXPLANATIONS.get(
            band,
            "Regional factors like labor rates, material costs, and local "
            "market conditions influence pricing.",
        )
