"""Regional cost bands keyed by ZIP code prefix.

Bands are a coarse approximation of local labor rates and material costs
using only the first three ZIP digits. They adjust price ranges, they never
set an exact price; final pricing is confirmed by a licensed contractor.
"""

from __future__ import annotations

from comfortquote.models.enums import CostBand
from comfortquote.models.estimate import RegionalMultiplier

# Fixed band -> multiplier table. Average = 1.00.
REGIONAL_MULTIPLIERS: dict[CostBand, RegionalMultiplier] = {
    CostBand.LOW: RegionalMultiplier(
        band=CostBand.LOW,
        multiplier=0.85,
        label="Lower cost region",
    ),
    CostBand.AVERAGE: RegionalMultiplier(
        band=CostBand.AVERAGE,
        multiplier=1.0,
        label="Average cost region",
    ),
    CostBand.HIGH: RegionalMultiplier(
        band=CostBand.HIGH,
        multiplier=1.25,
        label="Higher cost region",
    ),
}

# Half-open [start, end) intervals over the numeric 3-digit ZIP prefix.
# Checked in order; the first band with a matching interval wins.
ZIP_PREFIX_BANDS: list[tuple[CostBand, list[tuple[int, int]]]] = [
    (
        CostBand.LOW,
        [
            (200, 300),
            (400, 500),
            (600, 700),
            (800, 850),
        ],
    ),
    (
        CostBand.HIGH,
        [
            (900, 950),  # California
            (100, 150),  # NYC area
            (200, 250),  # DC area, shadowed by the low interval above
        ],
    ),
]

DEFAULT_COST_BAND: CostBand = CostBand.AVERAGE

# Minimum ZIP length before the prefix is trusted.
MIN_ZIP_LENGTH = 5

# Floors applied to every range after regional scaling.
REGIONAL_MIN_FLOOR = 3000
REGIONAL_MAX_FLOOR = 4000

REGIONAL_EXPLANATIONS: dict[CostBand, str] = {
    CostBand.LOW: (
        "This region typically has lower labor rates and material costs, "
        "which can reduce installation costs."
    ),
    CostBand.HIGH: (
        "This region typically has higher labor rates, material costs, and "
        "permit fees, which can increase installation costs."
    ),
    CostBand.AVERAGE: (
        "This region has average labor rates and material costs compared to "
        "national averages."
    ),
}
