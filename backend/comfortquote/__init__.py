"""ComfortQuote HVAC replacement estimator.

Usage::

    from comfortquote import create_default_engine

    engine = create_default_engine()
    result = engine.generate({
        "zipCode": "10001",
        "squareFootage": 2000,
        "preferences": {"efficiencyLevel": "standard", "systemType": "central-air"},
    })
"""

from comfortquote.data.repository import RegionalBandResolver
from comfortquote.engine import EstimateEngine
from comfortquote.exceptions import (
    ComfortQuoteError,
    EstimateGenerationError,
    EstimateNotFoundError,
    EstimateValidationError,
    FieldError,
)
from comfortquote.factory import create_default_engine
from comfortquote.models.enums import CostBand, Tier
from comfortquote.models.estimate import (
    EstimateInput,
    EstimateResult,
    Preferences,
    RegionalMultiplier,
    TierRange,
    TierRanges,
)

__version__ = "0.1.0"

__all__ = [
    "ComfortQuoteError",
    "CostBand",
    "EstimateEngine",
    "EstimateGenerationError",
    "EstimateInput",
    "EstimateNotFoundError",
    "EstimateResult",
    "EstimateValidationError",
    "FieldError",
    "Preferences",
    "RegionalBandResolver",
    "RegionalMultiplier",
    "Tier",
    "TierRange",
    "TierRanges",
    "create_default_engine",
]
