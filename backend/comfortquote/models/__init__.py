"""Domain models for the ComfortQuote estimator."""

from comfortquote.models.enums import (
    AccessDifficulty,
    CostBand,
    HomeAgeBucket,
    LeadQualityIndicator,
    ReadinessTier,
    SignalEventType,
    SystemType,
    Tier,
)
from comfortquote.models.estimate import (
    EstimateInput,
    EstimateResult,
    ExistingSystem,
    InstallationFactors,
    Preferences,
    RegionalMultiplier,
    StoredEstimate,
    TierRange,
    TierRanges,
)
from comfortquote.models.leads import (
    LeadSignals,
    LeadSummary,
    ReadinessMetadata,
    SignalEvent,
)

__all__ = [
    "AccessDifficulty",
    "CostBand",
    "EstimateInput",
    "EstimateResult",
    "ExistingSystem",
    "HomeAgeBucket",
    "InstallationFactors",
    "LeadQualityIndicator",
    "LeadSignals",
    "LeadSummary",
    "Preferences",
    "ReadinessMetadata",
    "ReadinessTier",
    "RegionalMultiplier",
    "SignalEvent",
    "SignalEventType",
    "StoredEstimate",
    "SystemType",
    "Tier",
    "TierRange",
    "TierRanges",
]
