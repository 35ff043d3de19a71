"""Estimate input and output models for the ComfortQuote engine.

Field names are snake_case in Python and camelCase on the wire, so the
HTTP layer accepts and returns the same JSON the homeowner wizard posts.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from comfortquote.models.enums import CostBand, SystemType, Tier


def _default_on_error(
    cls: type[BaseModel],
    value: Any,
    handler: ValidatorFunctionWrapHandler,
    info: ValidationInfo,
) -> Any:
    """Fall back to the field default instead of rejecting a malformed value."""
    try:
        return handler(value)
    except ValidationError:
        field_name = info.field_name or ""
        return cls.model_fields[field_name].get_default(call_default_factory=True)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class ExistingSystem(_CamelModel):
    """The homeowner's current system. Recorded, never priced."""

    has_existing: bool = False
    system_type: str | None = None
    system_age: float | None = None
    condition: str | None = None


class Preferences(_CamelModel):
    """Equipment preferences from the wizard.

    Only ``system_type`` moves the price; ``efficiency_level`` is echoed into
    the assumptions text and ``smart_features`` is carried through as-is.
    """

    efficiency_level: str = ""
    system_type: str = SystemType.CENTRAL_AIR.value
    smart_features: bool = False

    lenient_fields = field_validator(
        "efficiency_level", "system_type", "smart_features", mode="wrap"
    )(_default_on_error)


class InstallationFactors(_CamelModel):
    """Site conditions. Only ``access_difficulty`` moves the price."""

    access_difficulty: str | None = None
    permits: str | None = None
    timeline: str | None = None


class EstimateInput(_CamelModel):
    """Home description submitted by a homeowner or contractor.

    ``square_footage`` and ``preferences`` are required. Every other field is
    optional and a malformed value silently falls back to its default.
    """

    zip_code: str = ""
    square_footage: float = Field(gt=0, strict=True, allow_inf_nan=False)
    floors: int = 1
    home_age: str = ""
    existing_system: ExistingSystem | None = None
    preferences: Preferences
    installation_factors: InstallationFactors | None = None

    lenient_fields = field_validator(
        "zip_code",
        "floors",
        "home_age",
        "existing_system",
        "installation_factors",
        mode="wrap",
    )(_default_on_error)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TierRange(BaseModel):
    """A whole-currency price range for one tier. Serialized as ``{min, max}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    low: int = Field(alias="min")
    high: int = Field(alias="max")

    @model_validator(mode="after")
    def low_lt_high(self) -> TierRange:
        if not self.low < self.high:
            msg = f"Must satisfy min < max, got {self.low} < {self.high}"
            raise ValueError(msg)
        return self


class TierRanges(BaseModel):
    """Good / Better / Best ranges. Tiers never overlap or invert."""

    model_config = ConfigDict(frozen=True)

    good: TierRange
    better: TierRange
    best: TierRange

    @model_validator(mode="after")
    def tiers_ascending(self) -> TierRanges:
        if not (
            self.good.high < self.better.low and self.better.high < self.best.low
        ):
            msg = (
                "Tier ranges overlap: "
                f"good={self.good.low}-{self.good.high}, "
                f"better={self.better.low}-{self.better.high}, "
                f"best={self.best.low}-{self.best.high}"
            )
            raise ValueError(msg)
        return self

    def get(self, tier: Tier) -> TierRange:
        return getattr(self, tier.value)


class RegionalMultiplier(BaseModel):
    """A regional cost band with its fixed multiplier and display label."""

    model_config = ConfigDict(frozen=True)

    band: CostBand
    multiplier: float
    label: str


class EstimateResult(_CamelModel):
    """Complete estimate output from the ComfortQuote engine.

    ``estimate_id`` is derived from the pricing-relevant input fields and is
    the only idempotency key. ``submission_id`` (``_submissionId`` on the
    wire) is unique per call and exists for storage bookkeeping only.
    """

    estimate_id: str
    input: EstimateInput
    tier_ranges: TierRanges
    regional_band: RegionalMultiplier
    assumptions: list[str]
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str = "v1"
    submission_id: str = Field(alias="_submissionId")

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict with display-ready strings."""
        from comfortquote.formatting import format_tier_range

        return {
            "estimate_id": self.estimate_id,
            "zip_code": self.input.zip_code,
            "square_footage_formatted": f"{self.input.square_footage:,.0f} sqft",
            "regional_band": self.regional_band.band.value,
            "regional_label": self.regional_band.label,
            "tiers": {
                tier.value: format_tier_range(self.tier_ranges.get(tier))
                for tier in Tier
            },
            "num_assumptions": len(self.assumptions),
            "created_at_formatted": self.created_at.strftime("%Y-%m-%d %H:%M"),
        }


class StoredEstimate(EstimateResult):
    """An estimate as saved by the estimate store, with ownership attached."""

    company_id: str | None = None
    contractor_id: str | None = None
    is_homeowner: bool = True
