"""Lead qualification models.

Signals are collected while a homeowner reviews an estimate. Scores are
internal; contractors only see the readiness tier and indicator labels.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from comfortquote.models.enums import (
    LeadQualityIndicator,
    ReadinessTier,
    SignalEventType,
    Tier,
)


class LeadSignals(BaseModel):
    """Engagement signals recorded against one estimate."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    estimate_id: str

    # Completion
    estimate_completed: bool = False
    estimate_completed_at: datetime | None = None

    # Engagement
    viewed_comparison: bool = False
    viewed_comparison_at: datetime | None = None
    viewed_financing: bool = False
    viewed_financing_at: datetime | None = None

    # Time on the results page
    results_page_load_time: float | None = None  # milliseconds
    time_spent_on_results: float | None = None  # seconds
    results_page_first_view_at: datetime | None = None
    results_page_last_view_at: datetime | None = None

    # Actions
    saved_estimate: bool = False
    saved_estimate_at: datetime | None = None
    shared_estimate: bool = False
    shared_estimate_at: datetime | None = None

    # Readiness
    selected_tier: Tier | None = None
    scroll_depth: float | None = Field(default=None, ge=0, le=100)
    next_steps_section_viewed: bool = False
    next_steps_section_viewed_at: datetime | None = None

    # Internal scores (0-100), recomputed on every update
    quality_score: int | None = None
    readiness_score: int | None = None


class ReadinessMetadata(BaseModel):
    """Expected close timeline and next action for a readiness tier."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    expected_timeline: str
    recommended_action: str


class LeadSummary(BaseModel):
    """Contractor-facing view of a lead. Carries no raw scores."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    estimate_id: str
    readiness_tier: ReadinessTier
    metadata: ReadinessMetadata
    indicators: list[LeadQualityIndicator]
    meets_engagement_threshold: bool


# Events that need a numeric ``value``.
_VALUE_EVENTS = {
    SignalEventType.RESULTS_TIME,
    SignalEventType.RESULTS_LOAD,
    SignalEventType.SCROLL_DEPTH,
}


class SignalEvent(BaseModel):
    """One engagement event posted by the results page."""

    event: SignalEventType
    value: float | None = Field(default=None, ge=0)
    tier: Tier | None = None

    @model_validator(mode="after")
    def event_has_payload(self) -> SignalEvent:
        if self.event in _VALUE_EVENTS and self.value is None:
            msg = f"Event '{self.event}' requires a numeric value"
            raise ValueError(msg)
        if self.event == SignalEventType.TIER_SELECTION and self.tier is None:
            msg = "Event 'tier_selection' requires a tier"
            raise ValueError(msg)
        return self
