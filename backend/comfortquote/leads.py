"""Lead qualification scoring and signal tracking.

Quality and readiness scores are point tables over the engagement signals a
homeowner leaves while reviewing an estimate. Both are capped at 100.
Readiness drives the contractor-facing tier: 70+ is ready for an on-site
evaluation, 40+ is actively planning, anything else is exploring.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from comfortquote.models.enums import LeadQualityIndicator, ReadinessTier, Tier
from comfortquote.models.leads import LeadSignals, LeadSummary, ReadinessMetadata

logger = logging.getLogger(__name__)

MAX_SCORE = 100
READY_THRESHOLD = 70
PLANNING_THRESHOLD = 40
HIGH_INTENT_SIGNAL_COUNT = 3
DEEP_SCROLL_PERCENT = 75

READINESS_METADATA: dict[ReadinessTier, ReadinessMetadata] = {
    ReadinessTier.READY: ReadinessMetadata(
        expected_timeline="Within 1-2 weeks",
        recommended_action="Schedule on-site evaluation promptly",
    ),
    ReadinessTier.PLANNING: ReadinessMetadata(
        expected_timeline="Within 1-3 months",
        recommended_action="Engage with educational follow-up, answer questions",
    ),
    ReadinessTier.EXPLORING: ReadinessMetadata(
        expected_timeline="3+ months or exploratory",
        recommended_action="Provide educational resources, no pressure",
    ),
}


def _time_on_results_points(seconds: float | None) -> int:
    if not seconds:
        return 0
    if seconds >= 60:
        return 15
    if seconds >= 30:
        return 10
    if seconds >= 15:
        return 5
    return 0


def quality_score(signals: LeadSignals) -> int:
    """How well qualified a lead is, 0-100."""
    score = 0
    if signals.estimate_completed:
        score += 30
    if signals.viewed_comparison:
        score += 20
    if signals.viewed_financing:
        score += 15
    score += _time_on_results_points(signals.time_spent_on_results)
    if signals.saved_estimate:
        score += 10
    if signals.shared_estimate:
        score += 10
    return min(MAX_SCORE, score)


def readiness_score(signals: LeadSignals) -> int:
    """How ready a lead is for an on-site evaluation, 0-100.

    Zero until the estimate is completed.
    """
    if not signals.estimate_completed:
        return 0

    # Completion, plus every wizard step it implies.
    score = 20 + 10
    score += _time_on_results_points(signals.time_spent_on_results)
    if signals.viewed_comparison:
        score += 15
    if signals.saved_estimate or signals.shared_estimate:
        score += 15
    if signals.viewed_financing:
        score += 10
    if signals.selected_tier is not None:
        score += 10
    if signals.next_steps_section_viewed:
        score += 10
    if signals.scroll_depth and signals.scroll_depth >= DEEP_SCROLL_PERCENT:
        score += 5
    return min(MAX_SCORE, score)


def _readiness(signals: LeadSignals) -> int:
    if signals.readiness_score is not None:
        return signals.readiness_score
    return readiness_score(signals)


def quality_indicators(signals: LeadSignals | None) -> list[LeadQualityIndicator]:
    """Summary labels for contractors, in display order."""
    if signals is None:
        return []

    engagement = sum(
        [
            signals.viewed_comparison,
            signals.viewed_financing,
            signals.saved_estimate,
            signals.shared_estimate,
            bool(signals.time_spent_on_results and signals.time_spent_on_results >= 60),
        ]
    )

    indicators: list[LeadQualityIndicator] = []
    if engagement >= HIGH_INTENT_SIGNAL_COUNT:
        indicators.append(LeadQualityIndicator.HIGH_INTENT)
    if signals.viewed_comparison:
        indicators.append(LeadQualityIndicator.REVIEWED_OPTIONS)
    if signals.viewed_financing:
        indicators.append(LeadQualityIndicator.VIEWED_FINANCING)
    if signals.saved_estimate or signals.shared_estimate:
        indicators.append(LeadQualityIndicator.SAVED_OR_SHARED)
    return indicators


def readiness_tier(signals: LeadSignals | None) -> ReadinessTier:
    if signals is None or not signals.estimate_completed:
        return ReadinessTier.EXPLORING
    score = _readiness(signals)
    if score >= READY_THRESHOLD:
        return ReadinessTier.READY
    if score >= PLANNING_THRESHOLD:
        return ReadinessTier.PLANNING
    return ReadinessTier.EXPLORING


def meets_engagement_threshold(signals: LeadSignals | None) -> bool:
    """Whether a homeowner has engaged enough to request an on-site visit."""
    if signals is None or not signals.estimate_completed:
        return False
    return _readiness(signals) >= PLANNING_THRESHOLD


def readiness_metadata(tier: ReadinessTier) -> ReadinessMetadata:
    return READINESS_METADATA[tier]


def summarize(estimate_id: str, signals: LeadSignals | None) -> LeadSummary:
    """Contractor-facing summary of a lead."""
    tier = readiness_tier(signals)
    return LeadSummary(
        estimate_id=estimate_id,
        readiness_tier=tier,
        metadata=readiness_metadata(tier),
        indicators=quality_indicators(signals),
        meets_engagement_threshold=meets_engagement_threshold(signals),
    )


def _now() -> datetime:
    return datetime.now(UTC)


class LeadTracker:
    """In-memory store of lead signals, one record per estimate ID.

    Each update reads, rescores and writes a record under one lock, so
    concurrent events on the same estimate never overwrite each other.
    Tracking must never break the request that triggered it: failures are
    logged and dropped.
    """

    def __init__(self) -> None:
        self._signals: dict[str, LeadSignals] = {}
        self._lock = threading.Lock()

    def signals(self, estimate_id: str) -> LeadSignals:
        """Get the signals for an estimate, creating an empty record if needed."""
        with self._lock:
            return self._record(estimate_id)

    def find(self, estimate_id: str) -> LeadSignals | None:
        with self._lock:
            return self._signals.get(estimate_id)

    def update(self, estimate_id: str, **changes: Any) -> LeadSignals | None:
        """Merge ``changes`` into the record and recompute both scores."""
        return self._apply(estimate_id, lambda current: changes)

    def track_completed(self, estimate_id: str) -> None:
        self.update(estimate_id, estimate_completed=True, estimate_completed_at=_now())

    def track_comparison_view(self, estimate_id: str) -> None:
        self._mark_once(estimate_id, "viewed_comparison", "viewed_comparison_at")

    def track_financing_view(self, estimate_id: str) -> None:
        self._mark_once(estimate_id, "viewed_financing", "viewed_financing_at")

    def track_results_time(self, estimate_id: str, seconds: float) -> None:
        self.update(
            estimate_id,
            time_spent_on_results=seconds,
            results_page_last_view_at=_now(),
        )

    def track_results_load(self, estimate_id: str, load_time_ms: float) -> None:
        def changes(current: LeadSignals) -> dict[str, Any]:
            now = _now()
            return {
                "results_page_load_time": load_time_ms,
                "results_page_first_view_at": current.results_page_first_view_at or now,
                "results_page_last_view_at": now,
            }

        self._apply(estimate_id, changes)

    def track_save(self, estimate_id: str) -> None:
        self._mark_once(estimate_id, "saved_estimate", "saved_estimate_at")

    def track_share(self, estimate_id: str) -> None:
        self._mark_once(estimate_id, "shared_estimate", "shared_estimate_at")

    def track_tier_selection(self, estimate_id: str, tier: Tier) -> None:
        self.update(estimate_id, selected_tier=Tier(tier))

    def track_scroll_depth(self, estimate_id: str, depth: float) -> None:
        """Record the deepest scroll seen; shallower values are ignored."""

        def changes(current: LeadSignals) -> dict[str, Any] | None:
            if current.scroll_depth and depth <= current.scroll_depth:
                return None
            return {"scroll_depth": min(100.0, max(0.0, depth))}

        self._apply(estimate_id, changes)

    def track_next_steps_view(self, estimate_id: str) -> None:
        self._mark_once(
            estimate_id, "next_steps_section_viewed", "next_steps_section_viewed_at"
        )

    def _mark_once(self, estimate_id: str, flag: str, timestamp: str) -> None:
        """Set a boolean signal and its timestamp the first time only."""

        def changes(current: LeadSignals) -> dict[str, Any] | None:
            if getattr(current, flag):
                return None
            return {flag: True, timestamp: _now()}

        self._apply(estimate_id, changes)

    def _record(self, estimate_id: str) -> LeadSignals:
        # Caller holds self._lock.
        return self._signals.setdefault(estimate_id, LeadSignals(estimate_id=estimate_id))

    def _apply(
        self,
        estimate_id: str,
        changes_for: Callable[[LeadSignals], dict[str, Any] | None],
    ) -> LeadSignals | None:
        """Merge the changes computed from the current record, under one lock.

        ``changes_for`` returning None leaves the record as it is.
        """
        try:
            with self._lock:
                current = self._record(estimate_id)
                changes = changes_for(current)
                if changes is None:
                    return current
                merged = current.model_copy(update=changes)
                updated = merged.model_copy(
                    update={
                        "quality_score": quality_score(merged),
                        "readiness_score": readiness_score(merged),
                    }
                )
                self._signals[estimate_id] = updated
                return updated
        except Exception:
            logger.exception("Lead signal tracking failed for %s", estimate_id)
            return None
