"""FastAPI application — create_app factory with /api endpoints."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from comfortquote import __version__
from comfortquote.exceptions import (
    EstimateGenerationError,
    EstimateNotFoundError,
    EstimateValidationError,
    FieldError,
)
from comfortquote.leads import summarize
from comfortquote.models.enums import SignalEventType
from comfortquote.models.estimate import StoredEstimate
from comfortquote.models.leads import SignalEvent  # noqa: TCH001 (FastAPI resolves at runtime)
from comfortquote.validation import format_validation_errors, validate_homeowner_input

if TYPE_CHECKING:
    from comfortquote.data.estimate_store import EstimateStore
    from comfortquote.engine import EstimateEngine
    from comfortquote.leads import LeadTracker

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000"


def _cors_origins() -> list[str]:
    raw = os.environ.get("COMFORTQUOTE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _debug_enabled() -> bool:
    return os.environ.get("COMFORTQUOTE_DEBUG", "").lower() in {"1", "true", "yes"}


def _error_detail(message: str, exc: Exception) -> dict[str, Any]:
    detail: dict[str, Any] = {"error": message}
    if _debug_enabled():
        detail["details"] = str(exc)
    return detail


def _validation_detail(message: str, errors: list[FieldError]) -> dict[str, Any]:
    return {"error": message, "fields": [asdict(e) for e in errors]}


def create_app(
    *,
    engine: EstimateEngine | None = None,
    estimate_store: EstimateStore | None = None,
    lead_tracker: LeadTracker | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    engine
        Optional pre-built estimate engine. If not provided, one is created
        via create_default_engine on first request.
    estimate_store
        Optional estimate store for dependency injection (e.g. tests).
        Defaults to a fresh in-memory store owned by this app.
    lead_tracker
        Optional lead signal tracker. Defaults to a fresh in-memory tracker.
    """
    from comfortquote.data.estimate_store import EstimateStore
    from comfortquote.leads import LeadTracker

    app = FastAPI(title="ComfortQuote", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject mocks
    app.state.engine = engine
    app.state.estimate_store = estimate_store if estimate_store is not None else EstimateStore()
    app.state.lead_tracker = lead_tracker if lead_tracker is not None else LeadTracker()

    def _get_engine() -> EstimateEngine:
        eng: EstimateEngine | None = app.state.engine
        if eng is not None:
            return eng
        from comfortquote.factory import create_default_engine

        eng = create_default_engine()
        app.state.engine = eng
        return eng

    def _require_estimate(estimate_id: str) -> StoredEstimate:
        try:
            return app.state.estimate_store.get(estimate_id)
        except EstimateNotFoundError as exc:
            raise HTTPException(status_code=404, detail="Estimate not found") from exc

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    # ------------------------------------------------------------------
    # GET /api/regions/{zip_code}
    # ------------------------------------------------------------------

    @app.get("/api/regions/{zip_code}")
    def region(zip_code: str) -> dict[str, Any]:
        resolver = _get_engine().resolver
        regional = resolver.resolve(zip_code)
        return {
            **regional.model_dump(mode="json"),
            "explanation": resolver.explanation(regional.band),
        }

    # ------------------------------------------------------------------
    # POST /api/homeowner/estimate
    # ------------------------------------------------------------------

    @app.post("/api/homeowner/estimate")
    def create_homeowner_estimate(
        payload: dict[str, Any] = Body(...),  # noqa: B008
    ) -> dict[str, Any]:
        errors = validate_homeowner_input(payload)
        if errors:
            logger.warning(
                "Rejected homeowner estimate input: %s", [e.field for e in errors]
            )
            raise HTTPException(
                status_code=400,
                detail=_validation_detail(format_validation_errors(errors), errors),
            )

        try:
            estimate = _get_engine().generate(payload)
        except EstimateValidationError as exc:
            raise HTTPException(
                status_code=400, detail=_validation_detail(str(exc), exc.errors)
            ) from exc
        except EstimateGenerationError as exc:
            logger.exception("Estimate generation failed")
            raise HTTPException(
                status_code=500,
                detail=_error_detail("Failed to generate estimate", exc),
            ) from exc

        # The estimate is valid without storage; a failed save is not fatal.
        try:
            stored = app.state.estimate_store.save(estimate, is_homeowner=True)
        except Exception:
            logger.exception("Failed to save estimate %s", estimate.estimate_id)
            stored = StoredEstimate(**estimate.model_dump(), is_homeowner=True)

        app.state.lead_tracker.track_completed(stored.estimate_id)

        return {
            "success": True,
            "estimate": stored.model_dump(mode="json", by_alias=True),
        }

    # ------------------------------------------------------------------
    # GET /api/homeowner/estimate/{estimate_id}
    # ------------------------------------------------------------------

    @app.get("/api/homeowner/estimate/{estimate_id}")
    def get_homeowner_estimate(estimate_id: str) -> dict[str, Any]:
        stored = _require_estimate(estimate_id)
        if not stored.is_homeowner and not stored.company_id:
            raise HTTPException(status_code=404, detail="Estimate not found")
        return {
            "success": True,
            "estimate": stored.model_dump(mode="json", by_alias=True),
        }

    # ------------------------------------------------------------------
    # POST /api/contractor/companies/{company_id}/estimates
    # ------------------------------------------------------------------

    @app.post("/api/contractor/companies/{company_id}/estimates")
    def create_contractor_estimate(
        company_id: str,
        payload: dict[str, Any] = Body(...),  # noqa: B008
        contractor_id: str | None = Query(default=None, alias="contractorId"),
    ) -> dict[str, Any]:
        if not payload.get("zipCode") or not payload.get("squareFootage") or not payload.get(
            "preferences"
        ):
            raise HTTPException(status_code=400, detail={"error": "Missing required fields"})

        try:
            estimate = _get_engine().generate(payload)
        except EstimateValidationError as exc:
            raise HTTPException(
                status_code=400, detail=_validation_detail(str(exc), exc.errors)
            ) from exc
        except EstimateGenerationError as exc:
            logger.exception("Contractor estimate generation failed")
            raise HTTPException(
                status_code=500,
                detail=_error_detail("Failed to generate estimate", exc),
            ) from exc

        stored = app.state.estimate_store.save(
            estimate,
            is_homeowner=False,
            company_id=company_id,
            contractor_id=contractor_id,
        )
        logger.info("Saved contractor estimate %s for company %s", stored.estimate_id, company_id)
        return {
            "success": True,
            "estimate": stored.model_dump(mode="json", by_alias=True),
        }

    # ------------------------------------------------------------------
    # GET /api/contractor/companies/{company_id}/estimates
    # ------------------------------------------------------------------

    @app.get("/api/contractor/companies/{company_id}/estimates")
    def list_company_estimates(company_id: str) -> dict[str, Any]:
        estimates = list(reversed(app.state.estimate_store.list_for_company(company_id)))
        return {
            "success": True,
            "estimates": [e.model_dump(mode="json", by_alias=True) for e in estimates],
            "count": len(estimates),
        }

    # ------------------------------------------------------------------
    # GET /api/estimates/{estimate_id}/summary
    # ------------------------------------------------------------------

    @app.get("/api/estimates/{estimate_id}/summary")
    def estimate_summary(estimate_id: str) -> dict[str, Any]:
        return _require_estimate(estimate_id).to_summary_dict()

    # ------------------------------------------------------------------
    # POST /api/estimates/{estimate_id}/signals
    # ------------------------------------------------------------------

    @app.post("/api/estimates/{estimate_id}/signals")
    def track_signal(estimate_id: str, event: SignalEvent) -> dict[str, Any]:
        _require_estimate(estimate_id)
        tracker: LeadTracker = app.state.lead_tracker

        simple_events = {
            SignalEventType.COMPLETED: tracker.track_completed,
            SignalEventType.COMPARISON_VIEW: tracker.track_comparison_view,
            SignalEventType.FINANCING_VIEW: tracker.track_financing_view,
            SignalEventType.SAVE: tracker.track_save,
            SignalEventType.SHARE: tracker.track_share,
            SignalEventType.NEXT_STEPS_VIEW: tracker.track_next_steps_view,
        }
        value = event.value or 0.0

        if event.event in simple_events:
            simple_events[event.event](estimate_id)
        elif event.event == SignalEventType.RESULTS_TIME:
            tracker.track_results_time(estimate_id, value)
        elif event.event == SignalEventType.RESULTS_LOAD:
            tracker.track_results_load(estimate_id, value)
        elif event.event == SignalEventType.SCROLL_DEPTH:
            tracker.track_scroll_depth(estimate_id, value)
        elif event.event == SignalEventType.TIER_SELECTION and event.tier is not None:
            tracker.track_tier_selection(estimate_id, event.tier)

        return {"success": True}

    # ------------------------------------------------------------------
    # GET /api/estimates/{estimate_id}/lead-signals
    # ------------------------------------------------------------------

    @app.get("/api/estimates/{estimate_id}/lead-signals")
    def lead_signals(estimate_id: str) -> dict[str, Any]:
        _require_estimate(estimate_id)
        summary = summarize(estimate_id, app.state.lead_tracker.find(estimate_id))
        return summary.model_dump(mode="json", by_alias=True)

    return app
