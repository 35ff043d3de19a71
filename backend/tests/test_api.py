"""Tests for the FastAPI application."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from comfortquote.api.app import create_app
from comfortquote.data.estimate_store import EstimateStore
from comfortquote.exceptions import EstimateGenerationError, EstimateValidationError, FieldError
from comfortquote.factory import create_default_engine
from comfortquote.leads import LeadTracker

# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------


def _homeowner_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "zipCode": "10001",
        "squareFootage": 2000,
        "floors": 2,
        "homeAge": "mid",
        "preferences": {
            "efficiencyLevel": "standard",
            "systemType": "central-air",
            "smartFeatures": False,
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def _no_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("COMFORTQUOTE_DEBUG", raising=False)


@pytest.fixture()
def store() -> EstimateStore:
    return EstimateStore()


@pytest.fixture()
def tracker() -> LeadTracker:
    return LeadTracker()


@pytest.fixture()
def client(store: EstimateStore, tracker: LeadTracker) -> TestClient:
    app = create_app(engine=create_default_engine(), estimate_store=store, lead_tracker=tracker)
    return TestClient(app)


def _create_estimate(client: TestClient, **overrides: Any) -> dict[str, Any]:
    response = client.post("/api/homeowner/estimate", json=_homeowner_payload(**overrides))
    assert response.status_code == 200
    return response.json()["estimate"]


# ---------------------------------------------------------------------------
# Health and regions
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": "0.1.0"}


class TestRegions:
    def test_high_cost_region(self, client: TestClient) -> None:
        data = client.get("/api/regions/90210").json()
        assert data["band"] == "high"
        assert data["multiplier"] == pytest.approx(1.25)
        assert data["label"] == "Higher cost region"
        assert "labor rates" in data["explanation"]

    def test_short_zip_is_average(self, client: TestClient) -> None:
        assert client.get("/api/regions/123").json()["band"] == "average"

    def test_default_engine_is_created_lazily(self) -> None:
        app = create_app()
        assert app.state.engine is None

        response = TestClient(app).get("/api/regions/60601")

        assert response.json()["band"] == "low"
        assert app.state.engine is not None


# ---------------------------------------------------------------------------
# POST /api/homeowner/estimate
# ---------------------------------------------------------------------------


class TestCreateHomeownerEstimate:
    def test_success(self, client: TestClient, store: EstimateStore) -> None:
        response = client.post("/api/homeowner/estimate", json=_homeowner_payload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        estimate = body["estimate"]
        assert estimate["estimateId"].startswith("est-")
        assert estimate["_submissionId"].startswith("sub-")
        assert estimate["tierRanges"]["good"] == {"min": 6250, "max": 9375}
        assert estimate["tierRanges"]["best"] == {"min": 14375, "max": 20000}
        assert estimate["regionalBand"]["band"] == "high"
        assert estimate["isHomeowner"] is True
        assert estimate["companyId"] is None
        assert estimate["version"] == "v1"
        assert estimate["input"]["zipCode"] == "10001"
        assert len(store) == 1

    def test_marks_lead_completed(self, client: TestClient, tracker: LeadTracker) -> None:
        estimate = _create_estimate(client)
        signals = tracker.find(estimate["estimateId"])
        assert signals is not None
        assert signals.estimate_completed is True

    def test_resubmission_keeps_id(self, client: TestClient, store: EstimateStore) -> None:
        first = _create_estimate(client)
        second = _create_estimate(client)

        assert first["estimateId"] == second["estimateId"]
        assert first["_submissionId"] != second["_submissionId"]
        assert len(store) == 2

    def test_form_errors(self, client: TestClient) -> None:
        response = client.post("/api/homeowner/estimate", json={"zipCode": "123"})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"].startswith("Please fix the following: ")
        assert {"field": "zipCode", "message": "Please enter a valid ZIP code"} in detail["fields"]

    def test_single_form_error(self, client: TestClient) -> None:
        response = client.post("/api/homeowner/estimate", json=_homeowner_payload(homeAge=""))

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "Home age is required"

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/api/homeowner/estimate", json=["not", "an", "object"])
        assert response.status_code == 422

    def test_engine_validation_error(self, store: EstimateStore) -> None:
        engine = MagicMock()
        engine.generate.side_effect = EstimateValidationError(
            "Preferences are required", [FieldError("preferences", "Preferences are required")]
        )
        client = TestClient(create_app(engine=engine, estimate_store=store))

        response = client.post("/api/homeowner/estimate", json=_homeowner_payload())

        assert response.status_code == 400
        assert response.json()["detail"] == {
            "error": "Preferences are required",
            "fields": [{"field": "preferences", "message": "Preferences are required"}],
        }
        assert len(store) == 0

    def test_generation_error(self) -> None:
        engine = MagicMock()
        engine.generate.side_effect = EstimateGenerationError("tiers overlap")
        client = TestClient(create_app(engine=engine))

        response = client.post("/api/homeowner/estimate", json=_homeowner_payload())

        assert response.status_code == 500
        assert response.json()["detail"] == {"error": "Failed to generate estimate"}

    def test_generation_error_details_in_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMFORTQUOTE_DEBUG", "true")
        engine = MagicMock()
        engine.generate.side_effect = EstimateGenerationError("tiers overlap")
        client = TestClient(create_app(engine=engine))

        response = client.post("/api/homeowner/estimate", json=_homeowner_payload())

        assert response.json()["detail"]["details"] == "tiers overlap"

    def test_save_failure_still_returns_estimate(self, tracker: LeadTracker) -> None:
        failing_store = MagicMock()
        failing_store.save.side_effect = RuntimeError("disk full")
        client = TestClient(
            create_app(
                engine=create_default_engine(),
                estimate_store=failing_store,
                lead_tracker=tracker,
            )
        )

        response = client.post("/api/homeowner/estimate", json=_homeowner_payload())

        assert response.status_code == 200
        estimate = response.json()["estimate"]
        assert estimate["isHomeowner"] is True
        assert tracker.find(estimate["estimateId"]) is not None


# ---------------------------------------------------------------------------
# GET /api/homeowner/estimate/{estimate_id}
# ---------------------------------------------------------------------------


class TestGetHomeownerEstimate:
    def test_found(self, client: TestClient) -> None:
        created = _create_estimate(client)
        response = client.get(f"/api/homeowner/estimate/{created['estimateId']}")

        assert response.status_code == 200
        assert response.json()["estimate"]["_submissionId"] == created["_submissionId"]

    def test_missing(self, client: TestClient) -> None:
        response = client.get("/api/homeowner/estimate/est-missing")
        assert response.status_code == 404
        assert response.json()["detail"] == "Estimate not found"

    def test_unowned_contractor_estimate_hidden(
        self, client: TestClient, store: EstimateStore
    ) -> None:
        estimate = create_default_engine().generate(_homeowner_payload())
        store.save(estimate, is_homeowner=False)

        response = client.get(f"/api/homeowner/estimate/{estimate.estimate_id}")
        assert response.status_code == 404

    def test_company_estimate_visible(self, client: TestClient, store: EstimateStore) -> None:
        estimate = create_default_engine().generate(_homeowner_payload())
        store.save(estimate, is_homeowner=False, company_id="co-1")

        response = client.get(f"/api/homeowner/estimate/{estimate.estimate_id}")
        assert response.status_code == 200
        assert response.json()["estimate"]["companyId"] == "co-1"


# ---------------------------------------------------------------------------
# Lead signals
# ---------------------------------------------------------------------------


class TestSignals:
    def test_unknown_estimate(self, client: TestClient) -> None:
        response = client.post("/api/estimates/est-missing/signals", json={"event": "save"})
        assert response.status_code == 404

    def test_value_required(self, client: TestClient) -> None:
        estimate_id = _create_estimate(client)["estimateId"]
        response = client.post(
            f"/api/estimates/{estimate_id}/signals", json={"event": "results_time"}
        )
        assert response.status_code == 422

    def test_tier_selection(self, client: TestClient, tracker: LeadTracker) -> None:
        estimate_id = _create_estimate(client)["estimateId"]
        response = client.post(
            f"/api/estimates/{estimate_id}/signals",
            json={"event": "tier_selection", "tier": "better"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert tracker.signals(estimate_id).selected_tier == "better"

    def test_scroll_depth(self, client: TestClient, tracker: LeadTracker) -> None:
        estimate_id = _create_estimate(client)["estimateId"]
        client.post(
            f"/api/estimates/{estimate_id}/signals", json={"event": "scroll_depth", "value": 80}
        )
        assert tracker.signals(estimate_id).scroll_depth == 80

    def test_lead_summary(self, client: TestClient) -> None:
        estimate_id = _create_estimate(client)["estimateId"]
        for event in (
            {"event": "comparison_view"},
            {"event": "financing_view"},
            {"event": "save"},
            {"event": "results_time", "value": 90},
        ):
            response = client.post(f"/api/estimates/{estimate_id}/signals", json=event)
            assert response.status_code == 200

        summary = client.get(f"/api/estimates/{estimate_id}/lead-signals").json()

        assert summary["estimateId"] == estimate_id
        assert summary["readinessTier"] == "Ready for on-site evaluation"
        assert summary["metadata"] == {
            "expectedTimeline": "Within 1-2 weeks",
            "recommendedAction": "Schedule on-site evaluation promptly",
        }
        assert summary["indicators"] == [
            "High intent",
            "Reviewed options",
            "Viewed financing",
            "Saved/shared estimate",
        ]
        assert summary["meetsEngagementThreshold"] is True
        assert "readinessScore" not in summary

    def test_lead_summary_after_completion_only(self, client: TestClient) -> None:
        estimate_id = _create_estimate(client)["estimateId"]
        summary = client.get(f"/api/estimates/{estimate_id}/lead-signals").json()

        assert summary["readinessTier"] == "Exploring options"
        assert summary["indicators"] == []
        assert summary["meetsEngagementThreshold"] is False

    def test_lead_summary_unknown_estimate(self, client: TestClient) -> None:
        response = client.get("/api/estimates/est-missing/lead-signals")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Contractor estimates
# ---------------------------------------------------------------------------


class TestContractorEstimates:
    def test_create(self, client: TestClient, store: EstimateStore, tracker: LeadTracker) -> None:
        response = client.post(
            "/api/contractor/companies/co-1/estimates",
            params={"contractorId": "tech-7"},
            json=_homeowner_payload(),
        )

        assert response.status_code == 200
        estimate = response.json()["estimate"]
        assert estimate["companyId"] == "co-1"
        assert estimate["contractorId"] == "tech-7"
        assert estimate["isHomeowner"] is False
        assert estimate["tierRanges"]["good"] == {"min": 6250, "max": 9375}
        assert len(store) == 1
        assert tracker.find(estimate["estimateId"]) is None

    @pytest.mark.parametrize("missing", ["zipCode", "squareFootage", "preferences"])
    def test_missing_required_field(self, client: TestClient, missing: str) -> None:
        payload = _homeowner_payload()
        del payload[missing]

        response = client.post("/api/contractor/companies/co-1/estimates", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == {"error": "Missing required fields"}

    def test_engine_rejection(self, client: TestClient) -> None:
        response = client.post(
            "/api/contractor/companies/co-1/estimates",
            json=_homeowner_payload(squareFootage="2000"),
        )
        assert response.status_code == 400
        assert response.json()["detail"]["fields"][0]["field"] == "squareFootage"

    def test_list_most_recent_first(self, client: TestClient) -> None:
        for square_footage in (1800, 2400):
            client.post(
                "/api/contractor/companies/co-1/estimates",
                json=_homeowner_payload(squareFootage=square_footage),
            )
        client.post(
            "/api/contractor/companies/co-2/estimates",
            json=_homeowner_payload(squareFootage=3000),
        )
        _create_estimate(client)

        body = client.get("/api/contractor/companies/co-1/estimates").json()

        assert body["success"] is True
        assert body["count"] == 2
        assert [e["input"]["squareFootage"] for e in body["estimates"]] == [2400, 1800]

    def test_list_empty_company(self, client: TestClient) -> None:
        body = client.get("/api/contractor/companies/co-9/estimates").json()
        assert body == {"success": True, "estimates": [], "count": 0}

    def test_contractor_estimate_visible_to_homeowner_route(self, client: TestClient) -> None:
        created = client.post(
            "/api/contractor/companies/co-1/estimates", json=_homeowner_payload()
        ).json()["estimate"]

        response = client.get(f"/api/homeowner/estimate/{created['estimateId']}")
        assert response.status_code == 200


class TestEstimateSummary:
    def test_summary(self, client: TestClient) -> None:
        estimate_id = _create_estimate(client)["estimateId"]

        summary = client.get(f"/api/estimates/{estimate_id}/summary").json()

        assert summary["estimate_id"] == estimate_id
        assert summary["zip_code"] == "10001"
        assert summary["square_footage_formatted"] == "2,000 sqft"
        assert summary["regional_label"] == "Higher cost region"
        assert summary["tiers"] == {
            "good": "$6,250 - $9,375",
            "better": "$10,000 - $13,750",
            "best": "$14,375 - $20,000",
        }
        assert summary["num_assumptions"] == 4

    def test_summary_unknown_estimate(self, client: TestClient) -> None:
        response = client.get("/api/estimates/est-missing/summary")
        assert response.status_code == 404
