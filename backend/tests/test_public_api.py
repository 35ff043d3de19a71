"""Tests for the public API surface of the comfortquote package.

Verifies that consumers can import everything they need from the top-level
``comfortquote`` package, use ``create_default_engine`` for quick setup, and
round-trip estimates through JSON serialization.
"""

from __future__ import annotations

import json

import pytest

import comfortquote
from comfortquote import (
    ComfortQuoteError,
    CostBand,
    EstimateEngine,
    EstimateInput,
    EstimateResult,
    EstimateValidationError,
    Preferences,
    RegionalBandResolver,
    Tier,
    create_default_engine,
)


def test_all_exports_resolve() -> None:
    for name in comfortquote.__all__:
        assert hasattr(comfortquote, name), name


def test_version() -> None:
    assert comfortquote.__version__ == "0.1.0"


def test_default_engine() -> None:
    engine = create_default_engine()
    assert isinstance(engine, EstimateEngine)
    assert isinstance(engine.resolver, RegionalBandResolver)


def test_generate_from_models() -> None:
    engine = create_default_engine()
    result = engine.generate(
        EstimateInput(
            zip_code="94105",
            square_footage=2000,
            preferences=Preferences(efficiency_level="high", system_type="heat-pump"),
        )
    )
    assert result.regional_band.band == CostBand.HIGH
    assert result.tier_ranges.get(Tier.GOOD).low == 7500


def test_json_round_trip() -> None:
    result = create_default_engine().generate(
        {"zipCode": "60601", "squareFootage": 2200, "preferences": {"systemType": "dual-fuel"}}
    )
    payload = json.loads(result.model_dump_json(by_alias=True))
    restored = EstimateResult.model_validate(payload)

    assert restored.estimate_id == result.estimate_id
    assert restored.submission_id == result.submission_id
    assert restored.tier_ranges == result.tier_ranges
    assert restored.input.preferences.system_type == "dual-fuel"


def test_errors_share_a_base() -> None:
    with pytest.raises(ComfortQuoteError):
        create_default_engine().generate({"preferences": {}})
    assert issubclass(EstimateValidationError, ComfortQuoteError)
