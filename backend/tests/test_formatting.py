"""Tests for currency and number formatting helpers."""

from __future__ import annotations

import pytest

from comfortquote.formatting import format_currency, format_number, format_tier_range
from comfortquote.models.estimate import TierRange


class TestFormatCurrency:
    def test_whole_amount(self) -> None:
        assert format_currency(12_500) == "$12,500"

    def test_whole_float(self) -> None:
        assert format_currency(6250.0) == "$6,250"

    def test_fractional_amount(self) -> None:
        assert format_currency(9876.54) == "$9,876.54"

    def test_small_amount(self) -> None:
        assert format_currency(500) == "$500"

    def test_large_amount(self) -> None:
        assert format_currency(1_234_567) == "$1,234,567"


class TestFormatTierRange:
    def test_range(self) -> None:
        assert format_tier_range(TierRange(low=6250, high=9375)) == "$6,250 - $9,375"


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2000, "2000"), (2000.0, "2000"), (1850.5, "1850.5"), (0.25, "0.25")],
    )
    def test_values(self, value: float, expected: str) -> None:
        assert format_number(value) == expected
