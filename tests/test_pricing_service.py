# tests/test_pricing_service.py
"""Unit tests for occupancy-based dynamic pricing."""

import pytest
from decimal import Decimal
from garage.services.pricing_service import quote, multiplier_for


class TestQuote:
    @pytest.mark.parametrize("ratio, expected", [
        (0.20, "9.00"),
        (0.40, "10.00"),
        (0.60, "11.00"),
        (0.80, "12.50"),
    ])
    def test_tiers_for_base_price_ten(self, ratio, expected):
        assert quote(Decimal("10.00"), ratio) == Decimal(expected)

    def test_tier_boundaries_are_half_open(self):
        assert multiplier_for(0.0) == Decimal("0.90")
        assert multiplier_for(0.25) == Decimal("1.00")
        assert multiplier_for(0.50) == Decimal("1.10")
        assert multiplier_for(0.75) == Decimal("1.25")

    def test_full_or_overfull_sector_uses_top_tier(self):
        assert quote(Decimal("10.00"), 1.0) == Decimal("12.50")
        assert quote(Decimal("10.00"), 1.3) == Decimal("12.50")

    def test_rounds_half_up_to_cents(self):
        # 8.25 × 1.10 = 9.075 → 9.08
        assert quote(Decimal("8.25"), 0.6) == Decimal("9.08")
        # 0.05 × 0.90 = 0.045 → 0.05
        assert quote(Decimal("0.05"), 0.1) == Decimal("0.05")

    def test_accepts_float_base_price(self):
        assert quote(12.0, 0.1) == Decimal("10.80")
