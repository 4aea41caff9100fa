# tests/test_billing_service.py
"""Unit tests for the parking fee calculation (grace period + started hours)."""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from garage.services.billing_service import charge, billable_hours, elapsed_minutes

ENTRY = datetime(2025, 1, 1, 10, 0)


class TestCharge:
    @pytest.mark.parametrize("minutes, expected", [
        (25, "0.00"),
        (30, "0.00"),
        (31, "10.00"),
        (90, "10.00"),
        (91, "20.00"),
        (120, "20.00"),
        (150, "20.00"),
        (151, "30.00"),
    ])
    def test_grace_period_and_hour_rounding(self, minutes, expected):
        exit_time = ENTRY + timedelta(minutes=minutes)
        assert charge(ENTRY, exit_time, Decimal("10.00")) == Decimal(expected)

    def test_partial_minutes_are_not_billed(self):
        # 30m59s is still inside the grace period
        assert charge(ENTRY, ENTRY + timedelta(minutes=30, seconds=59), Decimal("10.00")) == Decimal("0.00")

    def test_uses_locked_rate(self):
        assert charge(ENTRY, ENTRY + timedelta(minutes=95), Decimal("9.00")) == Decimal("18.00")

    def test_rounds_to_cents(self):
        assert charge(ENTRY, ENTRY + timedelta(hours=3, minutes=30), Decimal("12.345")) == Decimal("37.04")

    def test_zero_duration_is_free(self):
        assert charge(ENTRY, ENTRY, Decimal("10.00")) == Decimal("0.00")


class TestHelpers:
    def test_elapsed_minutes_truncates(self):
        assert elapsed_minutes(ENTRY, ENTRY + timedelta(minutes=61, seconds=45)) == 61

    def test_billable_hours(self):
        assert billable_hours(30) == 0
        assert billable_hours(31) == 1
        assert billable_hours(95) == 2
