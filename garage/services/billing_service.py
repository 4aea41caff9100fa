# garage/services/billing_service.py
"""
Parking fee calculation.
The first 30 minutes are free; after that every started hour is billed
at the rate locked in on the matching ENTRY record.
"""

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from garage.services.pricing_service import CENTS

GRACE_PERIOD = timedelta(minutes=30)
ZERO = Decimal("0.00")


def elapsed_minutes(entry_time: datetime, exit_time: datetime) -> int:
    """Whole minutes between entry and exit, partial minutes dropped."""
    return int((exit_time - entry_time).total_seconds() // 60)


def billable_hours(minutes: int) -> int:
    grace = int(GRACE_PERIOD.total_seconds() // 60)
    if minutes <= grace:
        return 0
    return -(-(minutes - grace) // 60)   # ceil


def charge(entry_time: datetime, exit_time: datetime, hourly_rate) -> Decimal:
    hours = billable_hours(elapsed_minutes(entry_time, exit_time))
    if hours == 0:
        return ZERO
    rate = Decimal(str(hourly_rate))
    return (rate * hours).quantize(CENTS, rounding=ROUND_HALF_UP)
