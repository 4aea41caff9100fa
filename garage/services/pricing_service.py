# garage/services/pricing_service.py
"""
Dynamic pricing: the hourly rate a vehicle pays is locked in at ENTRY
from the sector's base price and its occupancy ratio *before* admission.

    ratio < 0.25          → 10% discount
    0.25 <= ratio < 0.50  → base price
    0.50 <= ratio < 0.75  → +10%
    ratio >= 0.75         → +25%
"""

from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")

# (upper bound exclusive, multiplier); anything past the last bound uses SURGE_MULTIPLIER
PRICE_TIERS = (
    (0.25, Decimal("0.90")),
    (0.50, Decimal("1.00")),
    (0.75, Decimal("1.10")),
)
SURGE_MULTIPLIER = Decimal("1.25")


def multiplier_for(occupancy_ratio: float) -> Decimal:
    for upper, multiplier in PRICE_TIERS:
        if occupancy_ratio < upper:
            return multiplier
    return SURGE_MULTIPLIER


def quote(base_price, occupancy_ratio: float) -> Decimal:
    """Effective hourly rate for a sector, rounded half-up to cents."""
    base = Decimal(str(base_price))
    return (base * multiplier_for(occupancy_ratio)).quantize(CENTS, rounding=ROUND_HALF_UP)
