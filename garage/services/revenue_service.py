# garage/services/revenue_service.py
"""
Revenue per sector and day, summed from EXIT records whose exit time falls
on that date. Results are memoised in RevenueCache; the event processor
invalidates the (sector, date) entry after every ENTRY/EXIT, and a miss
always recomputes from the ledger.
"""

import threading
import time
from collections import OrderedDict
from datetime import date, datetime, time as dtime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from garage import metrics
from garage.models.parking_event import ParkingEvent, EventType
from garage.models.sector import Sector
from garage.services.pricing_service import CENTS
from garage.utils.logger import get_logger

logger = get_logger(__name__)


class RevenueCache:
    """
    (sector, date) -> total, least recently used entries evicted past
    `max_entries`. Every invalidation bumps `generation`; a put computed
    under an older generation is dropped so a total read before an EXIT
    committed never lands in the cache after it.
    """

    def __init__(self, max_entries: int = 1024):
        self.max_entries = max_entries
        self._entries: "OrderedDict[tuple[str, date], Decimal]" = OrderedDict()
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get(self, sector: str, day: date) -> Optional[Decimal]:
        with self._lock:
            amount = self._entries.get((sector, day))
            if amount is not None:
                self._entries.move_to_end((sector, day))
            return amount

    def put(self, sector: str, day: date, amount: Decimal, generation: Optional[int] = None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug(f"[REVENUE] Dropped stale total for sector={sector} date={day}")
                return False
            self._entries[(sector, day)] = amount
            self._entries.move_to_end((sector, day))
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
            return True

    def invalidate(self, sector: str, day: date):
        with self._lock:
            self._generation += 1
            self._entries.pop((sector, day), None)
        logger.debug(f"[REVENUE] Cache invalidated for sector={sector} date={day}")

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, dtime.min)
    return start, start + timedelta(days=1)


def exit_events_for(db: Session, sector: str, day: date) -> list[ParkingEvent]:
    start, end = _day_bounds(day)
    return (
        db.query(ParkingEvent)
        .filter(
            ParkingEvent.sector == sector,
            ParkingEvent.event_type == EventType.EXIT,
            ParkingEvent.exit_time >= start,
            ParkingEvent.exit_time < end,
        )
        .order_by(ParkingEvent.id)
        .all()
    )


def _sum_amount(db: Session, *filters) -> Decimal:
    total = db.query(func.coalesce(func.sum(ParkingEvent.amount_charged), 0)).filter(
        ParkingEvent.event_type == EventType.EXIT, *filters
    ).scalar()
    return Decimal(str(total or 0)).quantize(CENTS)


def calculate_revenue(db: Session, sector: str, day: date,
                      cache: Optional[RevenueCache] = None) -> Decimal:
    """Total charged in `sector` on `day`. Unknown sectors yield 0.00."""
    if cache is not None:
        cached = cache.get(sector, day)
        if cached is not None:
            return cached
        generation = cache.generation

    started = time.perf_counter()
    if db.get(Sector, sector) is None:
        logger.warning(f"[REVENUE] Sector not found: {sector}")
        return Decimal("0.00")

    start, end = _day_bounds(day)
    amount = _sum_amount(
        db,
        ParkingEvent.sector == sector,
        ParkingEvent.exit_time >= start,
        ParkingEvent.exit_time < end,
    )
    metrics.REVENUE_LATENCY.observe(time.perf_counter() - started)
    logger.info(f"[REVENUE] Sector {sector} on {day}: {amount}")

    if cache is not None:
        cache.put(sector, day, amount, generation=generation)
    return amount


def calculate_daily_revenue(db: Session, day: date) -> Decimal:
    """Revenue across all sectors for one day (dashboard)."""
    start, end = _day_bounds(day)
    return _sum_amount(db, ParkingEvent.exit_time >= start, ParkingEvent.exit_time < end)
