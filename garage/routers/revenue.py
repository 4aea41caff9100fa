# garage/routers/revenue.py
"""Revenue per sector and day — GET with query params or POST with a JSON body."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date, datetime
from typing import Optional

from garage.config import settings
from garage.database import get_db
from garage.dependencies import get_revenue_cache
from garage.schemas.revenue import RevenueRequest, RevenueOut
from garage.services.revenue_service import RevenueCache, calculate_revenue

router = APIRouter()


def _revenue(db: Session, sector: str, day: date, cache: Optional[RevenueCache]) -> RevenueOut:
    if not settings.REVENUE_CACHE_ENABLED:
        cache = None
    amount = calculate_revenue(db, sector, day, cache=cache)
    return RevenueOut(amount=amount, currency=settings.CURRENCY, timestamp=datetime.utcnow())


@router.get("/revenue", response_model=RevenueOut, summary="Revenue for a sector on a date")
def get_revenue(date: date, sector: str, db: Session = Depends(get_db),
                cache: Optional[RevenueCache] = Depends(get_revenue_cache)):
    """Sum of amounts charged on EXIT events. Unknown sectors return 0."""
    return _revenue(db, sector, date, cache)


@router.post("/revenue", response_model=RevenueOut, summary="Revenue for a sector on a date (JSON body)")
def post_revenue(body: RevenueRequest, db: Session = Depends(get_db),
                 cache: Optional[RevenueCache] = Depends(get_revenue_cache)):
    return _revenue(db, body.sector, body.date, cache)
