# garage/dependencies.py
"""
FastAPI dependencies wiring the per-request session into the engine objects.
Locks and the revenue cache are created once per app (see main.py) and
shared by every request.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from garage.database import get_db
from garage.services.consistency_auditor import ConsistencyAuditor
from garage.services.event_processor import EventProcessor
from garage.services.garage_catalog import GarageCatalog
from garage.services.locks import ParkingLocks
from garage.services.occupancy_store import OccupancyStore
from garage.services.revenue_service import RevenueCache


def get_locks(request: Request) -> ParkingLocks:
    return request.app.state.locks


def get_revenue_cache(request: Request) -> Optional[RevenueCache]:
    return request.app.state.revenue_cache


def get_event_processor(db: Session = Depends(get_db),
                        locks: ParkingLocks = Depends(get_locks),
                        cache: Optional[RevenueCache] = Depends(get_revenue_cache)) -> EventProcessor:
    return EventProcessor(db, OccupancyStore(db), GarageCatalog(db), locks, revenue_cache=cache)


def get_auditor(db: Session = Depends(get_db),
                locks: ParkingLocks = Depends(get_locks)) -> ConsistencyAuditor:
    return ConsistencyAuditor(OccupancyStore(db), locks)
