# garage/routers/monitoring.py
"""Operational dashboard and Prometheus scrape endpoint."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import date, datetime, time, timedelta

from garage.database import get_db
from garage.metrics import get_metrics
from garage.models.parking_event import ParkingEvent, EventType
from garage.services.occupancy_store import OccupancyStore
from garage.services.revenue_service import calculate_daily_revenue

router = APIRouter()


def _count_events(db: Session, event_type: EventType, column, day: date) -> int:
    start = datetime.combine(day, time.min)
    return db.query(func.count(ParkingEvent.id)).filter(
        ParkingEvent.event_type == event_type,
        column >= start,
        column < start + timedelta(days=1),
    ).scalar() or 0


@router.get("/monitoring/dashboard", summary="Live occupancy and today's activity")
def get_dashboard(target_date: date = None, db: Session = Depends(get_db)):
    day = target_date or date.today()
    store = OccupancyStore(db)
    total = store.total_spots()
    occupied = store.total_occupied()
    return {
        "timestamp": datetime.utcnow().isoformat(),
        "parking_status": {
            "total_spots": total,
            "occupied_spots": occupied,
            "available_spots": total - occupied,
            "occupancy_percent": round(occupied / total * 100, 2) if total else 0.0,
        },
        "activity": {
            "date": str(day),
            "entries": _count_events(db, EventType.ENTRY, ParkingEvent.entry_time, day),
            "exits": _count_events(db, EventType.EXIT, ParkingEvent.exit_time, day),
            "revenue": calculate_daily_revenue(db, day),
        },
    }


@router.get("/monitoring/metrics", summary="Prometheus metrics")
def prometheus_metrics():
    return Response(content=get_metrics(), media_type="text/plain; version=0.0.4; charset=utf-8")
