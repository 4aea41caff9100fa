# garage/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + garage catalog + simulator reachability.
"""

import time
import requests
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from garage.database import get_db
from garage.config import settings
from garage.services.occupancy_store import OccupancyStore
from garage.services.garage_catalog import GarageCatalog
from datetime import datetime

router = APIRouter()

_STARTED = time.monotonic()


def format_uptime(seconds: float) -> str:
    """e.g. "1d 5h 20m", "2h 30m", "45m", "0m"."""
    minutes_total = int(seconds // 60)
    days, rem = divmod(minutes_total, 24 * 60)
    hours, minutes = divmod(rem, 60)
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours or days:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    return " ".join(parts)


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status and uptime
    - Database connectivity and catalog size
    - Garage simulator reachability
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "uptime": format_uptime(time.monotonic() - _STARTED),
        "backend": "ok",
        "database": "unknown",
        "catalog": {},
        "simulator": "unknown",
    }

    # Check database
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
        result["catalog"] = {
            "sectors": len(GarageCatalog(db).sectors()),
            "spots": OccupancyStore(db).total_spots(),
        }
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    # Ping the garage simulator
    try:
        resp = requests.get(settings.GARAGE_URL, timeout=3)
        result["simulator"] = "ok" if resp.status_code == 200 else f"http_{resp.status_code}"
    except requests.exceptions.ConnectionError:
        result["simulator"] = "unreachable"
    except requests.exceptions.RequestException as e:
        result["simulator"] = f"error: {str(e)}"

    return result
