# garage/services/occupancy_store.py
"""
Current assignment of spots to vehicles, backed by the parking_spots table.
Answers "is this plate parked", "is this spot free" and "how full is this sector".

Mutations only touch the session; the caller owns commit/rollback so that a
failed event never leaves a half-occupied spot behind.
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from garage.exceptions import SpotAlreadyOccupied
from garage.models.parking_spot import ParkingSpot
from garage.models.sector import Sector
from garage.utils.logger import get_logger

logger = get_logger(__name__)


class OccupancyStore:
    def __init__(self, db: Session):
        self.db = db

    # ── Vehicle lookups ──────────────────────────────────────────────────
    def spots_of(self, license_plate: str) -> list[ParkingSpot]:
        return (
            self.db.query(ParkingSpot)
            .filter(ParkingSpot.occupied_by == license_plate, ParkingSpot.available == False)  # noqa: E712
            .order_by(ParkingSpot.id)
            .all()
        )

    def spot_of(self, license_plate: str) -> Optional[ParkingSpot]:
        """The spot held by a plate; the lowest id if it (wrongly) holds several."""
        return (
            self.db.query(ParkingSpot)
            .filter(ParkingSpot.occupied_by == license_plate, ParkingSpot.available == False)  # noqa: E712
            .order_by(ParkingSpot.id)
            .first()
        )

    def is_occupied(self, license_plate: str) -> bool:
        return self.spot_of(license_plate) is not None

    # ── Spot lookups ─────────────────────────────────────────────────────
    def first_free_spot(self, sector: str) -> Optional[ParkingSpot]:
        return (
            self.db.query(ParkingSpot)
            .filter(ParkingSpot.sector == sector, ParkingSpot.available == True)  # noqa: E712
            .order_by(ParkingSpot.id)
            .first()
        )

    def nearest_free_spot(self, lat: float, lng: float, sectors=None) -> Optional[ParkingSpot]:
        """Closest free spot to a coordinate (planar distance, ties by id)."""
        q = self.db.query(ParkingSpot).filter(ParkingSpot.available == True)  # noqa: E712
        if sectors is not None:
            q = q.filter(ParkingSpot.sector.in_(list(sectors)))
        distance = (
            (ParkingSpot.latitude - lat) * (ParkingSpot.latitude - lat)
            + (ParkingSpot.longitude - lng) * (ParkingSpot.longitude - lng)
        )
        return q.order_by(distance, ParkingSpot.id).first()

    # ── Mutations ────────────────────────────────────────────────────────
    def occupy(self, spot: ParkingSpot, license_plate: str):
        if not spot.available or spot.occupied_by is not None:
            raise SpotAlreadyOccupied(f"Spot {spot.id} is already occupied by {spot.occupied_by}")
        spot.occupy(license_plate)
        self.db.flush()

    def release(self, spot: ParkingSpot):
        if spot.available and spot.occupied_by is None:
            return
        spot.release()
        self.db.flush()

    # ── Counters ─────────────────────────────────────────────────────────
    def count_occupied(self, sector: str) -> int:
        return (
            self.db.query(func.count(ParkingSpot.id))
            .filter(ParkingSpot.sector == sector, ParkingSpot.available == False)  # noqa: E712
            .scalar()
        ) or 0

    def capacity(self, sector: str) -> int:
        return self.db.query(Sector.max_capacity).filter(Sector.sector == sector).scalar() or 0

    def occupancy_ratio(self, sector: str) -> float:
        capacity = self.capacity(sector)
        if not capacity:
            return 0.0
        return self.count_occupied(sector) / capacity

    def is_full(self, sector: str) -> bool:
        return self.count_occupied(sector) >= self.capacity(sector)

    def total_spots(self) -> int:
        return self.db.query(func.count(ParkingSpot.id)).scalar() or 0

    def total_occupied(self) -> int:
        return (
            self.db.query(func.count(ParkingSpot.id))
            .filter(ParkingSpot.available == False)  # noqa: E712
            .scalar()
        ) or 0

    def unique_plates_parked(self) -> int:
        return (
            self.db.query(func.count(func.distinct(ParkingSpot.occupied_by)))
            .filter(ParkingSpot.available == False, ParkingSpot.occupied_by != None)  # noqa: E711,E712
            .scalar()
        ) or 0

    def plates_with_multiple_spots(self) -> list[str]:
        rows = (
            self.db.query(ParkingSpot.occupied_by)
            .filter(ParkingSpot.available == False, ParkingSpot.occupied_by != None)  # noqa: E711,E712
            .group_by(ParkingSpot.occupied_by)
            .having(func.count(ParkingSpot.id) > 1)
            .order_by(ParkingSpot.occupied_by)
            .all()
        )
        return [row[0] for row in rows]
