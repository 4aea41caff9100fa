# garage/services/consistency_auditor.py
"""
Detects and repairs plates holding more than one spot.

The event processor never creates such data on its own; finding any means
some writer bypassed the plate/sector locks. Repair keeps the lowest spot id
per plate and releases the rest, under the same locks as live processing.
"""

from garage.schemas.consistency import ConsistencyReport, CleanupResult
from garage.services.locks import ParkingLocks
from garage.services.occupancy_store import OccupancyStore
from garage.utils.logger import get_logger

logger = get_logger(__name__)


class ConsistencyAuditor:
    def __init__(self, store: OccupancyStore, locks: ParkingLocks):
        self.store = store
        self.locks = locks

    def report(self) -> ConsistencyReport:
        plates = self.store.plates_with_multiple_spots()
        return ConsistencyReport(
            vehicles_with_multiple_spots=len(plates),
            vehicles_with_multiple_spots_list=plates,
            total_occupied_spots=self.store.total_occupied(),
            unique_vehicles_parked=self.store.unique_plates_parked(),
            has_inconsistencies=bool(plates),
        )

    async def repair(self) -> CleanupResult:
        logger.info("[AUDIT] Starting cleanup of inconsistent parking data")
        before = self.report()
        released = []
        db = self.store.db

        for plate in before.vehicles_with_multiple_spots_list:
            async with self.locks.plate(plate):
                spots = self.store.spots_of(plate)
                if len(spots) <= 1:
                    continue
                keep, extras = spots[0], spots[1:]
                logger.warning(f"[AUDIT] Vehicle {plate} holds {len(spots)} spots, keeping {keep.id}")
                for spot in extras:
                    async with self.locks.sector(spot.sector):
                        self.store.release(spot)
                    released.append(spot.id)
                    logger.info(f"[AUDIT] Released duplicate spot {spot.id} for vehicle {plate}")
                db.commit()

        after = self.report()
        logger.info(f"[AUDIT] Cleanup completed — released {len(released)} spot(s)")
        return CleanupResult(before_cleanup=before, after_cleanup=after, released_spots=released)
