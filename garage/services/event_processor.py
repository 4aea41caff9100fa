# garage/services/event_processor.py
"""
Event Processor — turns ENTRY / PARKED / EXIT webhooks into spot allocations,
price quotes and charges.

Per plate the lifecycle is ABSENT → OCCUPYING (ENTRY) → ABSENT (EXIT);
PARKED only refreshes the spot coordinates while OCCUPYING.

  - ENTRY: plate must not hold a spot. The target sector must exist, not be
    full and have a free spot. The rate is quoted from the occupancy ratio
    *before* the vehicle is admitted and stored on the ENTRY record.
  - PARKED: plate must hold a spot, otherwise the event is logged and ignored.
  - EXIT: plate must hold a spot and have an ENTRY record with an entry time.
    The most recent ENTRY's rate is billed; full sectors never block exits.

Precondition failures raise a ParkingError and leave nothing behind: the
session is rolled back and no event record is written.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from garage import metrics
from garage.config import settings
from garage.exceptions import (
    ErrorKind, ParkingError, VehicleAlreadyParked, NoAvailableSpots, VehicleNotParked,
)
from garage.models.parking_event import ParkingEvent, EventType
from garage.models.parking_spot import ParkingSpot
from garage.schemas.webhook_event import WebhookEvent
from garage.services import billing_service, pricing_service
from garage.services.garage_catalog import GarageCatalog
from garage.services.locks import ParkingLocks
from garage.services.occupancy_store import OccupancyStore
from garage.services.revenue_service import RevenueCache
from garage.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ProcessResult:
    ok: bool
    record: Optional[ParkingEvent] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None


class EventProcessor:
    def __init__(self, db: Session, store: OccupancyStore, catalog: GarageCatalog,
                 locks: ParkingLocks, revenue_cache: Optional[RevenueCache] = None,
                 default_sector: Optional[str] = None):
        self.db = db
        self.store = store
        self.catalog = catalog
        self.locks = locks
        self.revenue_cache = revenue_cache
        self.default_sector = default_sector if default_sector is not None else settings.DEFAULT_SECTOR

    # ── Public API ───────────────────────────────────────────────────────
    async def process_event(self, event: WebhookEvent) -> ProcessResult:
        """Like handle(), but expected failures come back as a tagged result."""
        try:
            record = await self.handle(event)
        except ParkingError as e:
            return ProcessResult(ok=False, error=e.kind, message=e.message)
        return ProcessResult(ok=True, record=record)

    async def handle(self, event: WebhookEvent) -> Optional[ParkingEvent]:
        logger.info(f"Processing event: type={event.event_type.value} plate={event.license_plate}")
        started = time.perf_counter()
        try:
            async with self.locks.plate(event.license_plate):
                if event.event_type is EventType.ENTRY:
                    record = await self._process_entry(event)
                elif event.event_type is EventType.PARKED:
                    record = self._process_parked(event)
                elif event.event_type is EventType.EXIT:
                    record = await self._process_exit(event)
                else:
                    raise ValueError(f"Unhandled event type: {event.event_type}")
        except ParkingError as e:
            self.db.rollback()
            metrics.record_event_failed(event.event_type.value, e.kind.value)
            logger.warning(f"[{event.event_type.value}] Rejected plate={event.license_plate}: {e.message}")
            raise
        except Exception:
            self.db.rollback()
            metrics.record_event_failed(event.event_type.value, "INTERNAL")
            logger.error(f"Error processing event for plate={event.license_plate}", exc_info=True)
            raise
        finally:
            metrics.WEBHOOK_LATENCY.observe(time.perf_counter() - started)

        metrics.record_event_processed(event.event_type.value)
        return record

    # ── ENTRY ────────────────────────────────────────────────────────────
    async def _process_entry(self, event: WebhookEvent) -> ParkingEvent:
        plate = event.license_plate
        held = self.store.spots_of(plate)
        if held:
            logger.warning(f"[ENTRY] Vehicle {plate} is already parked in {len(held)} spot(s)")
            raise VehicleAlreadyParked(f"Vehicle {plate} is already parked")

        sector_id = self._target_sector(event)
        async with self.locks.sector(sector_id):
            sector = self.catalog.require_sector(sector_id)
            if self.store.is_full(sector_id):
                raise NoAvailableSpots(f"Sector {sector_id} is full")

            spot = self._pick_spot(event, sector_id)
            if spot is None:
                raise NoAvailableSpots("No available parking spots")

            occupancy_rate = self.store.occupancy_ratio(sector_id)
            price = pricing_service.quote(sector.base_price, occupancy_rate)
            entry_time = event.entry_time or datetime.utcnow()

            self.store.occupy(spot, plate)
            record = ParkingEvent(
                license_plate=plate,
                sector=sector_id,
                event_type=EventType.ENTRY,
                entry_time=entry_time,
                spot_id=spot.id,
                price_applied=price,
                occupancy_rate_at_entry=occupancy_rate,
                created_at=datetime.utcnow(),
            )
            self.db.add(record)
            self.db.commit()

        metrics.record_entry(sector_id)
        self._after_change(sector_id, entry_time.date())
        logger.info(f"[ENTRY] Vehicle {plate} occupied spot {spot.id} in sector {sector_id} "
                    f"at {price}/h (occupancy {occupancy_rate:.0%})")
        return record

    def _target_sector(self, event: WebhookEvent) -> str:
        """
        Explicit sector → nearest free spot to the event coordinates →
        configured default → first sector (by id) that still has room.
        """
        if event.sector:
            return event.sector

        open_sectors = [s.sector for s in self.catalog.sectors() if not self.store.is_full(s.sector)]
        if event.lat is not None and event.lng is not None and open_sectors:
            spot = self.store.nearest_free_spot(event.lat, event.lng, sectors=open_sectors)
            if spot is not None:
                return spot.sector

        if self.default_sector:
            return self.default_sector

        for sector_id in open_sectors:
            if self.store.first_free_spot(sector_id) is not None:
                return sector_id
        raise NoAvailableSpots("No available parking spots")

    def _pick_spot(self, event: WebhookEvent, sector_id: str) -> Optional[ParkingSpot]:
        if event.lat is not None and event.lng is not None:
            return self.store.nearest_free_spot(event.lat, event.lng, sectors=[sector_id])
        return self.store.first_free_spot(sector_id)

    # ── PARKED ───────────────────────────────────────────────────────────
    def _process_parked(self, event: WebhookEvent) -> Optional[ParkingEvent]:
        plate = event.license_plate
        spot = self.store.spot_of(plate)
        if spot is None:
            logger.warning(f"[PARKED] No occupied spot found for plate {plate} — ignored")
            return None

        if event.lat is not None and event.lng is not None:
            spot.latitude = event.lat
            spot.longitude = event.lng

        record = ParkingEvent(
            license_plate=plate,
            sector=spot.sector,
            event_type=EventType.PARKED,
            latitude=event.lat,
            longitude=event.lng,
            spot_id=spot.id,
            created_at=datetime.utcnow(),
        )
        self.db.add(record)
        self.db.commit()
        logger.info(f"[PARKED] Vehicle {plate} parked at ({event.lat}, {event.lng}) in spot {spot.id}")
        return record

    # ── EXIT ─────────────────────────────────────────────────────────────
    def latest_entry(self, license_plate: str) -> Optional[ParkingEvent]:
        return (
            self.db.query(ParkingEvent)
            .filter(
                ParkingEvent.license_plate == license_plate,
                ParkingEvent.event_type == EventType.ENTRY,
                ParkingEvent.entry_time != None,  # noqa: E711
            )
            .order_by(ParkingEvent.id.desc())
            .first()
        )

    async def _process_exit(self, event: WebhookEvent) -> ParkingEvent:
        plate = event.license_plate
        spot = self.store.spot_of(plate)
        if spot is None:
            raise VehicleNotParked("Vehicle not found in parking")

        entry = self.latest_entry(plate)
        if entry is None:
            raise VehicleNotParked("No entry event found for vehicle")

        entry_time, exit_time = entry.entry_time, event.exit_time
        if entry_time is None or exit_time is None:
            raise VehicleNotParked("Invalid entry or exit time")
        if exit_time < entry_time:
            raise VehicleNotParked(f"Exit time {exit_time} is before entry time {entry_time}")

        rate = Decimal(str(entry.price_applied))
        amount = billing_service.charge(entry_time, exit_time, rate)
        sector_id = spot.sector

        async with self.locks.sector(sector_id):
            self.store.release(spot)
            record = ParkingEvent(
                license_plate=plate,
                sector=sector_id,
                event_type=EventType.EXIT,
                entry_time=entry_time,
                exit_time=exit_time,
                spot_id=spot.id,
                price_applied=rate,
                occupancy_rate_at_entry=entry.occupancy_rate_at_entry,
                amount_charged=amount,
                created_at=datetime.utcnow(),
            )
            self.db.add(record)
            self.db.commit()

        metrics.record_exit(sector_id, float(amount))
        self._after_change(sector_id, exit_time.date())
        minutes = billing_service.elapsed_minutes(entry_time, exit_time)
        logger.info(f"[EXIT] Vehicle {plate} left spot {spot.id} and paid {amount} for {minutes} minutes")
        return record

    # ── Side effects ─────────────────────────────────────────────────────
    def _after_change(self, sector_id: str, day):
        try:
            metrics.update_occupancy(self.store.total_occupied(), self.store.total_spots())
            metrics.update_sector_occupancy(sector_id, self.store.occupancy_ratio(sector_id))
        except Exception as e:
            logger.warning(f"Failed to update occupancy metrics: {e}")
        self.invalidate_revenue_cache(sector_id, day)

    def invalidate_revenue_cache(self, sector_id: str, day):
        if self.revenue_cache is None:
            return
        try:
            self.revenue_cache.invalidate(sector_id, day)
        except Exception as e:
            logger.error(f"[REVENUE] Error invalidating cache for {sector_id}/{day}: {e}")
