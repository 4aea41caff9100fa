# garage/models/parking_event.py
"""
Parking event ledger — one row per processed ENTRY / PARKED / EXIT webhook.
Rows are append-only: revenue and audits are derived from them, so any
attempt to update or delete a persisted row is rejected at flush time.
"""

import enum

from sqlalchemy import Column, Integer, String, DateTime, Float, Numeric, Enum, event
from garage.database import Base


class EventType(str, enum.Enum):
    ENTRY = "ENTRY"
    PARKED = "PARKED"
    EXIT = "EXIT"


class ParkingEvent(Base):
    __tablename__ = "parking_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_plate = Column(String(50), nullable=False, index=True)
    sector = Column(String(50), nullable=False, index=True)
    event_type = Column(Enum(EventType, name="event_type"), nullable=False, index=True)
    entry_time = Column(DateTime)                       # ENTRY / EXIT
    exit_time = Column(DateTime, index=True)            # EXIT only
    latitude = Column(Float)                            # PARKED only
    longitude = Column(Float)
    spot_id = Column(Integer)
    price_applied = Column(Numeric(10, 2))              # hourly rate locked at entry
    occupancy_rate_at_entry = Column(Float)
    amount_charged = Column(Numeric(10, 2))             # EXIT only
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ParkingEvent {self.id} {self.event_type} plate={self.license_plate} sector={self.sector}>"


class ImmutableEventError(RuntimeError):
    pass


@event.listens_for(ParkingEvent, "before_update")
def _reject_update(mapper, connection, target):
    raise ImmutableEventError(f"Parking event {target.id} is immutable")


@event.listens_for(ParkingEvent, "before_delete")
def _reject_delete(mapper, connection, target):
    raise ImmutableEventError(f"Parking event {target.id} cannot be deleted")
