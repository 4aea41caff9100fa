# garage/schemas/webhook_event.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from garage.models.parking_event import EventType


class WebhookEvent(BaseModel):
    """Vehicle event pushed by the garage simulator."""
    license_plate: str = Field(min_length=1)
    event_type: EventType
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    sector: Optional[str] = None   # target sector for ENTRY; inferred when omitted

    @field_validator("entry_time", "exit_time")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Timestamps are stored naive UTC; offsets like ...Z are converted, not dropped."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class ParkingEventOut(BaseModel):
    id: int
    license_plate: str
    sector: str
    event_type: EventType
    entry_time: Optional[datetime]
    exit_time: Optional[datetime]
    latitude: Optional[float]
    longitude: Optional[float]
    spot_id: Optional[int]
    price_applied: Optional[Decimal]
    occupancy_rate_at_entry: Optional[float]
    amount_charged: Optional[Decimal]
    created_at: datetime

    class Config:
        from_attributes = True
