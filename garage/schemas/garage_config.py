# garage/schemas/garage_config.py
"""Garage layout as served by the simulator's GET /garage endpoint."""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional


class SectorConfig(BaseModel):
    sector: str
    base_price: Decimal = Field(alias="basePrice", gt=0)
    max_capacity: int = Field(gt=0)

    class Config:
        populate_by_name = True


class SpotConfig(BaseModel):
    id: int
    sector: str
    lat: float
    lng: float


class GarageConfig(BaseModel):
    garage: list[SectorConfig] = []
    spots: list[SpotConfig] = []


class SectorStatusOut(BaseModel):
    sector: str
    base_price: Decimal
    max_capacity: int
    occupied_spots: int
    available_spots: int
    occupancy_rate: float
    is_full: bool
    current_price: Optional[Decimal] = None   # rate a vehicle entering now would lock in


class SpotOut(BaseModel):
    id: int
    sector: str
    latitude: float
    longitude: float
    available: bool
    occupied_by: Optional[str]

    class Config:
        from_attributes = True
