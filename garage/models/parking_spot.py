# garage/models/parking_spot.py
"""
Parking spots table — one row per physical space.
`available` and `occupied_by` always move together: a spot is taken
exactly when it carries the plate of the vehicle occupying it.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey
from garage.database import Base


class ParkingSpot(Base):
    __tablename__ = "parking_spots"

    id = Column(Integer, primary_key=True, autoincrement=False)
    sector = Column(String(50), ForeignKey("sectors.sector"), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    available = Column(Boolean, default=True, nullable=False, index=True)
    occupied_by = Column(String(50), index=True)   # license plate, NULL when free

    def occupy(self, license_plate: str):
        self.available = False
        self.occupied_by = license_plate

    def release(self):
        self.available = True
        self.occupied_by = None

    def __repr__(self):
        return f"<ParkingSpot {self.id} sector={self.sector} occupied_by={self.occupied_by}>"
