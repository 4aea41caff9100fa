# garage/models/sector.py
"""
Sectors table — priced, capacity-bounded subdivisions of the garage.
Loaded once from the garage simulator (or seeded test data) at startup.
Occupancy is derived from parking_spots, never stored here.
"""

from sqlalchemy import Column, Integer, String, Numeric
from garage.database import Base


class Sector(Base):
    __tablename__ = "sectors"

    sector = Column(String(50), primary_key=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    max_capacity = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<Sector {self.sector} base_price={self.base_price} capacity={self.max_capacity}>"
