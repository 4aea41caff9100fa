# Garage Parking Engine: database models
# Import all models here for SQLAlchemy discovery

from garage.models.sector import Sector                            # noqa
from garage.models.parking_spot import ParkingSpot                 # noqa
from garage.models.parking_event import ParkingEvent, EventType   # noqa
