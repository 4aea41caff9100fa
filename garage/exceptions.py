# garage/exceptions.py
"""
Expected, user-correctable failures raised by the event processor.
Each carries an ErrorKind tag so callers can map it to a response
without matching on exception classes or message text.
"""

import enum


class ErrorKind(str, enum.Enum):
    VEHICLE_ALREADY_PARKED = "VEHICLE_ALREADY_PARKED"
    NO_AVAILABLE_SPOTS = "NO_AVAILABLE_SPOTS"
    VEHICLE_NOT_PARKED = "VEHICLE_NOT_PARKED"
    SECTOR_NOT_FOUND = "SECTOR_NOT_FOUND"


class ParkingError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class VehicleAlreadyParked(ParkingError):
    kind = ErrorKind.VEHICLE_ALREADY_PARKED


class NoAvailableSpots(ParkingError):
    kind = ErrorKind.NO_AVAILABLE_SPOTS


class SpotAlreadyOccupied(NoAvailableSpots):
    """A specific spot was claimed while it already had an occupant."""


class VehicleNotParked(ParkingError):
    kind = ErrorKind.VEHICLE_NOT_PARKED


class SectorNotFound(ParkingError):
    kind = ErrorKind.SECTOR_NOT_FOUND
