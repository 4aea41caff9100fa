# garage/services/locks.py
"""
Per-plate and per-sector mutual exclusion for the event processor.

Events for the same plate are serialized, and "find a free spot → occupy it"
in a sector is exclusive across concurrent ENTRY events. Lock order is always
plate first, then sector.
"""

import asyncio
import weakref
from contextlib import asynccontextmanager


class KeyedLocks:
    """One asyncio.Lock per key, dropped once nobody holds a reference."""

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: str):
        lock = self.get(key)
        async with lock:
            yield


class ParkingLocks:
    """Shared by every request of one application instance."""

    def __init__(self):
        self.plates = KeyedLocks()
        self.sectors = KeyedLocks()

    def plate(self, license_plate: str):
        return self.plates.hold(license_plate)

    def sector(self, sector_id: str):
        return self.sectors.hold(sector_id)
