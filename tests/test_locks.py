# tests/test_locks.py
"""Plate and sector locks: events wait for the holder and other keys are unaffected."""

import asyncio
import pytest

from conftest import entry, exit_
from garage.models.parking_spot import ParkingSpot
from garage.services.locks import KeyedLocks
from garage.services.occupancy_store import OccupancyStore


async def settle(rounds=5):
    for _ in range(rounds):
        await asyncio.sleep(0)


class TestKeyedLocks:
    @pytest.mark.asyncio
    async def test_same_key_waits_for_holder(self):
        locks = KeyedLocks()
        order = []

        async def second():
            async with locks.hold("ABC1234"):
                order.append("second")

        async with locks.hold("ABC1234"):
            task = asyncio.create_task(second())
            await settle()
            assert not task.done()
            order.append("first")
        await task
        assert order == ["first", "second"]

    @pytest.mark.asyncio
    async def test_other_key_not_blocked(self):
        locks = KeyedLocks()
        async with locks.hold("ABC1234"):
            async with locks.hold("XYZ9876"):
                assert locks.get("ABC1234").locked()
                assert locks.get("XYZ9876").locked()

    def test_lock_shared_while_referenced(self):
        locks = KeyedLocks()
        lock = locks.get("A")
        assert locks.get("A") is lock
        assert locks.get("B") is not lock


class TestProcessorLocking:
    @pytest.mark.asyncio
    async def test_entry_waits_for_plate_lock(self, db, load_garage, locks, processor):
        load_garage({"A": ("10.00", 4)})

        async with locks.plate("ABC1234"):
            task = asyncio.create_task(processor.handle(entry("ABC1234", sector="A")))
            await settle()
            assert not task.done()
            assert not OccupancyStore(db).is_occupied("ABC1234")

        record = await task
        assert record.spot_id == 1

    @pytest.mark.asyncio
    async def test_entry_waits_for_sector_lock(self, db, load_garage, locks, processor):
        load_garage({"A": ("10.00", 4)})

        async with locks.sector("A"):
            task = asyncio.create_task(processor.handle(entry("P1", sector="A")))
            await settle()
            assert not task.done()
            assert OccupancyStore(db).count_occupied("A") == 0

        await task
        assert OccupancyStore(db).count_occupied("A") == 1

    @pytest.mark.asyncio
    async def test_exit_waits_for_sector_lock(self, db, load_garage, locks, processor):
        load_garage({"A": ("10.00", 4)})
        await processor.handle(entry("ABC1234", sector="A"))

        async with locks.sector("A"):
            task = asyncio.create_task(processor.handle(exit_("ABC1234")))
            await settle()
            assert not task.done()
            assert db.get(ParkingSpot, 1).occupied_by == "ABC1234"

        await task
        assert db.get(ParkingSpot, 1).available is True

    @pytest.mark.asyncio
    async def test_other_plate_proceeds_while_one_is_held(self, db, load_garage, locks, processor):
        load_garage({"A": ("10.00", 4)})

        async with locks.plate("ABC1234"):
            record = await asyncio.wait_for(processor.handle(entry("XYZ9876", sector="A")), timeout=1)
            assert record.license_plate == "XYZ9876"
