# tests/test_consistency_auditor.py
"""Plates holding more than one spot: detection and repair."""

import pytest

from garage.models.parking_spot import ParkingSpot
from garage.services.consistency_auditor import ConsistencyAuditor
from garage.services.occupancy_store import OccupancyStore


def force_occupy(db, spot_id, plate):
    """Bypass the store to plant duplicate holders."""
    db.get(ParkingSpot, spot_id).occupy(plate)
    db.commit()


@pytest.fixture
def auditor(db, locks, load_garage):
    load_garage({"A": ("10.00", 3), "B": ("12.00", 3)})
    return ConsistencyAuditor(OccupancyStore(db), locks)


class TestConsistencyAuditor:
    def test_clean_garage_reports_nothing(self, auditor, db):
        force_occupy(db, 1, "ABC1234")
        report = auditor.report()
        assert report.has_inconsistencies is False
        assert report.vehicles_with_multiple_spots == 0
        assert report.total_occupied_spots == 1
        assert report.unique_vehicles_parked == 1

    def test_report_lists_duplicate_holders(self, auditor, db):
        force_occupy(db, 2, "DUP0001")
        force_occupy(db, 5, "DUP0001")
        force_occupy(db, 3, "ABC1234")

        report = auditor.report()

        assert report.has_inconsistencies is True
        assert report.vehicles_with_multiple_spots_list == ["DUP0001"]
        assert report.total_occupied_spots == 3
        assert report.unique_vehicles_parked == 2

    @pytest.mark.asyncio
    async def test_repair_keeps_lowest_spot(self, auditor, db):
        for spot_id in (6, 2, 4):
            force_occupy(db, spot_id, "DUP0001")
        force_occupy(db, 1, "ABC1234")

        result = await auditor.repair()

        assert result.cleanup_completed
        assert sorted(result.released_spots) == [4, 6]
        assert result.before_cleanup.has_inconsistencies
        assert not result.after_cleanup.has_inconsistencies
        assert result.after_cleanup.total_occupied_spots == 2
        assert db.get(ParkingSpot, 2).occupied_by == "DUP0001"
        assert db.get(ParkingSpot, 4).available is True
        assert db.get(ParkingSpot, 1).occupied_by == "ABC1234"

    @pytest.mark.asyncio
    async def test_repair_on_clean_data_is_noop(self, auditor, db):
        force_occupy(db, 1, "ABC1234")
        result = await auditor.repair()
        assert result.released_spots == []
        assert result.before_cleanup == result.after_cleanup
