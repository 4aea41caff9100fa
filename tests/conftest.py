# tests/conftest.py
"""Shared fixtures: in-memory SQLite database, garage loader, event processor."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOAD_GARAGE_ON_STARTUP", "false")

import pytest
from datetime import datetime
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from garage.database import create_tables
from garage.models.parking_event import EventType
from garage.schemas.garage_config import SectorConfig, SpotConfig
from garage.schemas.webhook_event import WebhookEvent
from garage.services.event_processor import EventProcessor
from garage.services.garage_catalog import GarageCatalog
from garage.services.locks import ParkingLocks
from garage.services.occupancy_store import OccupancyStore
from garage.services.revenue_service import RevenueCache


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def load_garage(db):
    """
    load_garage({"A": ("10.00", 4)}) → sector A at 10.00/h, capacity 4 and,
    unless `spots` says otherwise, one spot per unit of capacity.
    Spot ids run 1..n in sector order; sector index i sits at lat -23.0 - i.
    """
    def _load(sectors: dict, spots: dict = None):
        spots = spots or {}
        sector_rows, spot_rows = [], []
        spot_id = 1
        for index, (name, (price, capacity)) in enumerate(sectors.items()):
            sector_rows.append(SectorConfig(sector=name, base_price=Decimal(price), max_capacity=capacity))
            for i in range(spots.get(name, capacity)):
                spot_rows.append(SpotConfig(id=spot_id, sector=name, lat=-23.0 - index, lng=-46.0 - i * 0.0001))
                spot_id += 1
        GarageCatalog(db).load_catalog(sector_rows, spot_rows)
    return _load


@pytest.fixture
def locks():
    return ParkingLocks()


@pytest.fixture
def revenue_cache():
    return RevenueCache()


@pytest.fixture
def processor(db, locks, revenue_cache):
    return EventProcessor(db, OccupancyStore(db), GarageCatalog(db), locks, revenue_cache=revenue_cache)


def entry(plate, at=None, **kwargs):
    return WebhookEvent(license_plate=plate, event_type=EventType.ENTRY,
                        entry_time=at or datetime(2025, 1, 1, 10, 0), **kwargs)


def parked(plate, lat=None, lng=None):
    return WebhookEvent(license_plate=plate, event_type=EventType.PARKED, lat=lat, lng=lng)


def exit_(plate, at=None):
    return WebhookEvent(license_plate=plate, event_type=EventType.EXIT,
                        exit_time=at or datetime(2025, 1, 1, 11, 0))
