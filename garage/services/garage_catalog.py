# garage/services/garage_catalog.py
"""
Garage Catalog — sectors (base price, capacity) and spots (sector, coordinates).

The catalog is loaded once at startup from the garage simulator
(GET {SIMULATOR_BASE_URL}{GARAGE_ENDPOINT}). If the simulator cannot be
reached, a deterministic test garage is seeded instead so the engine can
still accept events.
"""

from decimal import Decimal
from typing import Iterable, Optional

import httpx
from sqlalchemy.orm import Session

from garage.config import settings
from garage.exceptions import SectorNotFound
from garage.models.parking_spot import ParkingSpot
from garage.models.sector import Sector
from garage.schemas.garage_config import GarageConfig, SectorConfig, SpotConfig
from garage.utils.logger import get_logger

logger = get_logger(__name__)

TEST_SECTORS = {"A": Decimal("10.00"), "B": Decimal("12.00"), "C": Decimal("15.00"), "D": Decimal("8.00")}
TEST_SECTOR_CAPACITY = 100
TEST_ORIGIN = (-23.5505, -46.6333)   # São Paulo


class GarageCatalog:
    def __init__(self, db: Session):
        self.db = db

    # ── Reads ────────────────────────────────────────────────────────────
    def sectors(self) -> list[Sector]:
        return self.db.query(Sector).order_by(Sector.sector).all()

    def get_sector(self, sector_id: str) -> Optional[Sector]:
        return self.db.get(Sector, sector_id)

    def require_sector(self, sector_id: str) -> Sector:
        sector = self.get_sector(sector_id)
        if sector is None:
            raise SectorNotFound(f"Sector not found: {sector_id}")
        return sector

    def exists(self, sector_id: str) -> bool:
        return self.get_sector(sector_id) is not None

    def spots(self, sector_id: Optional[str] = None) -> list[ParkingSpot]:
        q = self.db.query(ParkingSpot)
        if sector_id is not None:
            q = q.filter(ParkingSpot.sector == sector_id)
        return q.order_by(ParkingSpot.id).all()

    def is_empty(self) -> bool:
        return self.db.query(Sector).first() is None

    # ── Loading ──────────────────────────────────────────────────────────
    def load_catalog(self, sectors: Iterable[SectorConfig], spots: Iterable[SpotConfig]):
        """
        Upsert sectors and spots. Existing spot occupancy is preserved so a
        reload after restart does not evict parked vehicles.
        """
        sectors = list(sectors)
        spots = list(spots)
        for s in sectors:
            row = self.get_sector(s.sector)
            if row is None:
                self.db.add(Sector(sector=s.sector, base_price=s.base_price, max_capacity=s.max_capacity))
            else:
                row.base_price = s.base_price
                row.max_capacity = s.max_capacity
        self.db.flush()

        known = {s.sector for s in self.sectors()}
        for spot in spots:
            if spot.sector not in known:
                raise SectorNotFound(f"Spot {spot.id} references unknown sector {spot.sector}")
            row = self.db.get(ParkingSpot, spot.id)
            if row is None:
                self.db.add(ParkingSpot(id=spot.id, sector=spot.sector, latitude=spot.lat,
                                        longitude=spot.lng, available=True, occupied_by=None))
            else:
                row.sector = spot.sector
                row.latitude = spot.lat
                row.longitude = spot.lng
        self.db.commit()
        logger.info(f"[CATALOG] Loaded {len(sectors)} sectors and {len(spots)} spots")

    def create_test_data(self):
        """Seed sectors A-D with 100 spots each, skipping anything already present."""
        logger.info("[CATALOG] Creating test garage data...")
        sectors = [SectorConfig(sector=name, base_price=price, max_capacity=TEST_SECTOR_CAPACITY)
                   for name, price in TEST_SECTORS.items() if not self.exists(name)]
        spots = []
        if self.db.query(ParkingSpot).first() is None:
            spot_id = 1
            for offset, name in enumerate(TEST_SECTORS):
                for i in range(TEST_SECTOR_CAPACITY):
                    spots.append(SpotConfig(
                        id=spot_id,
                        sector=name,
                        lat=round(TEST_ORIGIN[0] + offset * 0.001 + (i // 10) * 0.0001, 7),
                        lng=round(TEST_ORIGIN[1] + (i % 10) * 0.0001, 7),
                    ))
                    spot_id += 1
        self.load_catalog(sectors, spots)


async def fetch_garage_config(url: str, client: Optional[httpx.AsyncClient] = None) -> GarageConfig:
    """GET the garage layout from the simulator. Raises httpx errors on failure."""
    logger.info(f"[CATALOG] Fetching garage configuration from {url}")
    if client is None:
        async with httpx.AsyncClient(timeout=10) as own_client:
            response = await own_client.get(url)
    else:
        response = await client.get(url)
    response.raise_for_status()
    return GarageConfig.model_validate(response.json())


async def bootstrap_catalog(db: Session, client: Optional[httpx.AsyncClient] = None) -> bool:
    """
    Load the catalog from the simulator. Returns True when the simulator
    answered, False when test data was used (or nothing was loaded).
    """
    catalog = GarageCatalog(db)
    try:
        config = await fetch_garage_config(settings.GARAGE_URL, client)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"[CATALOG] Error loading garage configuration: {e}")
        db.rollback()
        if settings.CREATE_TEST_DATA_ON_FAILURE:
            logger.info("[CATALOG] Creating test data as fallback...")
            catalog.create_test_data()
        return False

    catalog.load_catalog(config.garage, config.spots)
    return True
