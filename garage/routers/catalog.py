# garage/routers/catalog.py
"""Garage layout and live sector occupancy."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from garage.database import get_db
from garage.schemas.garage_config import GarageConfig, SectorConfig, SpotConfig, SectorStatusOut, SpotOut
from garage.services.garage_catalog import GarageCatalog
from garage.services.occupancy_store import OccupancyStore
from garage.services.pricing_service import quote
from garage.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _sector_status(sector, store: OccupancyStore) -> SectorStatusOut:
    occupied = store.count_occupied(sector.sector)
    ratio = occupied / sector.max_capacity if sector.max_capacity else 0.0
    is_full = occupied >= sector.max_capacity
    return SectorStatusOut(
        sector=sector.sector,
        base_price=sector.base_price,
        max_capacity=sector.max_capacity,
        occupied_spots=occupied,
        available_spots=max(0, sector.max_capacity - occupied),
        occupancy_rate=round(ratio, 4),
        is_full=is_full,
        current_price=None if is_full else quote(sector.base_price, ratio),
    )


@router.get("/garage", response_model=GarageConfig, summary="Full garage configuration")
def get_garage_configuration(db: Session = Depends(get_db)):
    """Same shape as the simulator's garage payload."""
    catalog = GarageCatalog(db)
    return GarageConfig(
        garage=[SectorConfig(sector=s.sector, base_price=s.base_price, max_capacity=s.max_capacity)
                for s in catalog.sectors()],
        spots=[SpotConfig(id=p.id, sector=p.sector, lat=p.latitude, lng=p.longitude)
               for p in catalog.spots()],
    )


@router.get("/garage/sectors", response_model=list[SectorStatusOut])
def list_sectors(db: Session = Depends(get_db)):
    store = OccupancyStore(db)
    return [_sector_status(s, store) for s in GarageCatalog(db).sectors()]


@router.get("/garage/sectors/{sector}", response_model=SectorStatusOut)
def get_sector(sector: str, db: Session = Depends(get_db)):
    row = GarageCatalog(db).get_sector(sector)
    if not row:
        raise HTTPException(status_code=404, detail=f"Sector '{sector}' not found")
    return _sector_status(row, OccupancyStore(db))


@router.get("/garage/spots", response_model=list[SpotOut])
def list_spots(db: Session = Depends(get_db)):
    return GarageCatalog(db).spots()


@router.get("/garage/spots/sector/{sector}", response_model=list[SpotOut])
def list_sector_spots(sector: str, db: Session = Depends(get_db)):
    return GarageCatalog(db).spots(sector)


@router.get("/garage/status", summary="Occupancy summary per sector")
def get_garage_status(db: Session = Depends(get_db)):
    store = OccupancyStore(db)
    sectors = [_sector_status(s, store) for s in GarageCatalog(db).sectors()]
    return {
        "total_spots": store.total_spots(),
        "occupied_spots": store.total_occupied(),
        "sectors": sectors,
    }


@router.post("/garage/init-test-data", summary="Seed test sectors A-D when the simulator is unavailable")
def init_test_data(db: Session = Depends(get_db)):
    logger.info("Initializing test data...")
    GarageCatalog(db).create_test_data()
    return {"status": "ok", "detail": "Test data initialized successfully"}
