# scripts/setup/init_db.py
"""
Initialize database — creates all tables and loads the garage catalog.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--test-data]
"""

import sys
import os
import asyncio
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from garage.database import create_tables, engine, SessionLocal
from garage.config import settings
from garage.services.garage_catalog import GarageCatalog, bootstrap_catalog
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Create tables and load the garage catalog")
    parser.add_argument("--test-data", action="store_true",
                        help="Seed sectors A-D instead of calling the simulator")
    args = parser.parse_args()

    print("🗄️  Garage DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = SessionLocal()
    try:
        if args.test_data:
            GarageCatalog(db).create_test_data()
            print("\n🅿️  Test garage seeded (sectors A-D)")
        else:
            print(f"\n🅿️  Loading garage from {settings.GARAGE_URL} ...")
            loaded = asyncio.run(bootstrap_catalog(db))
            print("✅ Catalog loaded from simulator" if loaded else "⚠️  Simulator unavailable — test data used")
        catalog = GarageCatalog(db)
        print(f"   {len(catalog.sectors())} sectors, {len(catalog.spots())} spots")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn garage.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
