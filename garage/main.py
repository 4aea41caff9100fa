# garage/main.py
"""
FastAPI application entry point.
Includes middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from garage.routers import webhook, revenue, catalog, admin, monitoring, health
from garage.database import create_tables, SessionLocal
from garage.config import settings
from garage.services.garage_catalog import bootstrap_catalog
from garage.services.locks import ParkingLocks
from garage.services.revenue_service import RevenueCache
from garage.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Garage Parking Engine API",
    description="Vehicle event processing, dynamic pricing and billing for multi-sector garages.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Shared across requests: plate/sector locks and the revenue cache
app.state.locks = ParkingLocks()
app.state.revenue_cache = RevenueCache()

# ── CORS (dashboard runs on a different origin) ──────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(webhook.router,    prefix="/api/v1", tags=["📡 Webhook"])
app.include_router(revenue.router,    prefix="/api/v1", tags=["💰 Revenue"])
app.include_router(catalog.router,    prefix="/api/v1", tags=["🅿️  Garage"])
app.include_router(admin.router,      prefix="/api/v1", tags=["🛠  Admin"])
app.include_router(monitoring.router, prefix="/api/v1", tags=["📊 Monitoring"])
app.include_router(health.router,     prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Garage backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    if settings.LOAD_GARAGE_ON_STARTUP:
        db = SessionLocal()
        try:
            loaded = await bootstrap_catalog(db)
        finally:
            db.close()
        logger.info("🅿️  Garage catalog loaded from simulator" if loaded
                    else "⚠️  Simulator unavailable — running on test garage data")

    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Garage backend shutting down...")
