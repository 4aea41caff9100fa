# garage/metrics.py
"""Prometheus metrics for the parking engine."""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry, generate_latest

# Custom registry so repeated imports in tests don't collide with the default one
REGISTRY = CollectorRegistry()

EVENTS_PROCESSED = Counter(
    "parking_webhook_events_processed_total",
    "Webhook events processed successfully",
    ["event_type"],
    registry=REGISTRY,
)

EVENTS_FAILED = Counter(
    "parking_webhook_events_failed_total",
    "Webhook events rejected or failed",
    ["event_type", "error"],
    registry=REGISTRY,
)

VEHICLES_ENTERED = Counter(
    "parking_vehicles_entered_total",
    "Vehicles admitted to a spot",
    ["sector"],
    registry=REGISTRY,
)

VEHICLES_EXITED = Counter(
    "parking_vehicles_exited_total",
    "Vehicles that left and were billed",
    ["sector"],
    registry=REGISTRY,
)

REVENUE_GENERATED = Counter(
    "parking_revenue_generated_total",
    "Amount charged on EXIT events",
    ["sector"],
    registry=REGISTRY,
)

OCCUPIED_SPOTS = Gauge(
    "parking_spots_occupied",
    "Number of occupied parking spots",
    registry=REGISTRY,
)

TOTAL_SPOTS = Gauge(
    "parking_spots_total",
    "Total number of parking spots",
    registry=REGISTRY,
)

SECTOR_OCCUPANCY = Gauge(
    "parking_sector_occupancy_ratio",
    "Occupied spots divided by sector capacity",
    ["sector"],
    registry=REGISTRY,
)

WEBHOOK_LATENCY = Histogram(
    "parking_webhook_processing_seconds",
    "Time taken to process one webhook event",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=REGISTRY,
)

REVENUE_LATENCY = Histogram(
    "parking_revenue_calculation_seconds",
    "Time taken to compute a revenue query",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
    registry=REGISTRY,
)


def record_event_processed(event_type: str) -> None:
    EVENTS_PROCESSED.labels(event_type=event_type).inc()


def record_event_failed(event_type: str, error: str) -> None:
    EVENTS_FAILED.labels(event_type=event_type, error=error).inc()


def record_entry(sector: str) -> None:
    VEHICLES_ENTERED.labels(sector=sector).inc()


def record_exit(sector: str, amount: float) -> None:
    VEHICLES_EXITED.labels(sector=sector).inc()
    REVENUE_GENERATED.labels(sector=sector).inc(amount)


def update_occupancy(occupied: int, total: int) -> None:
    OCCUPIED_SPOTS.set(occupied)
    TOTAL_SPOTS.set(total)


def update_sector_occupancy(sector: str, ratio: float) -> None:
    SECTOR_OCCUPANCY.labels(sector=sector).set(ratio)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)
