# garage/routers/webhook.py
"""
Simulator webhook endpoint.
POST /webhook — receives ENTRY / PARKED / EXIT vehicle events.
Expected failures map to 4xx with an error code; the processor never
leaves partial state behind, so the simulator may safely retry.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from datetime import datetime

from garage.dependencies import get_event_processor
from garage.exceptions import ErrorKind
from garage.schemas.webhook_event import WebhookEvent
from garage.services.event_processor import EventProcessor
from garage.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)

STATUS_BY_ERROR = {
    ErrorKind.VEHICLE_ALREADY_PARKED: status.HTTP_409_CONFLICT,
    ErrorKind.SECTOR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NO_AVAILABLE_SPOTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VEHICLE_NOT_PARKED: status.HTTP_400_BAD_REQUEST,
}


@router.post("/webhook", summary="Simulator webhook — vehicle events")
async def handle_webhook_event(event: WebhookEvent,
                               processor: EventProcessor = Depends(get_event_processor)):
    logger.info(f"Received webhook event: type={event.event_type.value} plate={event.license_plate}")
    result = await processor.process_event(event)

    if not result.ok:
        return JSONResponse(
            status_code=STATUS_BY_ERROR.get(result.error, status.HTTP_400_BAD_REQUEST),
            content={
                "error": result.error.value,
                "message": result.message,
                "timestamp": datetime.utcnow().isoformat(),
            },
        )

    if result.record is None:
        return {"status": "ignored", "event_type": event.event_type.value}
    return {
        "status": "ok",
        "event_type": event.event_type.value,
        "event_id": result.record.id,
        "sector": result.record.sector,
        "spot_id": result.record.spot_id,
        "price_applied": result.record.price_applied,
        "amount_charged": result.record.amount_charged,
    }


@router.get("/webhook/health", summary="Webhook endpoint liveness")
def webhook_health():
    return {"status": "ok", "detail": "Webhook endpoint is healthy"}
