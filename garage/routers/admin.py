# garage/routers/admin.py
"""Consistency report and cleanup for plates holding more than one spot."""

from fastapi import APIRouter, Depends

from garage.dependencies import get_auditor
from garage.schemas.consistency import ConsistencyReport, CleanupResult
from garage.services.consistency_auditor import ConsistencyAuditor
from garage.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/admin/parking/consistency-report", response_model=ConsistencyReport,
            summary="Vehicles occupying multiple spots")
def consistency_report(auditor: ConsistencyAuditor = Depends(get_auditor)):
    logger.info("Generating parking data consistency report")
    return auditor.report()


@router.post("/admin/parking/cleanup", response_model=CleanupResult,
             summary="Release duplicate spots, keeping the lowest spot id per vehicle")
async def cleanup_inconsistent_data(auditor: ConsistencyAuditor = Depends(get_auditor)):
    return await auditor.repair()
