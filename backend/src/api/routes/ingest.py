"""Route triggering ingestion of new patient folders."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from api.models.ingest import IngestionResponse
from images.service import image_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/images", tags=["ingest"])


@router.post("/process", response_model=IngestionResponse)
def process_images(full: bool = Query(default=False, description="Rescan every patient folder")):
    """Scan the data root and store any new images and masks."""
    try:
        report = image_service.run_ingestion(full=full)
    except Exception:
        logger.exception("Ingestion failed")
        return JSONResponse({"status": "error", "detail": "Internal server error"}, status_code=500)
    payload = IngestionResponse(status="ok", report=report.as_dict())
    return JSONResponse(payload.model_dump(mode="json"))
