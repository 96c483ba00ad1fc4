"""File serving routes clamped to the image data root."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response

from images.service import image_service
from ingest.errors import InvalidPathError, NotFoundError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/file", tags=["files"])


@router.get("/{patient_nb}/{filename}")
def serve_file(patient_nb: str, filename: str):
    """Stream a stored image or mask with a content type taken from its extension."""
    try:
        content_type, data = image_service.load_file_bytes(patient_nb, filename)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found") from None
    except InvalidPathError as exc:
        logger.warning("Rejected file request %s/%s: %s", patient_nb, filename, exc)
        raise HTTPException(status_code=400, detail="Invalid file path") from None
    return Response(content=data, media_type=content_type)


@router.get("/{patient_nb}")
def serve_patient_file(patient_nb: str):
    """Return the patient's image metadata with the file embedded as base64."""
    try:
        payload = image_service.load_patient_inline(patient_nb)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Not found") from None
    except InvalidPathError as exc:
        logger.warning("Rejected file request for patient %s: %s", patient_nb, exc)
        raise HTTPException(status_code=400, detail="Invalid file path") from None
    return JSONResponse(payload.model_dump(mode="json", exclude_none=True))
