"""Image browsing routes."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from images.service import image_service


router = APIRouter(prefix="/api/images", tags=["images"])


@router.get("")
def list_images():
    """List all images."""
    images = image_service.list_images()
    return JSONResponse([image.model_dump(mode="json") for image in images])


@router.get("/id/{image_id}")
def get_image(image_id: int):
    """Get a single image by ID."""
    image = image_service.get_image(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return JSONResponse(image.model_dump(mode="json"))


@router.get("/patient/{patient_nb}")
def list_patient_images(patient_nb: str):
    """List the images stored for a patient folder."""
    images = image_service.list_images_for_patient(patient_nb)
    return JSONResponse([image.model_dump(mode="json") for image in images])


@router.get("/{image_id}/set")
def get_image_set(image_id: int):
    """Get an image together with the URLs of its masks."""
    image_set = image_service.get_image_set(image_id)
    if image_set is None:
        raise HTTPException(status_code=404, detail="Image not found")
    return JSONResponse(image_set.model_dump(mode="json"))
