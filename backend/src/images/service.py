"""High-level image service orchestrating persistence, ingestion and file access."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from db.session import engine, session_scope
from ingest import ProcessingReport, load_file, resolve_under_root, run_ingestion
from ingest.errors import NotFoundError

from .config import get_settings
from .models import Base, ImageDataDTO, ImageDTO, ImageSetDTO, MaskImageDTO
from . import repository

logger = logging.getLogger(__name__)

FILE_URL_PREFIX = "/api/file"


def file_url(patient_nb: str, filename: str) -> str:
    return f"{FILE_URL_PREFIX}/{patient_nb}/{filename}"


class ImageService:
    def __init__(self, data_root: Optional[Path] = None, *, patient_nb_width: Optional[int] = None) -> None:
        self._initialized = False
        self._data_root = data_root
        self._patient_nb_width = patient_nb_width

    @property
    def data_root(self) -> Path:
        return self._data_root if self._data_root is not None else get_settings().data_root

    @property
    def patient_nb_width(self) -> int:
        if self._patient_nb_width is not None:
            return self._patient_nb_width
        return get_settings().patient_nb_width

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        try:
            Base.metadata.create_all(engine)
        except Exception as exc:  # pragma: no cover - initialization failure
            raise RuntimeError("Failed to initialize image tables") from exc
        self._initialized = True

    def list_images(self) -> list[ImageDTO]:
        self._ensure_initialized()
        with session_scope() as session:
            images = repository.list_images(session)
            dtos = [ImageDTO.model_validate(image) for image in images]
        logger.info("Found images: %d", len(dtos))
        return dtos

    def get_image(self, image_id: int) -> Optional[ImageDTO]:
        self._ensure_initialized()
        with session_scope() as session:
            image = repository.get_image(session, image_id)
            if image is None:
                return None
            return ImageDTO.model_validate(image)

    def list_images_for_patient(self, patient_nb: str) -> list[ImageDTO]:
        self._ensure_initialized()
        with session_scope() as session:
            images = repository.list_images_for_patient(session, patient_nb)
            return [ImageDTO.model_validate(image) for image in images]

    def get_image_set(self, image_id: int) -> Optional[ImageSetDTO]:
        """Return the original image URL and the URLs of every mask derived from it."""
        self._ensure_initialized()
        with session_scope() as session:
            image = repository.get_image(session, image_id)
            if image is None:
                return None
            masks = repository.list_masks_for_image(session, image.id)
            return ImageSetDTO(
                original_image=file_url(image.patient_nb, image.filename),
                masks=[
                    MaskImageDTO(
                        id=str(mask.id),
                        type=mask.mask_type.value,
                        image_url=file_url(image.patient_nb, mask.filename),
                    )
                    for mask in masks
                ],
            )

    def resolve_file(self, patient_nb: str, filename: str) -> Path:
        return resolve_under_root(self.data_root, patient_nb, filename)

    def load_file_bytes(self, patient_nb: str, filename: str) -> tuple[str, bytes]:
        loaded = load_file(self.resolve_file(patient_nb, filename))
        return loaded.content_type, loaded.data

    def load_patient_inline(self, patient_nb: str) -> ImageDataDTO:
        """Embed the patient's image as base64 next to its metadata.

        Only one image per patient is supported, the lowest id wins.
        """
        images = self.list_images_for_patient(patient_nb)
        if not images:
            raise NotFoundError(f"No image for patient {patient_nb}")
        image = images[0]
        loaded = load_file(self.resolve_file(patient_nb, image.filename))
        return ImageDataDTO(
            **image.model_dump(),
            content_type=loaded.content_type,
            data=loaded.as_base64(),
        )

    def run_ingestion(self, *, full: bool = False) -> ProcessingReport:
        self._ensure_initialized()
        logger.info("Ingestion requested (root=%s, full=%s)", self.data_root, full)
        return run_ingestion(
            self.data_root,
            scope=session_scope,
            incremental=not full,
            width=self.patient_nb_width,
        )


image_service = ImageService()
