"""Idempotent create-or-fetch of image and mask records."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from images import repository
from images.models import MaskType

from .classifier import derive_image_filename
from .errors import StorageError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpsertResult:
    id: int
    created: bool
    image_created: bool = False


class RecordUpserter:
    """Create images and masks at most once per unique key.

    Each insert is a check followed by ``INSERT ... ON CONFLICT DO NOTHING`` and
    a re-read, so overlapping ingestion runs converge on the same rows instead
    of duplicating them.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert_image(self, patient_nb: str, filename: str) -> UpsertResult:
        try:
            existing = repository.find_image(self._session, patient_nb, filename)
            if existing is not None:
                logger.debug("Image already exists with id: %s", existing.id)
                return UpsertResult(id=existing.id, created=False)

            created = repository.insert_image(self._session, patient_nb=patient_nb, filename=filename)
            image = repository.find_image(self._session, patient_nb, filename)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to upsert image {patient_nb}/{filename}: {exc}") from exc

        if image is None:
            raise StorageError(f"Image {patient_nb}/{filename} missing after insert")
        if created:
            logger.info("Added new image with id: %s (%s/%s)", image.id, patient_nb, filename)
        return UpsertResult(id=image.id, created=created)

    def upsert_mask(self, patient_nb: str, filename: str, mask_type: MaskType) -> UpsertResult:
        logger.debug("Processing mask: %s of type: %s", filename, mask_type.value)
        image_filename = derive_image_filename(filename)

        try:
            image = repository.find_image(self._session, patient_nb, image_filename)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to look up image {patient_nb}/{image_filename}: {exc}") from exc

        image_created = False
        if image is None:
            # Masks can be listed before their source frame
            logger.info("Original image not found, creating it: %s", image_filename)
            image_result = self.upsert_image(patient_nb, image_filename)
            image_id = image_result.id
            image_created = image_result.created
        else:
            image_id = image.id

        try:
            existing = repository.find_mask(self._session, image_id, mask_type, filename)
            if existing is not None:
                logger.debug("Mask already exists with id: %s", existing.id)
                return UpsertResult(id=existing.id, created=False, image_created=image_created)

            created = repository.insert_mask(
                self._session, image_id=image_id, mask_type=mask_type, filename=filename
            )
            mask = repository.find_mask(self._session, image_id, mask_type, filename)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to upsert mask {patient_nb}/{filename}: {exc}") from exc

        if mask is None:
            raise StorageError(f"Mask {patient_nb}/{filename} missing after insert")
        if created:
            logger.info("Added new mask with id: %s (%s, %s)", mask.id, mask_type.value, filename)
        return UpsertResult(id=mask.id, created=created, image_created=image_created)
