"""Data access helpers for image and mask persistence."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, cast, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from .models import Image, Mask, MaskType


def format_patient_nb(value: int, width: int = 3) -> str:
    return f"{value:0{width}d}"


def get_latest_patient_nb(session: Session, width: int = 3) -> Optional[str]:
    """Return the highest persisted patient number, zero-padded, or None when empty."""
    stmt = select(func.max(cast(Image.patient_nb, Integer)))
    latest = session.scalar(stmt)
    if latest is None:
        return None
    return format_patient_nb(int(latest), width)


def find_image(session: Session, patient_nb: str, filename: str) -> Optional[Image]:
    stmt = select(Image).where(Image.patient_nb == patient_nb, Image.filename == filename)
    return session.scalar(stmt)


def _insert_for(session: Session, model):
    """Return an INSERT for ``model`` and whether it supports ON CONFLICT DO NOTHING."""
    bind = session.get_bind()
    dialect_name = bind.dialect.name if bind is not None else ""
    if dialect_name == "postgresql":
        return pg_insert(model), True
    if dialect_name == "sqlite":
        return sqlite_insert(model), True
    return insert(model), False


def insert_image(session: Session, *, patient_nb: str, filename: str) -> bool:
    """Insert an image row, returning False when a concurrent writer got there first."""
    stmt, on_conflict = _insert_for(session, Image)
    stmt = stmt.values(patient_nb=patient_nb, filename=filename)
    if on_conflict:
        stmt = stmt.on_conflict_do_nothing(index_elements=[Image.patient_nb, Image.filename])
    result = session.execute(stmt)
    return result.rowcount == 1


def find_mask(session: Session, image_id: int, mask_type: MaskType, filename: str) -> Optional[Mask]:
    stmt = select(Mask).where(
        Mask.image_id == image_id,
        Mask.mask_type == mask_type,
        Mask.filename == filename,
    )
    return session.scalar(stmt)


def insert_mask(session: Session, *, image_id: int, mask_type: MaskType, filename: str) -> bool:
    stmt, on_conflict = _insert_for(session, Mask)
    stmt = stmt.values(image_id=image_id, mask_type=mask_type, filename=filename)
    if on_conflict:
        stmt = stmt.on_conflict_do_nothing(index_elements=[Mask.image_id, Mask.mask_type, Mask.filename])
    result = session.execute(stmt)
    return result.rowcount == 1


def get_image(session: Session, image_id: int) -> Optional[Image]:
    return session.get(Image, image_id)


def list_images(session: Session) -> list[Image]:
    stmt = select(Image).order_by(Image.id)
    return list(session.scalars(stmt))


def list_images_for_patient(session: Session, patient_nb: str) -> list[Image]:
    stmt = select(Image).where(Image.patient_nb == patient_nb).order_by(Image.id)
    return list(session.scalars(stmt))


def list_masks_for_image(session: Session, image_id: int) -> list[Mask]:
    stmt = select(Mask).where(Mask.image_id == image_id).order_by(Mask.id)
    return list(session.scalars(stmt))
