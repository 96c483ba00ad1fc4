"""SQLAlchemy models and DTOs for images and their explainability masks."""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class MaskType(str, enum.Enum):
    OCCLUSION = "occlusion"
    SALIENCY = "saliency"
    LAYER_GRADCAM = "layer_gradcam"
    INTEGRATED_GRADIENTS = "integrated_gradients"
    GUIDED_GRADCAM = "guided_gradcam"
    GRADIENT_SHAP = "gradient_shap"


class Image(Base):
    __tablename__ = "images"
    __table_args__ = (UniqueConstraint("patient_nb", "filename", name="uq_images_patient_filename"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    # Zero-padded folder name, e.g. "042"
    patient_nb: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    masks: Mapped[list["Mask"]] = relationship(
        "Mask",
        back_populates="image",
        cascade="all, delete-orphan",
        order_by="Mask.id",
    )


class Mask(Base):
    __tablename__ = "masks"
    __table_args__ = (
        UniqueConstraint("image_id", "mask_type", "filename", name="uq_masks_image_type_filename"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    image_id: Mapped[int] = mapped_column(ForeignKey("images.id", ondelete="CASCADE"), nullable=False, index=True)
    mask_type: Mapped[MaskType] = mapped_column(
        Enum(MaskType, name="mask_type", values_callable=lambda members: [m.value for m in members]),
        nullable=False,
    )
    filename: Mapped[str] = mapped_column(Text, nullable=False)

    image: Mapped[Image] = relationship("Image", back_populates="masks")


class ImageDTO(BaseModel):
    """Data transfer object for image API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    patient_nb: str


class MaskDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    image_id: int
    mask_type: MaskType
    filename: str


class ImageDataDTO(ImageDTO):
    """Image metadata with its file content embedded as base64."""

    content_type: Optional[str] = None
    data: Optional[str] = None


class MaskImageDTO(BaseModel):
    id: str
    type: str
    image_url: str


class ImageSetDTO(BaseModel):
    """An original image URL together with the masks derived from it."""

    original_image: str
    masks: list[MaskImageDTO] = []
