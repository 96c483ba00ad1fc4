"""Filename conventions for original frames and their explainability masks."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from images.models import MaskType

from .errors import AmbiguousOriginError


ORIGINAL_PREFIX = "video_"

# Checked in order, first match wins
MASK_MARKERS: tuple[tuple[str, MaskType], ...] = (
    ("occlusion_colored_", MaskType.OCCLUSION),
    ("saliency_colored_", MaskType.SALIENCY),
    ("layer_gradcam_colored_", MaskType.LAYER_GRADCAM),
    ("integrated_gradients_colored_", MaskType.INTEGRATED_GRADIENTS),
    ("guided_gradcam_colored_", MaskType.GUIDED_GRADCAM),
    ("gradient_shap_colored_", MaskType.GRADIENT_SHAP),
)


class FileKind(str, enum.Enum):
    ORIGINAL = "original"
    MASK = "mask"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Classification:
    kind: FileKind
    mask_type: Optional[MaskType] = None

    @property
    def is_original(self) -> bool:
        return self.kind is FileKind.ORIGINAL

    @property
    def is_mask(self) -> bool:
        return self.kind is FileKind.MASK


ORIGINAL = Classification(FileKind.ORIGINAL)
UNRECOGNIZED = Classification(FileKind.UNRECOGNIZED)


def mask_type_for(filename: str) -> Optional[MaskType]:
    for marker, mask_type in MASK_MARKERS:
        if marker in filename:
            return mask_type
    return None


def classify(filename: str) -> Classification:
    """Map a filename to exactly one of original, mask(type) or unrecognized."""
    if filename.startswith(ORIGINAL_PREFIX):
        return ORIGINAL
    mask_type = mask_type_for(filename)
    if mask_type is not None:
        return Classification(FileKind.MASK, mask_type)
    return UNRECOGNIZED


def derive_image_filename(mask_filename: str) -> str:
    """Strip the algorithm prefix from a mask filename.

    ``saliency_colored_video_0042_0007.jpg`` becomes ``video_0042_0007.jpg``.
    """
    position = mask_filename.find(ORIGINAL_PREFIX)
    if position < 0:
        raise AmbiguousOriginError(mask_filename)
    return mask_filename[position:]
