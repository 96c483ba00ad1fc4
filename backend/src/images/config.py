"""Settings for the image data root on disk."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel


DEFAULT_DATA_ROOT = Path("/app/data")


class ImagesSettings(BaseModel):
    data_root: Path = DEFAULT_DATA_ROOT
    # Patient folders are named with this many zero-padded digits
    patient_nb_width: int = 3


@lru_cache
def get_settings() -> ImagesSettings:
    root_env = os.getenv("IMAGES_PATH")
    return ImagesSettings(
        data_root=Path(root_env) if root_env else DEFAULT_DATA_ROOT,
        patient_nb_width=int(os.getenv("PATIENT_NB_WIDTH", "3")),
    )
