"""Read served files into memory and encode them for JSON transport."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path

from .errors import NotFoundError


DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
}


@dataclass(frozen=True)
class LoadedFile:
    content_type: str
    data: bytes

    def as_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def content_type_for(path: Path) -> str:
    extension = path.suffix.lstrip(".").lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def load_file(path: Path) -> LoadedFile:
    """Buffer the whole file; callers must only pass resolved paths."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise NotFoundError(f"File not found: {path.name}") from exc
    return LoadedFile(content_type=content_type_for(path), data=data)
