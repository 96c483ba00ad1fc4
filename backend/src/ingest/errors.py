"""Exceptions raised by the ingestion and file-serving code."""

from __future__ import annotations


class IngestError(RuntimeError):
    """Base class for errors surfaced by ingestion or file resolution."""


class NotFoundError(IngestError):
    """A file, directory or record does not exist."""


class InvalidPathError(IngestError):
    """A resolved path escapes the configured data root."""


class AmbiguousOriginError(IngestError):
    """A mask filename does not carry the name of its source image."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Could not determine original image for mask: {filename}")
        self.filename = filename


class StorageError(IngestError):
    """The persistence layer failed while reading or writing records."""


class FilesystemError(IngestError):
    """A directory could not be listed or a file could not be read."""
