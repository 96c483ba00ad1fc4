"""Filesystem ingestion of frames and explainability masks."""

from .classifier import Classification, FileKind, classify, derive_image_filename  # noqa: F401
from .errors import (  # noqa: F401
    AmbiguousOriginError,
    FilesystemError,
    IngestError,
    InvalidPathError,
    NotFoundError,
    StorageError,
)
from .loader import LoadedFile, content_type_for, load_file  # noqa: F401
from .paths import resolve_under_root  # noqa: F401
from .pipeline import IngestionPipeline, run_ingestion  # noqa: F401
from .report import IngestionIssue, ProcessingReport  # noqa: F401
from .scanner import IncrementalScanner, PatientFolder, full_scan  # noqa: F401
from .upsert import RecordUpserter, UpsertResult  # noqa: F401
