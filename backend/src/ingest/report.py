"""Outcome counters for a single ingestion run."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class IngestionIssue:
    patient_nb: str
    filename: Optional[str]
    kind: str
    message: str


@dataclass
class ProcessingReport:
    directories_scanned: int = 0
    directories_processed: int = 0
    directories_failed: int = 0
    images_created: int = 0
    images_existing: int = 0
    masks_created: int = 0
    masks_existing: int = 0
    files_skipped: int = 0
    errors: list[IngestionIssue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def record_error(self, patient_nb: str, exc: BaseException, filename: Optional[str] = None) -> None:
        self.errors.append(
            IngestionIssue(
                patient_nb=patient_nb,
                filename=filename,
                kind=type(exc).__name__,
                message=str(exc),
            )
        )

    def merge(self, other: "ProcessingReport") -> None:
        """Fold the counters of a committed directory into this report."""
        self.images_created += other.images_created
        self.images_existing += other.images_existing
        self.masks_created += other.masks_created
        self.masks_existing += other.masks_existing
        self.files_skipped += other.files_skipped
        self.errors.extend(other.errors)

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["error_count"] = self.error_count
        return payload
