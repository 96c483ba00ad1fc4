"""Pydantic schemas for the ingestion trigger."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

__all__ = ["IngestionIssueModel", "IngestionReportModel", "IngestionResponse"]


class IngestionIssueModel(BaseModel):
    patient_nb: str
    filename: Optional[str] = None
    kind: str
    message: str


class IngestionReportModel(BaseModel):
    directories_scanned: int = 0
    directories_processed: int = 0
    directories_failed: int = 0
    images_created: int = 0
    images_existing: int = 0
    masks_created: int = 0
    masks_existing: int = 0
    files_skipped: int = 0
    error_count: int = 0
    errors: list[IngestionIssueModel] = []


class IngestionResponse(BaseModel):
    status: str
    report: IngestionReportModel
