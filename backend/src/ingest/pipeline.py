"""Scan patient folders and materialize their images and masks."""

from __future__ import annotations

import logging
import os
import time
from functools import partial
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .classifier import FileKind, classify
from .errors import AmbiguousOriginError, FilesystemError, StorageError
from .paths import PathLike, canonical_root
from .report import ProcessingReport
from .scanner import IncrementalScanner, PatientFolder, Scanner, SessionScope, full_scan
from .upsert import RecordUpserter


logger = logging.getLogger(__name__)


def list_patient_files(folder: PatientFolder) -> list[str]:
    """Return the names of regular files directly inside ``folder``, symlinks excluded."""
    try:
        with os.scandir(folder.path) as it:
            return [entry.name for entry in it if entry.is_file(follow_symlinks=False)]
    except OSError as exc:
        raise FilesystemError(f"Error reading dir {folder.patient_nb}: {exc}") from exc


class IngestionPipeline:
    """Sequential ingestion of every folder the scanner selects.

    Each patient folder is written in its own transaction: a storage failure
    rolls back that folder only and the run moves on to the next one.
    """

    def __init__(self, root: PathLike, *, scope: SessionScope, scanner: Optional[Scanner] = None) -> None:
        self._root = root
        self._scope = scope
        self._scanner = scanner or full_scan

    def run(self) -> ProcessingReport:
        started = time.monotonic()
        root = canonical_root(self._root)
        report = ProcessingReport()
        folders = self._scanner(root)
        report.directories_scanned = len(folders)
        logger.info("event=ingest_started root=%s directories=%d", root, len(folders))

        for folder in folders:
            self._process_folder(folder, report)

        logger.info(
            "event=ingest_finished root=%s processed=%d failed=%d images_created=%d "
            "masks_created=%d skipped=%d errors=%d elapsed=%.2fs",
            root,
            report.directories_processed,
            report.directories_failed,
            report.images_created,
            report.masks_created,
            report.files_skipped,
            report.error_count,
            time.monotonic() - started,
        )
        return report

    def _process_folder(self, folder: PatientFolder, report: ProcessingReport) -> None:
        try:
            filenames = list_patient_files(folder)
        except FilesystemError as exc:
            logger.error("Skipping patient %s: %s", folder.patient_nb, exc)
            report.directories_failed += 1
            report.record_error(folder.patient_nb, exc)
            return

        folder_report = ProcessingReport()
        try:
            with self._scope() as session:
                upserter = RecordUpserter(session)
                for filename in filenames:
                    self._process_file(upserter, folder.patient_nb, filename, folder_report)
        except (StorageError, SQLAlchemyError) as exc:
            logger.error("Rolled back patient %s: %s", folder.patient_nb, exc)
            report.directories_failed += 1
            report.record_error(folder.patient_nb, exc)
            return

        report.directories_processed += 1
        report.merge(folder_report)

    def _process_file(
        self,
        upserter: RecordUpserter,
        patient_nb: str,
        filename: str,
        report: ProcessingReport,
    ) -> None:
        classification = classify(filename)
        if classification.kind is FileKind.ORIGINAL:
            result = upserter.upsert_image(patient_nb, filename)
            if result.created:
                report.images_created += 1
            else:
                report.images_existing += 1
        elif classification.kind is FileKind.MASK:
            try:
                result = upserter.upsert_mask(patient_nb, filename, classification.mask_type)
            except AmbiguousOriginError as exc:
                logger.warning("Skipping %s/%s: %s", patient_nb, filename, exc)
                report.record_error(patient_nb, exc, filename=filename)
                return
            if result.image_created:
                report.images_created += 1
            if result.created:
                report.masks_created += 1
            else:
                report.masks_existing += 1
        else:
            logger.debug("Skipping unrecognized file %s/%s", patient_nb, filename)
            report.files_skipped += 1


def run_ingestion(
    root: PathLike,
    *,
    scope: SessionScope,
    incremental: bool = True,
    width: int = 3,
) -> ProcessingReport:
    if incremental:
        scanner: Scanner = IncrementalScanner(scope, width=width)
    else:
        scanner = partial(full_scan, width=width)
    return IngestionPipeline(Path(root), scope=scope, scanner=scanner).run()
