"""Filesystem discovery of patient folders."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, ContextManager, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from images import repository

from .errors import FilesystemError, StorageError


logger = logging.getLogger(__name__)

SessionScope = Callable[[], ContextManager[Session]]
Scanner = Callable[[Path], list["PatientFolder"]]


@dataclass(frozen=True)
class PatientFolder:
    patient_nb: str
    path: Path


def is_patient_nb(name: str, width: int = 3) -> bool:
    """Patient folders are named with exactly ``width`` ASCII digits."""
    return len(name) == width and name.isascii() and name.isdigit()


def discover_patients(root: Path, *, width: int = 3) -> list[PatientFolder]:
    """List the patient subdirectories of ``root`` in enumeration order.

    Symlinked entries are not followed. Directories whose name is not a
    ``width``-digit zero-padded number are logged and left out.
    """
    folders: list[PatientFolder] = []
    try:
        with os.scandir(root) as it:
            for entry in it:
                if not entry.is_dir(follow_symlinks=False):
                    continue
                if not is_patient_nb(entry.name, width):
                    logger.warning("Ignoring directory %s: not a %d-digit patient number", entry.name, width)
                    continue
                folders.append(PatientFolder(patient_nb=entry.name, path=Path(entry.path)))
    except OSError as exc:
        raise FilesystemError(f"Cannot list data root {root}: {exc}") from exc
    return folders


def select_new_patients(folders: Iterable[PatientFolder], latest: Optional[str]) -> list[PatientFolder]:
    """Keep folders whose name sorts after ``latest``; keep everything when it is None.

    Names are fixed-width zero-padded numbers, so string order matches numeric
    order.
    """
    if latest is None:
        return list(folders)
    return [folder for folder in folders if folder.patient_nb > latest]


def full_scan(root: Path, *, width: int = 3) -> list[PatientFolder]:
    """Rescan every patient folder regardless of what is already stored."""
    folders = discover_patients(root, width=width)
    logger.info("Full rescan requested, collecting %d directories", len(folders))
    return folders


class IncrementalScanner:
    """Select only the patient folders newer than the stored high-water mark."""

    def __init__(self, scope: SessionScope, *, width: int = 3) -> None:
        self._scope = scope
        self._width = width

    def latest_patient_nb(self) -> Optional[str]:
        try:
            with self._scope() as session:
                return repository.get_latest_patient_nb(session, self._width)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read latest patient number: {exc}") from exc

    def __call__(self, root: Path) -> list[PatientFolder]:
        latest = self.latest_patient_nb()
        logger.info("Latest patient_nb in DB: %s", latest)
        folders = discover_patients(root, width=self._width)
        if latest is None:
            logger.info("No patients in database, collecting all %d directories", len(folders))
            return folders

        selected = select_new_patients(folders, latest)
        for folder in selected:
            logger.info("Found newer patient directory: %s", folder.patient_nb)
        return selected
