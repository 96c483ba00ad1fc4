"""Canonical path resolution clamped to a data root."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from .errors import InvalidPathError, NotFoundError


PathLike = Union[str, Path]


def canonical_root(root: PathLike) -> Path:
    try:
        return Path(root).resolve(strict=True)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise NotFoundError(f"Data root not found: {root}") from exc
    except OSError as exc:
        raise InvalidPathError(f"Cannot resolve data root: {root}") from exc


def is_within(root: Path, candidate: Path) -> bool:
    return candidate == root or root in candidate.parents


def resolve_under_root(root: PathLike, *segments: str) -> Path:
    """Resolve ``segments`` below ``root`` and reject anything that escapes it.

    Both sides are canonicalized (symlinks followed) before the containment
    check, so ``..`` segments, absolute segments and symlinks pointing outside
    the root are all rejected the same way. The target must exist.

    Raises:
        NotFoundError: The root or the target does not exist.
        InvalidPathError: The canonical target lies outside the canonical root.
    """
    base = canonical_root(root)
    candidate = Path(root).joinpath(*segments)
    try:
        resolved = candidate.resolve(strict=True)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise NotFoundError(f"Path not found: {'/'.join(segments)}") from exc
    except (OSError, RuntimeError) as exc:
        # RuntimeError covers symlink loops on older interpreters
        raise InvalidPathError(f"Cannot resolve path: {'/'.join(segments)}") from exc

    if not is_within(base, resolved):
        raise InvalidPathError("Invalid file path")
    return resolved
