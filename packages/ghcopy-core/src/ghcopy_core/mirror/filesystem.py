"""Local destination handling: directories, name-conflict resolution, atomic writes."""

from __future__ import annotations

import os
from pathlib import Path

from ghcopy_core.errors import FileConflictError, InvalidOperationError, from_os_error

MAX_RENAME_ATTEMPTS = 10_000


def resolve_conflict(path: Path) -> Path:
    """Return *path* if free, else the first free ``stem_N.ext`` (N from 1).

    ``a.tar.gz`` becomes ``a.tar_1.gz``: only the last suffix is kept aside.
    """
    if not path.exists():
        return path
    stem, suffix = path.stem, path.suffix
    for counter in range(1, MAX_RENAME_ATTEMPTS + 1):
        candidate = path.with_name(f"{stem}_{counter}{suffix}")
        if not candidate.exists():
            return candidate
    raise FileConflictError(path)


def choose_destination(path: Path, *, force: bool, strict: bool = False) -> Path:
    """Pick where a fetched file should be written.

    force overwrites in place; strict refuses existing targets; otherwise
    the name is auto-renamed.
    """
    if force:
        return path
    if strict and path.exists():
        raise FileConflictError(path)
    return resolve_conflict(path)


def ensure_destination_dir(path: Path) -> bool:
    """Create *path* (and parents) as a directory. Returns True if it was created."""
    if path.is_dir():
        return False
    if path.exists():
        raise InvalidOperationError("mirror", f"destination {path} exists and is not a directory")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise from_os_error(e, path) from e
    return True


def write_file(path: Path, data: bytes, *, overwrite: bool) -> None:
    """Write *data* to *path* so that readers only ever see the complete file.

    The bytes go to a hidden ``.part`` sibling which is then renamed over
    *path*. Without *overwrite* the name is claimed first with an exclusive
    create, so an existing file is never replaced. On failure the partial
    file and the claim are removed.
    """
    if not overwrite:
        try:
            open(path, "xb").close()
        except OSError as e:
            raise from_os_error(e, path) from e

    partial = path.with_name(f".{path.name}.{os.getpid()}.part")
    try:
        with open(partial, "wb") as f:
            f.write(data)
        os.replace(partial, path)
    except OSError as e:
        partial.unlink(missing_ok=True)
        if not overwrite:
            path.unlink(missing_ok=True)
        raise from_os_error(e, path) from e
