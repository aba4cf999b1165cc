"""Results and progress events of a folder mirror."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ghcopy_core.github.models import ListingEntry


@dataclass(frozen=True)
class MirrorFailure:
    """One entry (file or subtree listing) that could not be mirrored."""

    path: str
    cause: Exception

    def __str__(self) -> str:
        return f"{self.path}: {self.cause}"


@dataclass
class MirrorOutcome:
    """Running totals owned by the top-level mirror call.

    Mutated only by the traversal that created it; ``failures`` is
    append-only and keeps the order failures were observed in.
    """

    files_written: int = 0
    bytes_written: int = 0
    directories: int = 0
    skipped: int = 0
    failures: list[MirrorFailure] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    def record_write(self, path: Path, size: int) -> None:
        self.files_written += 1
        self.bytes_written += size
        self.written.append(path)

    def record_failure(self, path: str, cause: Exception) -> None:
        self.failures.append(MirrorFailure(path=path, cause=cause))


EventKind = Literal[
    "listing",
    "listing_failed",
    "directory",
    "file_written",
    "file_failed",
    "skipped",
]


class MirrorEvent(BaseModel):
    """Structured progress notification handed to observers."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    path: str
    destination: Path | None = None
    size: int = 0
    detail: str = ""


@dataclass
class MirrorPlan:
    """What a mirror would write, gathered by a dry-run walk."""

    entries: list[ListingEntry] = field(default_factory=list)  # pre-order
    failures: list[MirrorFailure] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_file)

    def record_failure(self, path: str, cause: Exception) -> None:
        self.failures.append(MirrorFailure(path=path, cause=cause))
