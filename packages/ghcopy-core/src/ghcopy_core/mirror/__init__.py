"""Recursive folder mirroring."""

from ghcopy_core.mirror.engine import MirrorEngine
from ghcopy_core.mirror.filesystem import (
    choose_destination,
    ensure_destination_dir,
    resolve_conflict,
    write_file,
)
from ghcopy_core.mirror.models import MirrorEvent, MirrorFailure, MirrorOutcome, MirrorPlan
from ghcopy_core.mirror.observer import LoggingObserver, MirrorObserver

__all__ = [
    "LoggingObserver",
    "MirrorEngine",
    "MirrorEvent",
    "MirrorFailure",
    "MirrorObserver",
    "MirrorOutcome",
    "MirrorPlan",
    "choose_destination",
    "ensure_destination_dir",
    "resolve_conflict",
    "write_file",
]
