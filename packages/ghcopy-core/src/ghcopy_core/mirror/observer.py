"""Observer interface through which the mirror engine reports progress."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ghcopy_core.mirror.models import MirrorEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class MirrorObserver(Protocol):
    """Receives one call per traversal event. Must not raise."""

    def on_event(self, event: MirrorEvent) -> None: ...


class LoggingObserver:
    """Default observer: turns events into log records."""

    def on_event(self, event: MirrorEvent) -> None:
        if event.kind == "file_written":
            logger.info("Wrote %s (%d bytes)", event.destination, event.size)
        elif event.kind == "file_failed":
            logger.warning("Failed to download %s: %s", event.path, event.detail)
        elif event.kind == "listing_failed":
            logger.warning("Failed to list %s: %s", event.path or "/", event.detail)
        elif event.kind == "skipped":
            logger.debug("Skipping %s: %s", event.path, event.detail)
        else:
            logger.debug("%s %s", event.kind, event.path or "/")
