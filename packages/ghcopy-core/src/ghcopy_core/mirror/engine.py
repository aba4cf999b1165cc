"""MirrorEngine: copies a remote folder tree to local storage."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ghcopy_core.errors import GhCopyError, InvalidOperationError
from ghcopy_core.fetcher.fetcher import ContentFetcher
from ghcopy_core.github.models import ListingEntry, ResourceDescriptor, ResourceKind
from ghcopy_core.mirror.filesystem import choose_destination, ensure_destination_dir, write_file
from ghcopy_core.mirror.models import EventKind, MirrorEvent, MirrorOutcome, MirrorPlan
from ghcopy_core.mirror.observer import LoggingObserver, MirrorObserver

logger = logging.getLogger(__name__)

_Pending = tuple[ResourceDescriptor, Path, list[ListingEntry] | None]


def _unsafe_name(name: str) -> bool:
    return name in (".", "..") or "/" in name or "\\" in name or "\x00" in name


class MirrorEngine:
    """Walks a folder resource depth-first and writes every file below it.

    Traversal uses an explicit work-list of pending directories. Within one
    directory, files are fetched first (up to ``concurrency`` at once), then
    subdirectories are descended in listing order. A failing file or
    subtree listing is recorded in the outcome and the walk continues.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        *,
        observer: MirrorObserver | None = None,
        concurrency: int = 1,
        strict: bool = False,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.fetcher = fetcher
        self.observer = observer or LoggingObserver()
        self.concurrency = concurrency
        self.strict = strict

    async def mirror(
        self,
        descriptor: ResourceDescriptor,
        destination_root: Path | str,
        force_overwrite: bool = False,
        *,
        cancel: asyncio.Event | None = None,
    ) -> MirrorOutcome:
        """Mirror *descriptor* (a folder) under *destination_root*.

        A failure listing the root folder propagates; everything below it
        is best-effort.
        """
        if descriptor.kind is not ResourceKind.folder:
            raise InvalidOperationError(
                "mirror", f"{descriptor} is a {descriptor.kind.value}, not a folder"
            )

        root = Path(destination_root)
        outcome = MirrorOutcome()
        ensure_destination_dir(root)
        outcome.directories += 1
        self._emit("directory", descriptor.path or "", destination=root)

        root_entries = await self.fetcher.list_folder(descriptor)
        self._emit("listing", descriptor.path or "", size=len(root_entries))

        semaphore = asyncio.Semaphore(self.concurrency)
        pending: list[_Pending] = [(descriptor, root, root_entries)]
        while pending:
            if self._cancelled(cancel, outcome):
                break
            current, local_dir, entries = pending.pop()
            if entries is None:
                entries = await self._list_best_effort(current, outcome)
            subdirs = await self._mirror_directory(
                current, local_dir, entries, force_overwrite, outcome, semaphore, cancel
            )
            pending.extend((child, child_dir, None) for child, child_dir in reversed(subdirs))

        logger.info(
            "Mirrored %s: %d files, %d failures",
            descriptor, outcome.files_written, len(outcome.failures),
        )
        return outcome

    async def plan(self, descriptor: ResourceDescriptor) -> MirrorPlan:
        """List every entry below *descriptor* in pre-order without writing anything.

        Subtrees that cannot be listed are reported in ``failures`` so a dry
        run shows the same gaps a real mirror would.
        """
        if descriptor.kind is not ResourceKind.folder:
            raise InvalidOperationError(
                "plan", f"{descriptor} is a {descriptor.kind.value}, not a folder"
            )
        result = MirrorPlan()
        stack = [iter(await self.fetcher.list_folder(descriptor))]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            result.entries.append(entry)
            if entry.is_dir:
                child = descriptor.child(entry.path, ResourceKind.folder)
                stack.append(iter(await self._list_best_effort(child, result)))
        return result

    # ------------------------------------------------------------------
    # Traversal steps
    # ------------------------------------------------------------------

    async def _mirror_directory(
        self,
        current: ResourceDescriptor,
        local_dir: Path,
        entries: list[ListingEntry],
        force: bool,
        outcome: MirrorOutcome,
        semaphore: asyncio.Semaphore,
        cancel: asyncio.Event | None,
    ) -> list[tuple[ResourceDescriptor, Path]]:
        files: list[ListingEntry] = []
        subdirs: list[tuple[ResourceDescriptor, Path]] = []
        # Sibling conflict resolution and creation must not interleave
        lock = asyncio.Lock()

        for entry in entries:
            if _unsafe_name(entry.name):
                error = InvalidOperationError("mirror", f"refusing unsafe entry name {entry.name!r}")
                outcome.record_failure(entry.path, error)
                self._emit("file_failed", entry.path, detail=str(error))
            elif entry.is_file:
                files.append(entry)
            elif entry.is_dir:
                child_dir = local_dir / entry.name
                try:
                    ensure_destination_dir(child_dir)
                except GhCopyError as e:
                    outcome.record_failure(entry.path, e)
                    self._emit("listing_failed", entry.path, detail=str(e))
                    continue
                outcome.directories += 1
                self._emit("directory", entry.path, destination=child_dir)
                subdirs.append((current.child(entry.path, ResourceKind.folder), child_dir))
            else:
                # submodules and symlinks are not materialized
                outcome.skipped += 1
                self._emit("skipped", entry.path, detail=entry.type)

        await asyncio.gather(
            *(
                self._mirror_file(
                    current, entry, local_dir, lock, force, outcome, semaphore, cancel
                )
                for entry in files
            )
        )
        return subdirs

    async def _mirror_file(
        self,
        current: ResourceDescriptor,
        entry: ListingEntry,
        local_dir: Path,
        lock: asyncio.Lock,
        force: bool,
        outcome: MirrorOutcome,
        semaphore: asyncio.Semaphore,
        cancel: asyncio.Event | None,
    ) -> None:
        async with semaphore:
            if self._cancelled(cancel, outcome):
                return
            child = current.child(entry.path, ResourceKind.file)
            try:
                fetched = await self.fetcher.fetch(child)
                async with lock:
                    target = choose_destination(
                        local_dir / entry.name, force=force, strict=self.strict
                    )
                    await asyncio.to_thread(write_file, target, fetched.data, overwrite=force)
            except GhCopyError as e:
                outcome.record_failure(entry.path, e)
                self._emit("file_failed", entry.path, detail=str(e))
                return

        outcome.record_write(target, len(fetched.data))
        self._emit("file_written", entry.path, destination=target, size=len(fetched.data))

    async def _list_best_effort(
        self, descriptor: ResourceDescriptor, sink: MirrorOutcome | MirrorPlan
    ) -> list[ListingEntry]:
        """List a subtree, degrading to an empty listing on failure."""
        try:
            entries = await self.fetcher.list_folder(descriptor)
        except GhCopyError as e:
            sink.record_failure(descriptor.path or "", e)
            self._emit("listing_failed", descriptor.path or "", detail=str(e))
            return []
        self._emit("listing", descriptor.path or "", size=len(entries))
        return entries

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _cancelled(cancel: asyncio.Event | None, outcome: MirrorOutcome) -> bool:
        if cancel is not None and cancel.is_set():
            outcome.cancelled = True
            return True
        return False

    def _emit(self, kind: EventKind, path: str, **fields: object) -> None:
        try:
            self.observer.on_event(MirrorEvent(kind=kind, path=path, **fields))
        except Exception:
            logger.exception("Mirror observer failed on %s event for %s", kind, path)
