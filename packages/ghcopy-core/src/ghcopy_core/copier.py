"""GitHubCopier: turns a source URL into a local file or directory tree."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ghcopy_core.config.models import GhCopyConfig, HostSettings, MirrorSettings
from ghcopy_core.errors import UnsupportedOperationError
from ghcopy_core.fetcher.fetcher import ContentFetcher
from ghcopy_core.github.models import ListingEntry, ResourceDescriptor, ResourceKind
from ghcopy_core.github.url import parse_github_url
from ghcopy_core.mirror.engine import MirrorEngine
from ghcopy_core.mirror.filesystem import choose_destination, ensure_destination_dir, write_file
from ghcopy_core.mirror.models import MirrorEvent, MirrorOutcome, MirrorPlan
from ghcopy_core.mirror.observer import LoggingObserver, MirrorObserver
from ghcopy_core.wire.client import WireHttpClient

logger = logging.getLogger(__name__)


class GitHubCopier:
    """Dispatches a URL to a single-file download or a folder mirror."""

    def __init__(
        self,
        fetcher: ContentFetcher,
        *,
        hosts: HostSettings | None = None,
        settings: MirrorSettings | None = None,
        observer: MirrorObserver | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.hosts = hosts or HostSettings()
        self.settings = settings or MirrorSettings()
        self.observer = observer or LoggingObserver()

    def resolve(self, source: str) -> ResourceDescriptor:
        """Classify *source*, rejecting whole-repository URLs."""
        descriptor = parse_github_url(source, web_host=self.hosts.web, raw_host=self.hosts.raw)
        if descriptor.kind is ResourceKind.repository:
            raise UnsupportedOperationError(
                f"Repository downloads are not supported: {descriptor}. "
                "Use a /tree/<ref>/ URL to copy a folder."
            )
        return descriptor

    async def copy(
        self,
        source: str,
        destination: Path | str | None = None,
        force: bool | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> MirrorOutcome:
        """Copy the resource at *source* to *destination*.

        Files default to their own name in the working directory and folders
        to their last path segment (the repository name for a root tree URL).
        """
        descriptor = self.resolve(source)
        force = self.settings.force if force is None else force

        if descriptor.kind is ResourceKind.file:
            return await self._copy_file(descriptor, destination, force)

        target = Path(destination) if destination is not None else Path(
            descriptor.name or descriptor.repo
        )
        logger.info("Mirroring %s into %s", descriptor, target)
        return await self._engine().mirror(descriptor, target, force, cancel=cancel)

    async def plan(self, source: str) -> tuple[ResourceDescriptor, MirrorPlan]:
        """Describe what ``copy`` would fetch, without writing."""
        descriptor = self.resolve(source)
        if descriptor.kind is ResourceKind.file:
            name = descriptor.name or descriptor.path or ""
            entry = ListingEntry(name=name, path=descriptor.path or name, type="file")
            return descriptor, MirrorPlan(entries=[entry])
        return descriptor, await self._engine().plan(descriptor)

    def _engine(self) -> MirrorEngine:
        return MirrorEngine(
            self.fetcher,
            observer=self.observer,
            concurrency=self.settings.concurrency,
            strict=self.settings.strict,
        )

    async def _copy_file(
        self, descriptor: ResourceDescriptor, destination: Path | str | None, force: bool
    ) -> MirrorOutcome:
        name = descriptor.name or descriptor.repo
        target = Path(destination) if destination is not None else Path(name)
        if target.is_dir():
            target = target / name

        fetched = await self.fetcher.fetch(descriptor)
        logger.debug("Fetched %s via %s (%d bytes)", descriptor, fetched.source, len(fetched.data))

        outcome = MirrorOutcome()
        if ensure_destination_dir(target.parent):
            outcome.directories += 1
        target = choose_destination(target, force=force, strict=self.settings.strict)
        await asyncio.to_thread(write_file, target, fetched.data, overwrite=force)
        outcome.record_write(target, len(fetched.data))
        self.observer.on_event(
            MirrorEvent(
                kind="file_written",
                path=descriptor.path or name,
                destination=target,
                size=len(fetched.data),
                detail=fetched.source,
            )
        )
        return outcome


def create_copier(
    config: GhCopyConfig,
    token: str | None = None,
    observer: MirrorObserver | None = None,
) -> GitHubCopier:
    """Wire a client, fetcher and copier together from app-level config."""
    client = WireHttpClient(config.http.user_agent, config.http.timeout)
    fetcher = ContentFetcher(client, settings=config.http, hosts=config.hosts, token=token)
    return GitHubCopier(fetcher, hosts=config.hosts, settings=config.mirror, observer=observer)
