"""ContentFetcher: raw-content first, contents API as fallback."""

from __future__ import annotations

import logging
from functools import partial
from urllib.parse import quote, urljoin, urlsplit

from ghcopy_core.config.models import HostSettings, HttpSettings
from ghcopy_core.errors import (
    GhCopyError,
    HttpStatusError,
    InvalidOperationError,
    InvalidUrlError,
    NetworkError,
    ParseError,
    UnsupportedOperationError,
)
from ghcopy_core.fetcher.models import FetchOutcome
from ghcopy_core.fetcher.retry import RetryPolicy
from ghcopy_core.github.models import ListingEntry, ResourceDescriptor, ResourceKind
from ghcopy_core.payload import decode_base64, parse_entry, parse_listing
from ghcopy_core.wire.client import WireHttpClient

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def split_https_url(url: str) -> tuple[str, str]:
    """Split an https URL into (host, path-with-query)."""
    parts = urlsplit(url)
    if parts.scheme != "https" or not parts.netloc:
        raise InvalidUrlError(url, "only https URLs are supported")
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return parts.netloc, path


def _strip_line_breaks(content: str) -> str:
    # The API wraps base64 at 60 columns; depending on how the value was
    # extracted the breaks are either escaped (\n) or real newlines.
    return (
        content.replace("\\n", "").replace("\\r", "").replace("\n", "").replace("\r", "")
    )


class ContentFetcher:
    """Obtains file bytes and folder listings for resource descriptors.

    Redirect-following and retries live here, one request at a time;
    WireHttpClient only reports what the server said.
    """

    def __init__(
        self,
        client: WireHttpClient,
        *,
        settings: HttpSettings | None = None,
        hosts: HostSettings | None = None,
        token: str | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or HttpSettings()
        self.hosts = hosts or HostSettings()
        self._token = token or None
        self._retry = RetryPolicy(
            max_retries=self.settings.max_retries, delay=self.settings.retry_delay
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def fetch(self, descriptor: ResourceDescriptor) -> FetchOutcome:
        """Fetch the bytes of a file resource."""
        if descriptor.kind is ResourceKind.repository:
            raise UnsupportedOperationError(
                f"Repository downloads are not supported: {descriptor}"
            )
        if descriptor.kind is ResourceKind.folder:
            raise InvalidOperationError(
                "fetch", f"{descriptor} is a folder; use list_folder"
            )

        raw_url = descriptor.raw_url(self.hosts.raw)
        if raw_url is not None:
            try:
                data = await self.get_url(raw_url)
                return FetchOutcome(data=data, size_hint=len(data), source="raw")
            except GhCopyError as e:
                logger.debug("Raw fetch failed for %s, falling back to API: %s", descriptor, e)

        return await self._fetch_via_api(descriptor)

    async def list_folder(self, descriptor: ResourceDescriptor) -> list[ListingEntry]:
        """List the entries of a folder resource via the contents API."""
        if descriptor.kind is ResourceKind.repository:
            raise UnsupportedOperationError(
                f"Repository listings are not supported: {descriptor}"
            )
        if descriptor.kind is not ResourceKind.folder:
            raise InvalidOperationError("list_folder", f"{descriptor} is not a folder")

        text = await self._get_api_text(descriptor)
        if not text.lstrip().startswith("["):
            raise InvalidOperationError("list_folder", f"{descriptor} is not a directory")
        entries = parse_listing(text)
        logger.debug("Listed %s: %d entries", descriptor, len(entries))
        return entries

    def api_url(self, descriptor: ResourceDescriptor) -> str:
        """Contents API URL, always pinned to the ref the raw host is asked for."""
        ref = quote(descriptor.effective_ref, safe="")
        return f"https://{self.hosts.api}/{descriptor.api_path()}?ref={ref}"

    async def get_url(self, url: str) -> bytes:
        """GET *url*, following redirects. Each hop is retried on its own."""
        current = url
        for _ in range(self.settings.max_redirects + 1):
            host, path = split_https_url(current)
            request = partial(self.client.get, host, path, self._headers_for(host))
            try:
                return await self._retry.run(request, f"GET {current}")
            except HttpStatusError as e:
                if e.status not in REDIRECT_STATUSES or not e.location:
                    raise
                target = urljoin(current, e.location)
                logger.debug("Following %d redirect %s -> %s", e.status, current, target)
                current = target
        raise NetworkError(
            f"Too many redirects fetching {url} (limit {self.settings.max_redirects})"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _headers_for(self, host: str) -> dict[str, str]:
        if self._token and host in (self.hosts.api, self.hosts.raw):
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    async def _get_api_text(self, descriptor: ResourceDescriptor) -> str:
        body = await self.get_url(self.api_url(descriptor))
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Invalid UTF-8 in API response for {descriptor}: {e}") from e

    async def _fetch_via_api(self, descriptor: ResourceDescriptor) -> FetchOutcome:
        text = await self._get_api_text(descriptor)
        if text.lstrip().startswith("["):
            raise InvalidOperationError("fetch", f"{descriptor} is a directory")
        entry = parse_entry(text)

        if entry.content is not None and entry.encoding == "base64":
            data = decode_base64(_strip_line_breaks(entry.content))
            return FetchOutcome(
                data=data, size_hint=entry.size or len(data), source="api-inline"
            )
        if entry.download_url:
            data = await self.get_url(entry.download_url)
            return FetchOutcome(
                data=data, size_hint=entry.size or len(data), source="api-download"
            )
        raise NetworkError(f"No content available for {descriptor}", retryable=False)
