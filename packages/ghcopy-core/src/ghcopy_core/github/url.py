"""Classify GitHub web and raw-content URLs into resource descriptors."""

from __future__ import annotations

from urllib.parse import unquote, urlsplit

from ghcopy_core.errors import InvalidUrlError
from ghcopy_core.github.models import RAW_HOST, WEB_HOST, ResourceDescriptor, ResourceKind

_INDICATORS = {
    "blob": ResourceKind.file,
    "tree": ResourceKind.folder,
}


def parse_github_url(
    source: str, *, web_host: str = WEB_HOST, raw_host: str = RAW_HOST
) -> ResourceDescriptor:
    """Parse *source* into a ResourceDescriptor.

    Accepted forms::

        https://<web>/{owner}/{repo}/blob/{ref}/{path...}   -> file
        https://<web>/{owner}/{repo}/tree/{ref}/{path...}   -> folder
        https://<web>/{owner}/{repo}                        -> repository
        https://<raw>/{owner}/{repo}/{ref}/{path...}        -> file

    Raises InvalidUrlError for any other scheme, host or shape.
    """
    source = source.strip()
    parts = urlsplit(source)
    if parts.scheme != "https":
        raise InvalidUrlError(source, "only https URLs are supported")

    segments = [unquote(s) for s in parts.path.split("/") if s]
    if parts.netloc == web_host:
        return _parse_web(source, segments)
    if parts.netloc == raw_host:
        return _parse_raw(source, segments)
    raise InvalidUrlError(source, f"host must be {web_host} or {raw_host}")


def _parse_web(source: str, segments: list[str]) -> ResourceDescriptor:
    if len(segments) < 2:
        raise InvalidUrlError(source, "expected /{owner}/{repo}")
    owner, repo = segments[0], segments[1]

    if len(segments) < 4:
        return ResourceDescriptor(
            owner=owner, repo=_strip_git_suffix(repo), kind=ResourceKind.repository
        )

    indicator, ref = segments[2], segments[3]
    kind = _INDICATORS.get(indicator)
    if kind is None:
        raise InvalidUrlError(source, f"unknown URL type {indicator!r} (expected blob or tree)")
    path = "/".join(segments[4:]) or None
    if kind is ResourceKind.file and path is None:
        raise InvalidUrlError(source, "blob URL has no file path")
    return ResourceDescriptor(owner=owner, repo=repo, path=path, ref=ref, kind=kind)


def _parse_raw(source: str, segments: list[str]) -> ResourceDescriptor:
    if len(segments) < 3:
        raise InvalidUrlError(source, "expected /{owner}/{repo}/{ref}/{path}")
    owner, repo, ref = segments[0], segments[1], segments[2]
    path = "/".join(segments[3:]) or None
    if path is None:
        return ResourceDescriptor(
            owner=owner, repo=repo, ref=ref, kind=ResourceKind.repository
        )
    return ResourceDescriptor(
        owner=owner, repo=repo, path=path, ref=ref, kind=ResourceKind.file
    )


def _strip_git_suffix(repo: str) -> str:
    return repo[:-4] if repo.endswith(".git") and len(repo) > 4 else repo
