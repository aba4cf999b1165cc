"""ghcopy-core: download files and folders from GitHub without git."""

from ghcopy_core.copier import GitHubCopier, create_copier
from ghcopy_core.errors import GhCopyError
from ghcopy_core.fetcher import ContentFetcher, FetchOutcome
from ghcopy_core.github import ListingEntry, ResourceDescriptor, ResourceKind, parse_github_url
from ghcopy_core.mirror import MirrorEngine, MirrorOutcome
from ghcopy_core.wire import WireHttpClient

__version__ = "0.1.0"

__all__ = [
    "ContentFetcher",
    "FetchOutcome",
    "GhCopyError",
    "GitHubCopier",
    "ListingEntry",
    "MirrorEngine",
    "MirrorOutcome",
    "ResourceDescriptor",
    "ResourceKind",
    "WireHttpClient",
    "create_copier",
    "parse_github_url",
]
