"""Single-resource retrieval with raw/API fallback."""

from ghcopy_core.fetcher.fetcher import REDIRECT_STATUSES, ContentFetcher, split_https_url
from ghcopy_core.fetcher.models import FetchOutcome
from ghcopy_core.fetcher.retry import RetryPolicy

__all__ = [
    "REDIRECT_STATUSES",
    "ContentFetcher",
    "FetchOutcome",
    "RetryPolicy",
    "split_https_url",
]
