"""GitHub resource models and URL classification."""

from ghcopy_core.github.models import (
    API_HOST,
    DEFAULT_REF,
    RAW_HOST,
    WEB_HOST,
    ListingEntry,
    ResourceDescriptor,
    ResourceKind,
)
from ghcopy_core.github.url import parse_github_url

__all__ = [
    "API_HOST",
    "DEFAULT_REF",
    "RAW_HOST",
    "WEB_HOST",
    "ListingEntry",
    "ResourceDescriptor",
    "ResourceKind",
    "parse_github_url",
]
