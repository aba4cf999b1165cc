"""Pydantic models for GitHub resources and contents-API records."""

from __future__ import annotations

from enum import Enum
from typing import Literal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, model_validator

WEB_HOST = "github.com"
RAW_HOST = "raw.githubusercontent.com"
API_HOST = "api.github.com"
DEFAULT_REF = "main"


class ResourceKind(str, Enum):
    """What a classified URL points at."""

    file = "file"
    folder = "folder"
    repository = "repository"


class ResourceDescriptor(BaseModel):
    """A classified GitHub resource. Immutable once built.

    ``path`` and ``ref`` hold decoded text; URL builders quote them again.
    """

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    path: str | None = None
    ref: str | None = None
    kind: ResourceKind

    @model_validator(mode="after")
    def _repository_has_no_path(self) -> ResourceDescriptor:
        if self.kind is ResourceKind.repository and self.path:
            raise ValueError("repository descriptors cannot carry a path")
        return self

    @property
    def effective_ref(self) -> str:
        return self.ref or DEFAULT_REF

    @property
    def name(self) -> str | None:
        """Last path segment, or None for a path-less resource."""
        if not self.path:
            return None
        return self.path.rstrip("/").rsplit("/", 1)[-1] or None

    def api_path(self) -> str:
        """Contents-API path, ``repos/{owner}/{repo}/contents/{path}``."""
        return f"repos/{self.owner}/{self.repo}/contents/{_quote_path(self.path or '')}"

    def raw_url(self, host: str = RAW_HOST) -> str | None:
        """Direct raw-content URL, only derivable for files."""
        if self.kind is not ResourceKind.file or not self.path:
            return None
        return (
            f"https://{host}/{self.owner}/{self.repo}/"
            f"{_quote_path(self.effective_ref)}/{_quote_path(self.path)}"
        )

    def child(self, path: str, kind: ResourceKind) -> ResourceDescriptor:
        """Descriptor for an entry below this one, sharing owner/repo/ref."""
        return ResourceDescriptor(
            owner=self.owner, repo=self.repo, path=path, ref=self.ref, kind=kind
        )

    def __str__(self) -> str:
        location = f"{self.owner}/{self.repo}@{self.effective_ref}"
        return f"{location}:{self.path}" if self.path else location


class ListingEntry(BaseModel):
    """One record of a contents-API response."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    path: str
    type: Literal["file", "dir", "submodule", "symlink"]
    sha: str = ""
    size: int = Field(default=0, ge=0)
    download_url: str | None = None
    content: str | None = None
    encoding: str | None = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


def _quote_path(value: str) -> str:
    return quote(value, safe="/")
