"""Tests for ghcopy_core.github: URL classification and descriptor helpers."""

import pytest
from pydantic import ValidationError

from ghcopy_core.errors import InvalidUrlError
from ghcopy_core.github import ResourceDescriptor, ResourceKind, parse_github_url


# ── parse_github_url: web host ──────────────────────────────────────


class TestParseWebUrl:
    def test_blob_url_is_file(self):
        d = parse_github_url("https://github.com/o/r/blob/main/a/b.txt")
        assert d.kind is ResourceKind.file
        assert (d.owner, d.repo, d.ref, d.path) == ("o", "r", "main", "a/b.txt")

    def test_tree_url_is_folder(self):
        d = parse_github_url("https://github.com/o/r/tree/main/dir")
        assert d.kind is ResourceKind.folder
        assert d.path == "dir"
        assert d.ref == "main"

    def test_tree_url_without_path_is_root_folder(self):
        d = parse_github_url("https://github.com/o/r/tree/v1.2")
        assert d.kind is ResourceKind.folder
        assert d.ref == "v1.2"
        assert d.path is None

    def test_repo_url_is_repository(self):
        d = parse_github_url("https://github.com/o/r")
        assert d.kind is ResourceKind.repository
        assert d.path is None

    def test_repo_url_strips_git_suffix(self):
        d = parse_github_url("https://github.com/o/r.git")
        assert d.repo == "r"

    def test_trailing_slash_is_ignored(self):
        d = parse_github_url("https://github.com/o/r/tree/main/dir/")
        assert d.path == "dir"

    def test_percent_encoded_path_is_decoded(self):
        d = parse_github_url("https://github.com/o/r/blob/main/my%20notes.md")
        assert d.path == "my notes.md"

    def test_unknown_indicator_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("https://github.com/o/r/issues/12")

    def test_blob_without_path_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("https://github.com/o/r/blob/main")

    def test_owner_only_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("https://github.com/o")


# ── parse_github_url: raw host and rejects ──────────────────────────


class TestParseRawAndRejects:
    def test_raw_url_is_file(self):
        d = parse_github_url("https://raw.githubusercontent.com/o/r/dev/src/x.py")
        assert d.kind is ResourceKind.file
        assert (d.owner, d.repo, d.ref, d.path) == ("o", "r", "dev", "src/x.py")

    def test_raw_url_too_short_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("https://raw.githubusercontent.com/o/r")

    def test_unsupported_host_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("https://gitlab.com/o/r/blob/main/a.txt")

    def test_host_match_is_exact(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("https://GitHub.com/o/r/blob/main/a.txt")

    def test_http_scheme_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("http://github.com/o/r/blob/main/a.txt")

    def test_not_a_url_rejected(self):
        with pytest.raises(InvalidUrlError):
            parse_github_url("o/r")

    def test_custom_hosts(self):
        d = parse_github_url(
            "https://git.example.com/o/r/tree/main/docs", web_host="git.example.com"
        )
        assert d.kind is ResourceKind.folder


# ── ResourceDescriptor ──────────────────────────────────────────────


class TestResourceDescriptor:
    def test_repository_with_path_is_invalid(self):
        with pytest.raises(ValidationError):
            ResourceDescriptor(owner="o", repo="r", path="x", kind=ResourceKind.repository)

    def test_descriptor_is_frozen(self):
        d = ResourceDescriptor(owner="o", repo="r", path="x", kind=ResourceKind.file)
        with pytest.raises(ValidationError):
            d.path = "y"

    def test_raw_url_defaults_ref_to_main(self):
        d = ResourceDescriptor(owner="o", repo="r", path="a b.txt", kind=ResourceKind.file)
        assert d.raw_url() == "https://raw.githubusercontent.com/o/r/main/a%20b.txt"

    def test_raw_url_only_for_files(self):
        d = ResourceDescriptor(owner="o", repo="r", path="docs", kind=ResourceKind.folder)
        assert d.raw_url() is None

    def test_api_path(self):
        d = ResourceDescriptor(owner="o", repo="r", path="docs/x", kind=ResourceKind.folder)
        assert d.api_path() == "repos/o/r/contents/docs/x"

    def test_child_shares_owner_repo_ref(self):
        d = ResourceDescriptor(owner="o", repo="r", path="docs", ref="v2", kind=ResourceKind.folder)
        c = d.child("docs/a.txt", ResourceKind.file)
        assert (c.owner, c.repo, c.ref, c.kind) == ("o", "r", "v2", ResourceKind.file)

    def test_name_is_last_segment(self):
        d = ResourceDescriptor(owner="o", repo="r", path="a/b/c.txt", kind=ResourceKind.file)
        assert d.name == "c.txt"
        assert ResourceDescriptor(owner="o", repo="r", kind=ResourceKind.folder).name is None
