"""Locate ghcopy.yaml, expand ${VAR} references and validate it."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import GhCopyConfig

PROJECT_CONFIG = "ghcopy.yaml"
USER_CONFIG = Path(".ghcopy") / "config.yaml"

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def config_candidates(cli_path: str | None = None) -> Iterator[Path]:
    """Yield config locations in lookup order: --config, project, user.

    An explicit *cli_path* that does not exist is an error rather than a
    silent fall-through to the next location.
    """
    if cli_path:
        explicit = Path(cli_path)
        if not explicit.is_file():
            raise ValueError(f"Config file not found: {cli_path}")
        yield explicit
    yield Path.cwd() / PROJECT_CONFIG
    yield Path.home() / USER_CONFIG


def locate_config(cli_path: str | None = None) -> tuple[Path | None, dict]:
    """Return the first non-empty config file and its raw mapping.

    ``(None, {})`` means no file applies and built-in defaults are used.
    """
    for path in config_candidates(cli_path):
        if not path.is_file():
            continue
        raw = _read_mapping(path)
        if raw is not None:
            return path, raw
    return None, {}


def load_config(cli_path: str | None = None) -> GhCopyConfig:
    path, raw = locate_config(cli_path)
    try:
        return GhCopyConfig.model_validate(_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def _read_mapping(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(
            f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}"
        )
    return raw


def _expand_env_vars(value: object) -> object:
    """Substitute ${VAR} in every string of a parsed YAML tree; unset vars become ''."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


# Default YAML template for `ghcopy config init`
DEFAULT_CONFIG_TEMPLATE = """\
# ghcopy.yaml

# HTTP transport
http:
  user_agent: "ghcopy/0.1.0"
  timeout: 30                  # seconds a connection may stay silent
  max_retries: 3               # extra attempts for 5xx, 429 and transport errors
  retry_delay: 1.0             # first backoff in seconds, doubled per attempt
  max_redirects: 5

# Hosts (override for GitHub Enterprise mirrors)
hosts:
  web: "github.com"
  raw: "raw.githubusercontent.com"
  api: "api.github.com"

# Authentication
auth:
  token_env: "GITHUB_TOKEN"    # bearer token read from this variable

# Folder mirroring
mirror:
  force: false                 # overwrite existing files instead of renaming
  strict: false                # fail an entry on conflict instead of renaming
  concurrency: 4               # sibling files fetched at once

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
