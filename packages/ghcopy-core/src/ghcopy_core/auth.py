"""Bearer-token resolution."""

from __future__ import annotations

import os

from ghcopy_core.config.models import GhCopyConfig


def resolve_token(config: GhCopyConfig, cli_token: str | None = None) -> str | None:
    """Explicit token first, then the env var named by ``auth.token_env``."""
    if cli_token:
        return cli_token.strip() or None
    value = os.environ.get(config.auth.token_env, "").strip()
    return value or None


def mask_token(token: str | None) -> str:
    """Render a token safe for logs: first four characters, rest hidden."""
    if not token:
        return "(none)"
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}****"
