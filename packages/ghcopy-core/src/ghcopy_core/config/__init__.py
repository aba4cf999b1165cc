from .loader import DEFAULT_CONFIG_TEMPLATE, config_candidates, load_config, locate_config
from .models import (
    AuthConfig,
    GhCopyConfig,
    HostSettings,
    HttpSettings,
    MirrorSettings,
)

__all__ = [
    "AuthConfig",
    "DEFAULT_CONFIG_TEMPLATE",
    "GhCopyConfig",
    "HostSettings",
    "HttpSettings",
    "MirrorSettings",
    "config_candidates",
    "load_config",
    "locate_config",
]
