from pydantic import BaseModel, Field
from typing import Literal

from ghcopy_core.github.models import API_HOST, RAW_HOST, WEB_HOST


class HttpSettings(BaseModel):
    user_agent: str = "ghcopy/0.1.0"
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    max_redirects: int = Field(default=5, ge=0)


class HostSettings(BaseModel):
    web: str = WEB_HOST
    raw: str = RAW_HOST
    api: str = API_HOST


class AuthConfig(BaseModel):
    token_env: str = "GITHUB_TOKEN"


class MirrorSettings(BaseModel):
    force: bool = False
    strict: bool = False
    concurrency: int = Field(default=4, gt=0)


class GhCopyConfig(BaseModel):
    http: HttpSettings = Field(default_factory=HttpSettings)
    hosts: HostSettings = Field(default_factory=HostSettings)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    mirror: MirrorSettings = Field(default_factory=MirrorSettings)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
