"""Result model for single-file fetches."""

from typing import Literal

from pydantic import BaseModel, Field


class FetchOutcome(BaseModel):
    """Bytes of one file plus where they came from."""

    data: bytes
    size_hint: int = Field(default=0, ge=0)
    source: Literal["raw", "api-inline", "api-download"] = "raw"
