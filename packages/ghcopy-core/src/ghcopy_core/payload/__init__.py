"""Minimal decoders for contents-API payloads."""

from ghcopy_core.payload.base64_codec import decode_base64
from ghcopy_core.payload.json_fields import (
    FieldState,
    extract_field,
    extract_int_field,
    extract_optional_field,
    field_state,
)
from ghcopy_core.payload.listing import parse_entry, parse_listing, split_objects

__all__ = [
    "FieldState",
    "decode_base64",
    "extract_field",
    "extract_int_field",
    "extract_optional_field",
    "field_state",
    "parse_entry",
    "parse_listing",
    "split_objects",
]
