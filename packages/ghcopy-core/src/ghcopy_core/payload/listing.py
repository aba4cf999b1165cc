"""Decode contents-API responses into ListingEntry records."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ghcopy_core.errors import ParseError
from ghcopy_core.github.models import ListingEntry
from ghcopy_core.payload.json_fields import (
    extract_field,
    extract_int_field,
    extract_optional_field,
)

logger = logging.getLogger(__name__)


def split_objects(text: str) -> list[str]:
    """Split a JSON array of objects into one substring per top-level object.

    Braces are counted only outside string literals, so ``{`` or ``}`` inside
    a name or content value do not affect nesting. Anything between objects
    (commas, whitespace, the closing bracket) is ignored, as is a trailing
    object that never closes.
    """
    body = text.strip()
    if not body.startswith("["):
        raise ParseError("Expected JSON array")

    objects: list[str] = []
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for i in range(1, len(body)):
        ch = body[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                objects.append(body[start : i + 1])
    return objects


def parse_entry(text: str) -> ListingEntry:
    """Decode one flat object into a ListingEntry.

    Raises ParseError when the object has no name or an unusable shape.
    """
    name = extract_field(text, "name")
    if not name:
        raise ParseError("Object has no 'name' field")
    try:
        return ListingEntry(
            name=name,
            path=extract_field(text, "path") or name,
            type=extract_field(text, "type"),
            sha=extract_field(text, "sha"),
            size=extract_int_field(text, "size"),
            download_url=extract_optional_field(text, "download_url"),
            content=extract_optional_field(text, "content"),
            encoding=extract_optional_field(text, "encoding"),
        )
    except ValidationError as e:
        raise ParseError(f"Invalid listing entry {name!r}: {e.error_count()} error(s)") from e


def parse_listing(text: str) -> list[ListingEntry]:
    """Decode a directory listing, skipping records that fail to decode."""
    entries: list[ListingEntry] = []
    for obj in split_objects(text):
        try:
            entries.append(parse_entry(obj))
        except ParseError as e:
            logger.debug("Skipping undecodable listing record: %s", e)
    return entries
