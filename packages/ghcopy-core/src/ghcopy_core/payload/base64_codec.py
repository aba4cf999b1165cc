"""Minimal base64 decoder for contents-API payloads.

Accepted grammar: optional surrounding whitespace, then characters from
``A-Z a-z 0-9 + /`` interleaved with CR/LF line breaks and ``=`` padding in
any position. Padding is not required, so the input length need not be a
multiple of four. Leftover bits that do not fill a byte are dropped.
"""

from __future__ import annotations

from ghcopy_core.errors import ParseError

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_VALUES = {ch: i for i, ch in enumerate(_ALPHABET)}


def decode_base64(text: str) -> bytes:
    """Decode *text* to bytes, raising ParseError on characters outside the alphabet."""
    cleaned = text.strip().replace("\r", "").replace("\n", "").replace("=", "")
    if not cleaned:
        return b""

    out = bytearray()
    buffer = 0
    bits = 0
    for position, ch in enumerate(cleaned):
        value = _VALUES.get(ch)
        if value is None:
            raise ParseError(f"Invalid base64 character {ch!r} at position {position}")
        buffer = (buffer << 6) | value
        bits += 6
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)
