"""Text encoding for leaf values: strings, byte sequences and scalars."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

# Strings longer than this are cut down before escaping.
MAX_STRING_LEN = 200

# Appended to a string that was cut down.
TRUNCATION_MARKER = "[...]"

# Strings starting with this prefix are most likely URLs and are never cut.
UNTRUNCATED_PREFIX = "http"

ByteSequence = Union[bytes, bytearray, memoryview]


def sanitize_string(value: str) -> str:
    """Shorten and escape a string value."""
    if not value.startswith(UNTRUNCATED_PREFIX) and len(value) > MAX_STRING_LEN:
        value = value[:MAX_STRING_LEN] + TRUNCATION_MARKER
    return escape_string(value)


def escape_string(value: str) -> str:
    """Escape everything except printable low ASCII, and both quote characters."""
    out = []
    for ch in value:
        if " " <= ch <= "~" and ch != '"' and ch != "'":
            out.append(ch)
            continue
        code = ord(ch)
        if code > 0xFFFF:
            # Astral characters are written as a UTF-16 surrogate pair.
            code -= 0x10000
            out.append("\\u%04x" % (0xD800 + (code >> 10)))
            out.append("\\u%04x" % (0xDC00 + (code & 0x3FF)))
        else:
            out.append("\\u%04x" % code)
    return "".join(out)


def quote_bytes(value: Optional[ByteSequence]) -> str:
    """Return a byte sequence as a double-quoted, octal-escaped literal."""
    if value is None:
        return '""'

    out = ['"']
    for b in bytes(value):
        if b == 0x5C or b == 0x22:  # backslash, double quote
            out.append("\\" + chr(b))
        elif 32 <= b < 127:
            out.append(chr(b))
        else:
            out.append("\\%03o" % b)
    out.append('"')
    return "".join(out)


def format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    return str(value)
