"""Single-line field splitter for platform export rows.

The export is comma separated with optional double-quoted fields that may
contain the separator. Quote characters only toggle the quoted state and are
dropped; a doubled quote inside a quoted field is *not* treated as an escaped
literal quote (``"a""b"`` yields ``ab``). Every field is whitespace-trimmed.
"""

from __future__ import annotations

_QUOTE = '"'


def split_row(line: str, separator: str = ",") -> list[str]:
    """Split ``line`` into trimmed fields, honoring double-quoted segments."""

    if len(separator) != 1:
        raise ValueError(f"separator must be a single character, got {separator!r}")

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for ch in line:
        if ch == _QUOTE:
            in_quotes = not in_quotes
        elif ch == separator and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    fields.append("".join(current).strip())
    return fields


__all__ = ["split_row"]
