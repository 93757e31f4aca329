"""Adapter for the freelance platform's transaction export.

Each data line carries five fields in fixed order::

    date, description, currency, amount, gst

- ``date``: ``DD Mon YYYY`` with an optional ``HH:MM`` suffix (``Mon`` is a
  three-letter English month abbreviation); the time defaults to midnight.
- ``description``: free text, HTML-entity encoded by the platform.
- ``currency``: code string; blank means ``USD``.
- ``amount`` / ``gst``: signed decimals that may carry a leading ``+`` and
  thousands separators.

The first line of an export is a header and is skipped. Rows whose date or
description is empty, or whose date does not parse, are discarded rather
than raised.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterator, Sequence
from datetime import datetime
from decimal import Decimal, InvalidOperation

from ...classification import classify
from ...extraction import extract_entities
from ...models import ParsedRow, Platform
from ..tokenizer import split_row

DEFAULT_CURRENCY = "USD"

_MONTHS: dict[str, int] = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}

_NUMBER_NOISE_RE = re.compile(r"[+,]")


def parse_date(value: str | None) -> datetime | None:
    """Parse ``"06 Jan 2026 23:52"`` (time optional) to a naive datetime."""

    if value is None:
        return None
    parts = value.split()
    if len(parts) < 3:
        return None

    month = _MONTHS.get(parts[1].title())
    if month is None:
        return None
    try:
        day = int(parts[0])
        year = int(parts[2])
    except ValueError:
        return None

    hours = minutes = 0
    if len(parts) > 3:
        time_parts = parts[3].split(":")
        hours = _int_or_zero(time_parts[0])
        minutes = _int_or_zero(time_parts[1]) if len(time_parts) > 1 else 0

    try:
        return datetime(year, month, day, hours, minutes)
    except ValueError:
        return None


def _int_or_zero(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0


def _to_decimal(raw: str | None) -> Decimal | None:
    if raw is None:
        return None
    s = _NUMBER_NOISE_RE.sub("", raw).strip()
    if not s:
        return None
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    # Decimal happily accepts "NaN"/"Infinity"; neither is a monetary amount.
    return d if d.is_finite() else None


def parse_amount(raw: str | None) -> Decimal:
    """Strip ``+`` and thousands separators; malformed or blank yields ``0``."""

    d = _to_decimal(raw)
    return d if d is not None else Decimal("0")


def parse_gst(raw: str | None) -> Decimal | None:
    """Same stripping rule as :func:`parse_amount`; absent or blank yields ``None``."""

    return _to_decimal(raw)


def parse_row(fields: Sequence[str]) -> ParsedRow | None:
    """Convert tokenized fields into a :class:`ParsedRow`, or ``None`` to discard."""

    padded = list(fields) + [""] * (5 - len(fields))
    date_raw, description_raw, currency_raw, amount_raw = padded[:4]
    gst_raw = padded[4] if len(fields) > 4 else None

    if not date_raw or not description_raw:
        return None
    date = parse_date(date_raw)
    if date is None:
        return None

    description = html.unescape(description_raw)
    project_name, client_name = extract_entities(description)

    return ParsedRow(
        date=date,
        description=description,
        type=classify(description),
        amount=parse_amount(amount_raw),
        currency=currency_raw or DEFAULT_CURRENCY,
        gst=parse_gst(gst_raw),
        project_name=project_name,
        client_name=client_name,
        platform=Platform.FREELANCER,
    )


def iter_export_rows(text: str) -> Iterator[tuple[int, ParsedRow | None]]:
    """Yield ``(line_number, row_or_None)`` for every non-blank data line.

    Line numbers are 1-based and count the header, so they match what an
    operator sees in an editor.
    """

    lines = text.strip().splitlines()
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        yield line_no, parse_row(split_row(line))


def parse_export(text: str) -> list[ParsedRow]:
    """Parse a whole export, dropping the header and any discarded rows."""

    return [row for _, row in iter_export_rows(text) if row is not None]


__all__ = [
    "DEFAULT_CURRENCY",
    "parse_date",
    "parse_amount",
    "parse_gst",
    "parse_row",
    "iter_export_rows",
    "parse_export",
]
