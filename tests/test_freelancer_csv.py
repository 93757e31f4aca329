from datetime import datetime
from decimal import Decimal

import pytest

from freelance_ledger.ingest import parse_export, parse_row
from freelance_ledger.ingest.adapters.freelancer_csv import (
    iter_export_rows,
    parse_amount,
    parse_date,
    parse_gst,
)
from freelance_ledger.models import Platform, TransactionKind

# ---- dates ---------------------------------------------------------------------


def test_parse_date_with_time():
    assert parse_date("06 Jan 2026 23:52") == datetime(2026, 1, 6, 23, 52)


def test_parse_date_without_time_defaults_to_midnight():
    assert parse_date("15 Mar 2025") == datetime(2025, 3, 15, 0, 0)


def test_parse_date_month_is_case_insensitive():
    assert parse_date("1 dec 2024 7:05") == datetime(2024, 12, 1, 7, 5)


@pytest.mark.parametrize(
    "raw",
    ["", "2026-01-06", "06 Foo 2026", "31 Feb 2026", "xx Jan 2026", "06 Jan"],
)
def test_parse_date_rejects_malformed(raw):
    assert parse_date(raw) is None


def test_parse_date_garbage_time_falls_back_to_midnight():
    assert parse_date("06 Jan 2026 ab:cd") == datetime(2026, 1, 6, 0, 0)


# ---- amounts -------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+1,234.56", Decimal("1234.56")),
        ("-50", Decimal("-50")),
        ("", Decimal("0")),
        ("n/a", Decimal("0")),
        ("NaN", Decimal("0")),
        ("1,000,000.00", Decimal("1000000.00")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_gst_blank_or_absent_is_none():
    assert parse_gst(None) is None
    assert parse_gst("  ") is None
    assert parse_gst("+1.80") == Decimal("1.80")


# ---- rows ----------------------------------------------------------------------


def test_parse_row_builds_classified_record():
    row = parse_row(
        [
            "06 Jan 2026 23:52",
            "Payment from John D. for project Website Redesign (ref 123) &amp; more",
            "USD",
            "+1,234.56",
            "0.00",
        ]
    )
    assert row is not None
    assert row.date == datetime(2026, 1, 6, 23, 52)
    assert row.description.endswith("& more")
    assert row.amount == Decimal("1234.56")
    assert row.gst == Decimal("0.00")
    assert row.currency == "USD"
    assert row.client_name == "John D."
    assert row.project_name == "Website Redesign"
    assert row.platform is Platform.FREELANCER
    assert row.type is TransactionKind.OTHER


def test_parse_row_defaults_currency_and_gst():
    row = parse_row(["07 Jan 2026", "Membership renewal", "", "-9.95"])
    assert row is not None
    assert row.currency == "USD"
    assert row.gst is None
    assert row.type is TransactionKind.MEMBERSHIP


def test_parse_row_malformed_amount_becomes_zero():
    row = parse_row(["07 Jan 2026", "Exam fee", "USD", "oops", ""])
    assert row is not None
    assert row.amount == Decimal("0")
    assert row.type is TransactionKind.EXAM


@pytest.mark.parametrize(
    "fields",
    [
        ["", "Membership", "USD", "-1"],
        ["07 Jan 2026", "", "USD", "-1"],
        ["sometime", "Membership", "USD", "-1"],
        ["07 Jan 2026"],
    ],
)
def test_parse_row_discards_invalid(fields):
    assert parse_row(fields) is None


# ---- whole export --------------------------------------------------------------


def test_parse_export_skips_header_blank_and_invalid_rows(sample_export_text):
    rows = parse_export(sample_export_text)
    assert len(rows) == 7
    assert rows[0].type is TransactionKind.MILESTONE_PAYMENT
    assert rows[-1].type is TransactionKind.MEMBERSHIP


def test_iter_export_rows_reports_editor_line_numbers(sample_export_text):
    numbered = list(iter_export_rows(sample_export_text))
    # Header is line 1; the blank line (9) yields nothing.
    assert [n for n, _ in numbered] == [2, 3, 4, 5, 6, 7, 8, 10]
    assert numbered[6] == (8, None)


def test_header_only_export_is_empty():
    assert parse_export("Date,Description,Currency,Amount,GST\n") == []
