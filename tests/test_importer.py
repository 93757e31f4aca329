import logging
from decimal import Decimal

from freelance_ledger.importer import import_from_export
from freelance_ledger.models import NON_ECONOMIC_KINDS, TransactionKind

from tests.helpers.memory_store import FlakyLedgerStore, InMemoryLedgerStore

HEADER = "Date,Description,Currency,Amount,GST"


def test_import_counts(memory_store, sample_export_text):
    result = import_from_export(memory_store, sample_export_text)
    assert (result.imported, result.skipped, result.discarded) == (5, 2, 1)
    assert len(memory_store.entries) == 5


def test_reimport_is_idempotent(memory_store, sample_export_text):
    import_from_export(memory_store, sample_export_text)
    again = import_from_export(memory_store, sample_export_text)
    assert again.imported == 0
    assert again.skipped == 7
    assert again.discarded == 1
    assert len(memory_store.entries) == 5


def test_non_economic_rows_are_never_written(memory_store, sample_export_text):
    import_from_export(memory_store, sample_export_text)
    assert not any(e.type in NON_ECONOMIC_KINDS for e in memory_store.entries.values())
    # Not even attempted.
    assert memory_store.add_calls == 5


def test_duplicate_within_one_batch_is_skipped(memory_store):
    line = "06 Jan 2026 10:00,Express withdrawal,USD,-25.00,"
    result = import_from_export(memory_store, "\n".join([HEADER, line, line]))
    assert (result.imported, result.skipped) == (1, 1)


def test_same_description_different_amount_is_distinct(memory_store):
    text = "\n".join(
        [
            HEADER,
            "06 Jan 2026 10:00,Express withdrawal,USD,-25.00,",
            "06 Jan 2026 10:00,Express withdrawal,USD,-26.00,",
        ]
    )
    assert import_from_export(memory_store, text).imported == 2


def test_entries_carry_parsed_fields(memory_store, sample_export_text):
    import_from_export(memory_store, sample_export_text)
    payments = memory_store.scan(kind=TransactionKind.MILESTONE_PAYMENT)
    assert [(p.project_name, p.client_name, p.amount) for p in payments] == [
        ("Website Redesign", "John D.", Decimal("1234.56")),
        ("Logo Pack", "Acme & Co", Decimal("200.00")),
    ]


def test_persistence_failure_skips_row_and_continues(sample_export_text, caplog, monkeypatch):
    # The CLI may have configured the package logger to stop propagating.
    monkeypatch.setattr(logging.getLogger("freelance_ledger"), "propagate", True)
    store = FlakyLedgerStore("Express withdrawal to bank")
    with caplog.at_level(logging.ERROR, logger="freelance_ledger"):
        result = import_from_export(store, sample_export_text)
    assert (result.imported, result.skipped, result.discarded) == (4, 3, 1)
    assert any("row_failed" in r.getMessage() for r in caplog.records)
    # Rows after the failure were still imported.
    assert store.scan(kind=TransactionKind.MEMBERSHIP)


def test_fingerprint_race_counts_as_skipped():
    class RacyStore(InMemoryLedgerStore):
        # Simulates a concurrent writer: the lookup never sees the earlier row.
        def find_by_natural_key(self, date, description, amount):
            return None

    store = RacyStore()
    line = "06 Jan 2026 10:00,Express withdrawal,USD,-25.00,"
    result = import_from_export(store, "\n".join([HEADER, line, line]))
    assert (result.imported, result.skipped) == (1, 1)
    assert len(store.entries) == 1


def test_header_only_or_empty_text_imports_nothing(memory_store):
    for text in ("", HEADER, HEADER + "\n\n   \n"):
        result = import_from_export(memory_store, text)
        assert (result.imported, result.skipped, result.discarded) == (0, 0, 0)
