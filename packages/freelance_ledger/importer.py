"""Import Coordinator: export text → persisted ledger entries.

Rows are processed strictly in file order, one at a time, each write awaited
before the next lookup so an earlier row in the same batch is visible to the
duplicate check of a later identical row.

Per row:

1. parse (tokenize, parse, classify, extract); unparseable rows are counted
   as ``discarded``;
2. non-economic kinds (lock, unlock, currency conversion) are ``skipped``;
3. an existing entry with the same ``(date, description, amount)`` triple
   makes the row a ``skipped`` duplicate;
4. otherwise the row is written and counted as ``imported``. A write the
   store rejects (uniqueness race or other storage failure) is logged and
   ``skipped``; the batch continues.

Lookup failures are not absorbed: a store that cannot be queried aborts the
import.
"""

from __future__ import annotations

from .errors import DuplicateEntryError, PersistenceError
from .ingest.adapters.freelancer_csv import iter_export_rows
from .logging_setup import get_logger
from .models import NON_ECONOMIC_KINDS, ImportResult, NewLedgerEntry
from .store import LedgerStore, compute_fingerprint

_logger = get_logger("freelance_ledger.importer")


def import_from_export(store: LedgerStore, text: str) -> ImportResult:
    """Import every data row of ``text`` into ``store`` and return the counts."""

    result = ImportResult()

    for line_no, row in iter_export_rows(text):
        if row is None:
            result.discarded += 1
            _logger.debug("import_from_export:discarded line=%d", line_no)
            continue

        if row.type in NON_ECONOMIC_KINDS:
            result.skipped += 1
            continue

        if store.find_by_natural_key(*row.natural_key) is not None:
            result.skipped += 1
            continue

        try:
            store.add(
                NewLedgerEntry.from_parsed(row),
                fingerprint=compute_fingerprint(*row.natural_key),
            )
        except DuplicateEntryError:
            _logger.info("import_from_export:duplicate_race line=%d", line_no)
            result.skipped += 1
            continue
        except PersistenceError as e:
            _logger.error(
                "import_from_export:row_failed line=%d type=%s error=%s",
                line_no,
                row.type.value,
                e,
            )
            result.skipped += 1
            continue
        result.imported += 1

    _logger.info(
        "import_from_export:done imported=%d skipped=%d discarded=%d",
        result.imported,
        result.skipped,
        result.discarded,
    )
    return result


__all__ = ["import_from_export"]
