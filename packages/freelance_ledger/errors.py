"""Exception hierarchy for ledger operations.

Row-level data problems during an export import are never raised to callers;
they are counted. These exceptions cover single-entity operations and the
storage failures the importer absorbs per row.
"""

from __future__ import annotations


class LedgerError(Exception):
    pass


class EntryNotFoundError(LedgerError):
    def __init__(self, entry_id: int) -> None:
        super().__init__(f"Ledger entry {entry_id} not found")
        self.entry_id = entry_id


class NoDataError(LedgerError):
    pass


class InvalidEntryError(LedgerError):
    pass


class DuplicateEntryError(LedgerError):
    """The store rejected a write because the natural key already exists."""


class PersistenceError(LedgerError):
    """A write failed for a storage reason other than a uniqueness conflict."""


__all__ = [
    "LedgerError",
    "EntryNotFoundError",
    "NoDataError",
    "InvalidEntryError",
    "DuplicateEntryError",
    "PersistenceError",
]
