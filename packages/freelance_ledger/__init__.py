"""Public interface for the ``freelance_ledger`` package.

Symbol re-exports only: the component entry points (which take an explicit
:class:`LedgerStore`) and the public models. Session-level wrappers live in
``freelance_ledger.api``.
"""

from .backfill import create_project_from_ledger_history
from .classification import classify
from .entries import create_manual_entry, delete_entry, get_entry, list_entries, update_entry
from .errors import (
    DuplicateEntryError,
    EntryNotFoundError,
    InvalidEntryError,
    LedgerError,
    NoDataError,
    PersistenceError,
)
from .extraction import extract_entities
from .importer import import_from_export
from .ingest import parse_export, parse_row, split_row
from .milestones import on_milestone_released
from .models import (
    EntryFilters,
    EntryPage,
    ImportResult,
    LedgerEntry,
    LedgerEntryUpdate,
    LedgerSummary,
    MilestoneDescriptor,
    NewLedgerEntry,
    ParsedRow,
    Platform,
    ProjectHistory,
    ProjectRecord,
    TransactionKind,
)
from .store import LedgerStore, SqlLedgerStore
from .summary import get_summary, list_distinct_projects

__all__ = [
    # Operations
    "import_from_export",
    "create_manual_entry",
    "list_entries",
    "get_entry",
    "update_entry",
    "delete_entry",
    "get_summary",
    "list_distinct_projects",
    "create_project_from_ledger_history",
    "on_milestone_released",
    # Pipeline pieces
    "split_row",
    "parse_row",
    "parse_export",
    "classify",
    "extract_entities",
    # Storage
    "LedgerStore",
    "SqlLedgerStore",
    # Models
    "TransactionKind",
    "Platform",
    "ParsedRow",
    "LedgerEntry",
    "NewLedgerEntry",
    "LedgerEntryUpdate",
    "EntryFilters",
    "EntryPage",
    "ImportResult",
    "LedgerSummary",
    "ProjectHistory",
    "ProjectRecord",
    "MilestoneDescriptor",
    # Errors
    "LedgerError",
    "EntryNotFoundError",
    "NoDataError",
    "InvalidEntryError",
    "DuplicateEntryError",
    "PersistenceError",
]
