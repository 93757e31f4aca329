"""Session-level facade over the ledger components.

Each function wraps a caller-owned SQLAlchemy ``Session`` in the SQL-backed
store/directory and delegates to the component module. The caller owns the
transaction (``db.client.session_scope`` commits on success). Code that
wants a different backend calls the component modules directly with its own
:class:`~freelance_ledger.store.LedgerStore`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from . import backfill, entries, importer, milestones, summary
from .directory import SqlProjectDirectory
from .models import (
    EntryFilters,
    EntryPage,
    ImportResult,
    LedgerEntry,
    LedgerEntryUpdate,
    LedgerSummary,
    MilestoneDescriptor,
    NewLedgerEntry,
    ProjectHistory,
    ProjectRecord,
)
from .store import SqlLedgerStore


def import_from_export(session: Session, text: str) -> ImportResult:
    return importer.import_from_export(SqlLedgerStore(session), text)


def create_manual_entry(
    session: Session, data: NewLedgerEntry | Mapping[str, Any]
) -> LedgerEntry:
    return entries.create_manual_entry(SqlLedgerStore(session), data)


def list_entries(
    session: Session,
    filters: EntryFilters | None = None,
    *,
    page: int = 1,
    limit: int = entries.DEFAULT_PAGE_SIZE,
) -> EntryPage:
    return entries.list_entries(SqlLedgerStore(session), filters, page=page, limit=limit)


def get_entry(session: Session, entry_id: int) -> LedgerEntry:
    return entries.get_entry(SqlLedgerStore(session), entry_id)


def update_entry(
    session: Session, entry_id: int, changes: LedgerEntryUpdate | Mapping[str, Any]
) -> LedgerEntry:
    return entries.update_entry(SqlLedgerStore(session), entry_id, changes)


def delete_entry(session: Session, entry_id: int) -> None:
    entries.delete_entry(SqlLedgerStore(session), entry_id)


def get_summary(
    session: Session,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
) -> LedgerSummary:
    return summary.get_summary(SqlLedgerStore(session), start=start, end=end)


def list_distinct_projects(session: Session) -> list[ProjectHistory]:
    return summary.list_distinct_projects(SqlLedgerStore(session))


def create_project_from_ledger_history(
    session: Session, project_name: str, client_name: str | None = None
) -> ProjectRecord:
    return backfill.create_project_from_ledger_history(
        SqlLedgerStore(session), SqlProjectDirectory(session), project_name, client_name
    )


def on_milestone_released(session: Session, milestone: MilestoneDescriptor) -> list[LedgerEntry]:
    return milestones.on_milestone_released(SqlLedgerStore(session), milestone)


__all__ = [
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
]
