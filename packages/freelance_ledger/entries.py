"""Single-entry operations: manual create, get, list, correct, delete.

Unlike the bulk importer, these propagate every failure to the caller.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from .errors import EntryNotFoundError, InvalidEntryError
from .models import EntryFilters, EntryPage, LedgerEntry, LedgerEntryUpdate, NewLedgerEntry
from .store import LedgerStore

DEFAULT_PAGE_SIZE = 50


def _validated[M: (NewLedgerEntry, LedgerEntryUpdate)](
    model: type[M], data: M | Mapping[str, Any]
) -> M:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidEntryError(str(e)) from e


def create_manual_entry(
    store: LedgerStore, data: NewLedgerEntry | Mapping[str, Any]
) -> LedgerEntry:
    """Persist a caller-supplied entry; ``date`` defaults to now."""

    entry = _validated(NewLedgerEntry, data)
    if entry.date is None:
        entry = entry.model_copy(update={"date": datetime.now().replace(second=0, microsecond=0)})
    return store.add(entry)


def get_entry(store: LedgerStore, entry_id: int) -> LedgerEntry:
    entry = store.get(entry_id)
    if entry is None:
        raise EntryNotFoundError(entry_id)
    return entry


def list_entries(
    store: LedgerStore,
    filters: EntryFilters | None = None,
    *,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> EntryPage:
    """Return one page of entries (newest first); ``page`` is 1-based."""

    if page < 1 or limit < 1:
        raise ValueError(f"page and limit must be positive (page={page}, limit={limit})")
    items, total = store.query(filters or EntryFilters(), offset=(page - 1) * limit, limit=limit)
    return EntryPage(
        items=items,
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


def update_entry(
    store: LedgerStore, entry_id: int, changes: LedgerEntryUpdate | Mapping[str, Any]
) -> LedgerEntry:
    """Apply the fields explicitly set in ``changes``; unset fields are untouched."""

    update = _validated(LedgerEntryUpdate, changes)
    fields = update.model_dump(exclude_unset=True)
    for required in ("date", "description", "type", "amount", "currency"):
        if required in fields and (fields[required] is None or fields[required] == ""):
            raise InvalidEntryError(f"{required} cannot be cleared")
    if not fields:
        return get_entry(store, entry_id)
    return store.update(entry_id, fields)


def delete_entry(store: LedgerStore, entry_id: int) -> None:
    store.delete(entry_id)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "create_manual_entry",
    "get_entry",
    "list_entries",
    "update_entry",
    "delete_entry",
]
