# ruff: noqa: I001
"""Ledger Store contract and its SQLAlchemy implementation.

Components never reach for a global database handle; they receive a
:class:`LedgerStore` explicitly. :class:`SqlLedgerStore` wraps a caller-owned
SQLAlchemy ``Session`` (the caller commits), and tests substitute an
in-memory implementation of the same protocol.

Import deduplication is two-layered:

- the importer asks :meth:`LedgerStore.find_by_natural_key` for an entry with
  the same ``(date, description, amount)`` triple before writing;
- imported rows are written with an ``import_fingerprint`` (SHA-256 of the
  same triple) under a UNIQUE constraint, so a concurrent import that slipped
  past the lookup is rejected by the database with
  :class:`~freelance_ledger.errors.DuplicateEntryError`.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.ledger import FlLedgerEntry
from .errors import DuplicateEntryError, EntryNotFoundError, PersistenceError
from .models import EntryFilters, LedgerEntry, NewLedgerEntry, TransactionKind

_CENTS = Decimal("0.01")


def compute_fingerprint(date: datetime, description: str, amount: Decimal) -> str:
    """Stable SHA-256 over the dedup natural key.

    Fields: date (ISO, minute precision), description (trimmed), amount
    (2dp string).
    """

    payload = {
        "date": date.replace(second=0, microsecond=0).isoformat(timespec="minutes"),
        "description": description.strip(),
        "amount": f"{amount.quantize(_CENTS, rounding=ROUND_HALF_UP):.2f}",
    }
    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


class LedgerStore(Protocol):
    """Persistence contract consumed by the ledger components."""

    def add(self, entry: NewLedgerEntry, *, fingerprint: str | None = None) -> LedgerEntry:
        """Persist ``entry``; raise ``DuplicateEntryError`` on a fingerprint clash."""
        ...

    def find_by_natural_key(
        self, date: datetime, description: str, amount: Decimal
    ) -> LedgerEntry | None: ...

    def find_by_milestone(
        self, milestone_id: int, kind: TransactionKind | None = None
    ) -> list[LedgerEntry]: ...

    def get(self, entry_id: int) -> LedgerEntry | None: ...

    def query(
        self, filters: EntryFilters, *, offset: int, limit: int
    ) -> tuple[list[LedgerEntry], int]:
        """Return one page ordered by date (newest first) and the total match count."""
        ...

    def update(self, entry_id: int, fields: Mapping[str, Any]) -> LedgerEntry: ...

    def delete(self, entry_id: int) -> None: ...

    def scan(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        kind: TransactionKind | None = None,
        project_name: str | None = None,
    ) -> list[LedgerEntry]:
        """Return matching entries oldest first.

        ``project_name`` matches case-insensitively on equality.
        """
        ...

    def attach_project(self, entry_ids: Iterable[int], project_id: int) -> int: ...


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class SqlLedgerStore:
    """:class:`LedgerStore` over the ``fl_ledger_entries`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---- writes -----------------------------------------------------------

    def add(self, entry: NewLedgerEntry, *, fingerprint: str | None = None) -> LedgerEntry:
        values = {k: _plain(v) for k, v in entry.model_dump().items()}
        if values.get("date") is None:
            values["date"] = datetime.now().replace(second=0, microsecond=0)
        row = FlLedgerEntry(**values, import_fingerprint=fingerprint)
        # One savepoint per row: a rejected insert rolls back alone and the
        # surrounding transaction stays usable for the next row.
        try:
            with self.session.begin_nested():
                self.session.add(row)
                self.session.flush()
        except IntegrityError as e:
            if fingerprint is not None:
                raise DuplicateEntryError(
                    f"ledger entry with fingerprint {fingerprint[:12]} already exists"
                ) from e
            raise PersistenceError(f"ledger insert rejected: {e.orig}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"ledger insert failed: {e}") from e
        return LedgerEntry.model_validate(row)

    def update(self, entry_id: int, fields: Mapping[str, Any]) -> LedgerEntry:
        row = self.session.get(FlLedgerEntry, entry_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        for key, value in fields.items():
            setattr(row, key, _plain(value))
        row.updated_at = datetime.now(UTC)
        self.session.flush()
        return LedgerEntry.model_validate(row)

    def delete(self, entry_id: int) -> None:
        row = self.session.get(FlLedgerEntry, entry_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        self.session.delete(row)
        self.session.flush()

    def attach_project(self, entry_ids: Iterable[int], project_id: int) -> int:
        ids = list(entry_ids)
        if not ids:
            return 0
        result = self.session.execute(
            update(FlLedgerEntry)
            .where(FlLedgerEntry.id.in_(ids))
            .values(project_id=project_id, updated_at=func.now())
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    # ---- reads ------------------------------------------------------------

    def get(self, entry_id: int) -> LedgerEntry | None:
        row = self.session.get(FlLedgerEntry, entry_id)
        return LedgerEntry.model_validate(row) if row is not None else None

    def find_by_natural_key(
        self, date: datetime, description: str, amount: Decimal
    ) -> LedgerEntry | None:
        row = self.session.execute(
            select(FlLedgerEntry)
            .where(
                FlLedgerEntry.date == date,
                FlLedgerEntry.description == description,
                FlLedgerEntry.amount == amount,
            )
            .limit(1)
        ).scalar_one_or_none()
        return LedgerEntry.model_validate(row) if row is not None else None

    def find_by_milestone(
        self, milestone_id: int, kind: TransactionKind | None = None
    ) -> list[LedgerEntry]:
        stmt = select(FlLedgerEntry).where(FlLedgerEntry.milestone_id == milestone_id)
        if kind is not None:
            stmt = stmt.where(FlLedgerEntry.type == kind.value)
        rows = self.session.execute(stmt.order_by(FlLedgerEntry.id)).scalars().all()
        return [LedgerEntry.model_validate(r) for r in rows]

    def query(
        self, filters: EntryFilters, *, offset: int, limit: int
    ) -> tuple[list[LedgerEntry], int]:
        conds = _filter_conditions(filters)
        total = self.session.execute(
            select(func.count()).select_from(FlLedgerEntry).where(*conds)
        ).scalar_one()
        rows = (
            self.session.execute(
                select(FlLedgerEntry)
                .where(*conds)
                .order_by(FlLedgerEntry.date.desc(), FlLedgerEntry.id.desc())
                .offset(offset)
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return [LedgerEntry.model_validate(r) for r in rows], int(total)

    def scan(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        kind: TransactionKind | None = None,
        project_name: str | None = None,
    ) -> list[LedgerEntry]:
        stmt = select(FlLedgerEntry)
        if start is not None:
            stmt = stmt.where(FlLedgerEntry.date >= start)
        if end is not None:
            stmt = stmt.where(FlLedgerEntry.date <= end)
        if kind is not None:
            stmt = stmt.where(FlLedgerEntry.type == kind.value)
        if project_name is not None:
            stmt = stmt.where(func.lower(FlLedgerEntry.project_name) == project_name.lower())
        rows = (
            self.session.execute(stmt.order_by(FlLedgerEntry.date, FlLedgerEntry.id))
            .scalars()
            .all()
        )
        return [LedgerEntry.model_validate(r) for r in rows]


def _filter_conditions(filters: EntryFilters) -> Sequence[Any]:
    conds: list[Any] = []
    if filters.type is not None:
        conds.append(FlLedgerEntry.type == filters.type.value)
    if filters.currency:
        conds.append(FlLedgerEntry.currency == filters.currency)
    if filters.project_name:
        conds.append(FlLedgerEntry.project_name.icontains(filters.project_name, autoescape=True))
    if filters.start is not None:
        conds.append(FlLedgerEntry.date >= filters.start)
    if filters.end is not None:
        conds.append(FlLedgerEntry.date <= filters.end)
    if filters.search:
        term = filters.search
        conds.append(
            FlLedgerEntry.description.icontains(term, autoescape=True)
            | FlLedgerEntry.project_name.icontains(term, autoescape=True)
            | FlLedgerEntry.client_name.icontains(term, autoescape=True)
        )
    return conds


__all__ = [
    "LedgerStore",
    "SqlLedgerStore",
    "compute_fingerprint",
]
