"""Read-side aggregation over the ledger.

Two views:

- :func:`get_summary` buckets a date-bounded slice by currency, kind, project
  and client. Earnings are positive ``MILESTONE_PAYMENT`` amounts, fees are
  absolute ``PROJECT_FEE``/``PREFERRED_FEE``/``HOURLY_FEE`` amounts, and
  withdrawals are absolute negative ``WITHDRAWAL`` amounts. Project/client
  buckets only see positive milestone payments.
- :func:`list_distinct_projects` groups milestone payments by project name,
  for finding ledger projects that have no project record yet.

Neither function writes; summaries computed during an import may be partial.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from .models import (
    FEE_KINDS,
    ClientBucket,
    LedgerEntry,
    LedgerSummary,
    ProjectBucket,
    ProjectHistory,
    TransactionKind,
    TypeBucket,
)
from .store import LedgerStore


def _add(bucket: dict[str, Decimal], currency: str, amount: Decimal) -> None:
    bucket[currency] = bucket.get(currency, Decimal("0")) + amount


def summarize(entries: Iterable[LedgerEntry]) -> LedgerSummary:
    """Aggregate ``entries`` into a :class:`LedgerSummary`."""

    summary = LedgerSummary()
    for e in entries:
        amount = e.amount
        is_earning = e.type is TransactionKind.MILESTONE_PAYMENT and amount > 0

        by_type = summary.by_type.setdefault(e.type, TypeBucket())
        by_type.count += 1
        _add(by_type.total, e.currency, amount)

        if is_earning:
            _add(summary.total_earnings, e.currency, amount)
        elif e.type in FEE_KINDS:
            _add(summary.total_fees, e.currency, abs(amount))
        elif e.type is TransactionKind.WITHDRAWAL and amount < 0:
            _add(summary.total_withdrawals, e.currency, abs(amount))

        if not is_earning:
            continue
        if e.project_name:
            project = summary.by_project.setdefault(
                e.project_name, ProjectBucket(currency=e.currency)
            )
            project.count += 1
            project.total += amount
        if e.client_name:
            client = summary.by_client.setdefault(e.client_name, ClientBucket())
            client.count += 1
            client.total += amount
    return summary


def get_summary(
    store: LedgerStore,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
) -> LedgerSummary:
    """Summarize entries dated within ``[start, end]`` (either bound optional)."""

    return summarize(store.scan(start=start, end=end))


def list_distinct_projects(store: LedgerStore) -> list[ProjectHistory]:
    """Per-project payment history derived from ``MILESTONE_PAYMENT`` entries.

    The client reported is the one on the most recent payment. Results are
    ordered by last payment date, newest first.
    """

    payments = store.scan(kind=TransactionKind.MILESTONE_PAYMENT)
    by_name: dict[str, ProjectHistory] = {}
    # Newest first so the first sighting of a project sets client/currency.
    for e in sorted(payments, key=lambda p: p.date, reverse=True):
        if not e.project_name:
            continue
        seen = by_name.get(e.project_name)
        if seen is None:
            by_name[e.project_name] = ProjectHistory(
                name=e.project_name,
                client=e.client_name,
                total_earned=e.amount,
                currency=e.currency,
                payment_count=1,
                first_payment_date=e.date,
                last_payment_date=e.date,
            )
            continue
        seen.total_earned += e.amount
        seen.payment_count += 1
        seen.first_payment_date = min(seen.first_payment_date, e.date)
        seen.last_payment_date = max(seen.last_payment_date, e.date)

    return sorted(by_name.values(), key=lambda p: p.last_payment_date, reverse=True)


__all__ = ["summarize", "get_summary", "list_distinct_projects"]
