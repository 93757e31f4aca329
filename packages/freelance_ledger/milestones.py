"""Ledger entries derived from milestone releases.

When the project subsystem marks a milestone released, the ledger records the
gross payment and, when a platform fee applies, the fee deduction. The call
is idempotent per milestone: once a ``MILESTONE_PAYMENT`` entry carries the
milestone id, later calls return the entries already linked to it.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from .logging_setup import get_logger
from .models import LedgerEntry, MilestoneDescriptor, NewLedgerEntry, Platform, TransactionKind
from .store import LedgerStore

_logger = get_logger("freelance_ledger.milestones")

_CENTS = Decimal("0.01")


def _now() -> datetime:
    return datetime.now().replace(second=0, microsecond=0)


def platform_fee(amount: Decimal, fee_percent: Decimal) -> Decimal:
    """Fee for a gross ``amount`` at ``fee_percent``, rounded half-up to cents."""

    return (amount * fee_percent / Decimal(100)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def on_milestone_released(
    store: LedgerStore,
    milestone: MilestoneDescriptor,
    *,
    clock: Callable[[], datetime] = _now,
) -> list[LedgerEntry]:
    """Record a released milestone; return the entries linked to it."""

    existing = store.find_by_milestone(milestone.id, TransactionKind.MILESTONE_PAYMENT)
    if existing:
        _logger.info("on_milestone_released:already_recorded milestone_id=%d", milestone.id)
        return store.find_by_milestone(milestone.id)

    when = clock()
    common = {
        "date": when,
        "currency": milestone.currency,
        "platform": Platform.FREELANCER,
        "project_name": milestone.project_name,
        "client_name": milestone.client_name,
        "project_id": milestone.project_id,
        "milestone_id": milestone.id,
    }

    created = [
        store.add(
            NewLedgerEntry(
                description=f"Milestone payment: {milestone.title} for {milestone.project_name}",
                type=TransactionKind.MILESTONE_PAYMENT,
                amount=milestone.amount,
                **common,
            )
        )
    ]

    pct = milestone.platform_fee_percent
    if pct > 0:
        created.append(
            store.add(
                NewLedgerEntry(
                    description=(
                        f"Platform fee ({pct.normalize():f}%) for {milestone.title}"
                        f" - {milestone.project_name}"
                    ),
                    type=TransactionKind.PROJECT_FEE,
                    amount=-platform_fee(milestone.amount, pct),
                    **common,
                )
            )
        )

    _logger.info(
        "on_milestone_released:recorded milestone_id=%d entries=%d",
        milestone.id,
        len(created),
    )
    return created


__all__ = ["on_milestone_released", "platform_fee"]
