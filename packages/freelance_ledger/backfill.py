"""Synthesize project records from ledger history.

Some projects only exist in the ledger (payments were imported before anyone
created the project record). :func:`create_project_from_ledger_history`
creates the client (if needed), a completed project sized by the payments,
one released milestone per payment, and links the payments to the project.

Not idempotent: each call creates a new project and milestone set.
"""

from __future__ import annotations

from decimal import Decimal

from .directory import ProjectDirectory
from .errors import NoDataError
from .logging_setup import get_logger
from .models import (
    ClientType,
    MilestoneStatus,
    ProjectRecord,
    ProjectStatus,
    TransactionKind,
)
from .store import LedgerStore

_logger = get_logger("freelance_ledger.backfill")

UNKNOWN_CLIENT_NAME = "Unknown Client"
DEFAULT_CLIENT_TYPE = ClientType.FREELANCER


def create_project_from_ledger_history(
    store: LedgerStore,
    directory: ProjectDirectory,
    project_name: str,
    client_name: str | None = None,
) -> ProjectRecord:
    """Create a project (plus milestones) from the ledger's payments for it.

    Raises
    ------
    NoDataError
        When no ``MILESTONE_PAYMENT`` entry carries ``project_name``
        (case-insensitive).
    """

    payments = store.scan(kind=TransactionKind.MILESTONE_PAYMENT, project_name=project_name)
    if not payments:
        raise NoDataError(f"No ledger payments found for project {project_name!r}")

    wanted_client = (client_name or "").strip() or UNKNOWN_CLIENT_NAME
    client = directory.find_client_by_name(wanted_client)
    if client is None:
        client = directory.create_client(wanted_client, DEFAULT_CLIENT_TYPE)
        _logger.info("backfill:client_created client_id=%d", client.id)

    # scan() is oldest first.
    budget = sum((p.amount for p in payments), Decimal("0"))
    project = directory.create_project(
        name=project_name,
        client_id=client.id,
        status=ProjectStatus.COMPLETED,
        start_date=payments[0].date,
        end_date=payments[-1].date,
        budget=budget,
        currency=payments[0].currency,
    )

    for p in payments:
        directory.create_milestone(
            project_id=project.id,
            title=f"Payment - {p.date.date().isoformat()}",
            amount=p.amount,
            currency=p.currency,
            status=MilestoneStatus.COMPLETED,
            due_date=p.date.date(),
            released_at=p.date,
        )
    linked = store.attach_project((p.id for p in payments), project.id)

    _logger.info(
        "backfill:project_created project_id=%d payments=%d linked=%d",
        project.id,
        len(payments),
        linked,
    )
    return project


__all__ = ["create_project_from_ledger_history", "UNKNOWN_CLIENT_NAME"]
