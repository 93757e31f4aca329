from datetime import date, datetime
from decimal import Decimal

import pytest
from db.models.ledger import FlClient, FlLedgerEntry, FlMilestone
from sqlalchemy import select

from freelance_ledger import api
from freelance_ledger.backfill import UNKNOWN_CLIENT_NAME
from freelance_ledger.errors import NoDataError
from freelance_ledger.models import MilestoneStatus, ProjectStatus, TransactionKind


def _payment(session, when, amount, project="Website Redesign", currency="USD"):
    return api.create_manual_entry(
        session,
        {
            "date": when,
            "description": f"Done Milestone Payment for project {project}",
            "type": TransactionKind.MILESTONE_PAYMENT,
            "amount": Decimal(amount),
            "currency": currency,
            "project_name": project,
        },
    )


def test_backfill_creates_project_milestones_and_links(session):
    first = _payment(session, datetime(2025, 11, 3, 14, 0), "400.00")
    second = _payment(session, datetime(2025, 12, 20, 9, 15), "600.00")
    other = _payment(session, datetime(2025, 12, 21), "50.00", project="Logo Pack")

    project = api.create_project_from_ledger_history(session, "website redesign", "Jane S.")

    assert project.name == "website redesign"
    assert project.status is ProjectStatus.COMPLETED
    assert project.budget == Decimal("1000.00")
    assert project.currency == "USD"
    assert project.start_date == datetime(2025, 11, 3, 14, 0)
    assert project.end_date == datetime(2025, 12, 20, 9, 15)

    client = session.get(FlClient, project.client_id)
    assert client is not None and client.name == "Jane S."

    milestones = session.execute(
        select(FlMilestone).where(FlMilestone.project_id == project.id).order_by(FlMilestone.id)
    ).scalars().all()
    assert [m.title for m in milestones] == ["Payment - 2025-11-03", "Payment - 2025-12-20"]
    assert [m.due_date for m in milestones] == [date(2025, 11, 3), date(2025, 12, 20)]
    assert all(m.status == MilestoneStatus.COMPLETED.value for m in milestones)
    assert milestones[1].released_at == datetime(2025, 12, 20, 9, 15)

    linked = {
        r.id: r.project_id for r in session.execute(select(FlLedgerEntry)).scalars().all()
    }
    assert linked[first.id] == project.id
    assert linked[second.id] == project.id
    assert linked[other.id] is None


def test_backfill_reuses_existing_client_case_insensitively(session):
    session.add(FlClient(name="Acme Co", client_type="DIRECT"))
    session.flush()
    _payment(session, datetime(2026, 1, 5), "10.00", project="Logo Pack")

    project = api.create_project_from_ledger_history(session, "Logo Pack", "  acme co ")

    clients = session.execute(select(FlClient)).scalars().all()
    assert len(clients) == 1
    assert project.client_id == clients[0].id


def test_backfill_without_client_uses_placeholder(session):
    _payment(session, datetime(2026, 1, 5), "10.00", project="Logo Pack")
    project = api.create_project_from_ledger_history(session, "Logo Pack")
    client = session.get(FlClient, project.client_id)
    assert client.name == UNKNOWN_CLIENT_NAME
    assert client.client_type == "FREELANCER"


def test_backfill_without_payments_raises(session):
    api.create_manual_entry(
        session,
        {
            "date": datetime(2026, 1, 5),
            "description": "Project fee taken (Logo Pack)",
            "type": TransactionKind.PROJECT_FEE,
            "amount": Decimal("-1.00"),
            "currency": "USD",
            "project_name": "Logo Pack",
        },
    )
    with pytest.raises(NoDataError):
        api.create_project_from_ledger_history(session, "Logo Pack")
    assert session.execute(select(FlClient)).scalars().all() == []


def test_backfill_twice_creates_a_second_project(session):
    _payment(session, datetime(2026, 1, 5), "10.00", project="Logo Pack")
    a = api.create_project_from_ledger_history(session, "Logo Pack")
    b = api.create_project_from_ledger_history(session, "Logo Pack")
    assert a.id != b.id
    assert a.client_id == b.client_id
