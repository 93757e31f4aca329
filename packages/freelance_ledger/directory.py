# ruff: noqa: I001
"""Narrow contract onto the project subsystem (clients, projects, milestones).

Only the calls the ledger needs are exposed: find-or-create of clients by
name and creation of project/milestone records during back-fill.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models.ledger import FlClient, FlMilestone, FlProject
from .models import (
    ClientRecord,
    ClientType,
    MilestoneRecord,
    MilestoneStatus,
    ProjectRecord,
    ProjectStatus,
)


class ProjectDirectory(Protocol):
    def find_client_by_name(self, name: str) -> ClientRecord | None:
        """Case-insensitive exact name lookup."""
        ...

    def create_client(self, name: str, client_type: ClientType) -> ClientRecord: ...

    def create_project(
        self,
        *,
        name: str,
        client_id: int | None,
        status: ProjectStatus,
        start_date: datetime | None,
        end_date: datetime | None,
        budget: Decimal | None,
        currency: str,
    ) -> ProjectRecord: ...

    def create_milestone(
        self,
        *,
        project_id: int,
        title: str,
        amount: Decimal | None,
        currency: str,
        status: MilestoneStatus,
        due_date: date | None,
        released_at: datetime | None,
    ) -> MilestoneRecord: ...


class SqlProjectDirectory:
    """:class:`ProjectDirectory` over ``fl_clients``/``fl_projects``/``fl_milestones``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_client_by_name(self, name: str) -> ClientRecord | None:
        row = self.session.execute(
            select(FlClient)
            .where(func.lower(FlClient.name) == name.strip().lower())
            .order_by(FlClient.id)
            .limit(1)
        ).scalar_one_or_none()
        return ClientRecord.model_validate(row) if row is not None else None

    def create_client(self, name: str, client_type: ClientType) -> ClientRecord:
        row = FlClient(name=name.strip(), client_type=client_type.value)
        self.session.add(row)
        self.session.flush()
        return ClientRecord.model_validate(row)

    def create_project(
        self,
        *,
        name: str,
        client_id: int | None,
        status: ProjectStatus,
        start_date: datetime | None,
        end_date: datetime | None,
        budget: Decimal | None,
        currency: str,
    ) -> ProjectRecord:
        row = FlProject(
            name=name,
            client_id=client_id,
            status=status.value,
            start_date=start_date,
            end_date=end_date,
            budget=budget,
            currency=currency,
        )
        self.session.add(row)
        self.session.flush()
        return ProjectRecord.model_validate(row)

    def create_milestone(
        self,
        *,
        project_id: int,
        title: str,
        amount: Decimal | None,
        currency: str,
        status: MilestoneStatus,
        due_date: date | None,
        released_at: datetime | None,
    ) -> MilestoneRecord:
        row = FlMilestone(
            project_id=project_id,
            title=title,
            amount=amount,
            currency=currency,
            status=status.value,
            due_date=due_date,
            released_at=released_at,
        )
        self.session.add(row)
        self.session.flush()
        return MilestoneRecord.model_validate(row)


__all__ = ["ProjectDirectory", "SqlProjectDirectory"]
