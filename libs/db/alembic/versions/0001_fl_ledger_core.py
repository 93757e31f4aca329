# ruff: noqa: I001
"""Ledger core tables: clients, projects, milestones, ledger entries.

Revision ID: 0001_fl_ledger_core
Revises: None
Create Date: 2026-01-12
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_fl_ledger_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


_TRANSACTION_KINDS = (
    "LOCK",
    "UNLOCK",
    "CURRENCY_CONVERSION",
    "MILESTONE_PAYMENT",
    "PREFERRED_FEE",
    "HOURLY_FEE",
    "PROJECT_FEE",
    "WITHDRAWAL",
    "MEMBERSHIP",
    "EXAM",
    "REFUND",
    "ARBITRATION",
    "OTHER",
)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    op.create_table(
        "fl_clients",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "client_type", sa.Text(), nullable=False, server_default=sa.text("'FREELANCER'")
        ),
        _created_at(),
        sa.CheckConstraint(
            "client_type in ('UPWORK','DIRECT','FREELANCER')",
            name="ck_fl_clients_client_type",
        ),
    )

    op.create_table(
        "fl_projects",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("client_id", sa.BigInteger(), sa.ForeignKey("fl_clients.id"), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'PLANNING'")),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("budget", sa.Numeric(18, 2), nullable=True),
        sa.Column("currency", sa.String(8), nullable=False, server_default=sa.text("'USD'")),
        _created_at(),
        sa.CheckConstraint(
            "status in ('PLANNING','IN_PROGRESS','ON_HOLD','COMPLETED','CANCELLED')",
            name="ck_fl_projects_status",
        ),
    )

    op.create_table(
        "fl_milestones",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "project_id", sa.BigInteger(), sa.ForeignKey("fl_projects.id"), nullable=False
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("currency", sa.String(8), nullable=False, server_default=sa.text("'USD'")),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'NOT_STARTED'")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("released_at", sa.DateTime(), nullable=True),
        _created_at(),
        sa.CheckConstraint(
            "status in ('NOT_STARTED','IN_PROGRESS','COMPLETED','CANCELLED')",
            name="ck_fl_milestones_status",
        ),
    )

    kinds = ",".join(f"'{k}'" for k in _TRANSACTION_KINDS)
    op.create_table(
        "fl_ledger_entries",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False, server_default=sa.text("'USD'")),
        sa.Column("gst", sa.Numeric(18, 2), nullable=True),
        sa.Column(
            "platform", sa.Text(), nullable=False, server_default=sa.text("'FREELANCER'")
        ),
        sa.Column("project_name", sa.Text(), nullable=True),
        sa.Column("client_name", sa.Text(), nullable=True),
        sa.Column("project_id", sa.BigInteger(), sa.ForeignKey("fl_projects.id"), nullable=True),
        sa.Column("milestone_id", sa.BigInteger(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("import_fingerprint", sa.CHAR(64), nullable=True, unique=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(f"type in ({kinds})", name="ck_fl_ledger_entries_type"),
    )
    op.create_index(
        "ix_fl_ledger_entries_natural_key",
        "fl_ledger_entries",
        ["date", "description", "amount"],
        unique=False,
    )
    op.create_index(
        "ix_fl_ledger_entries_milestone",
        "fl_ledger_entries",
        ["milestone_id", "type"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_fl_ledger_entries_milestone", table_name="fl_ledger_entries")
    op.drop_index("ix_fl_ledger_entries_natural_key", table_name="fl_ledger_entries")
    op.drop_table("fl_ledger_entries")
    op.drop_table("fl_milestones")
    op.drop_table("fl_projects")
    op.drop_table("fl_clients")
