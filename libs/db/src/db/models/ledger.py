from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CHAR,
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only autoincrements an ``INTEGER PRIMARY KEY`` (rowid alias), so the
# BIGINT identity used on Postgres is swapped for INTEGER there.
_PK = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


# ---------------------------
# Collaborators: clients, projects, milestones
# ---------------------------


class FlClient(Base):
    __tablename__ = "fl_clients"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    client_type: Mapped[str] = mapped_column(String, nullable=False, server_default="FREELANCER")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "client_type in ('UPWORK','DIRECT','FREELANCER')",
            name="ck_fl_clients_client_type",
        ),
    )


class FlProject(Base):
    __tablename__ = "fl_projects"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    client_id: Mapped[int | None] = mapped_column(
        _PK, ForeignKey("fl_clients.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String, nullable=False, server_default="PLANNING")
    start_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, server_default="USD")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "status in ('PLANNING','IN_PROGRESS','ON_HOLD','COMPLETED','CANCELLED')",
            name="ck_fl_projects_status",
        ),
    )


class FlMilestone(Base):
    __tablename__ = "fl_milestones"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(_PK, ForeignKey("fl_projects.id"), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, server_default="USD")
    status: Mapped[str] = mapped_column(String, nullable=False, server_default="NOT_STARTED")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    released_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "status in ('NOT_STARTED','IN_PROGRESS','COMPLETED','CANCELLED')",
            name="ck_fl_milestones_status",
        ),
    )


# ---------------------------
# Core: fl_ledger_entries
# ---------------------------


class FlLedgerEntry(Base):
    __tablename__ = "fl_ledger_entries"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    # Minute precision, naive (export rows carry no timezone).
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    # Sign is semantic: positive flows to the account holder, negative flows out.
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(8), nullable=False, server_default="USD")
    gst: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    platform: Mapped[str] = mapped_column(String, nullable=False, server_default="FREELANCER")
    project_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_id: Mapped[int | None] = mapped_column(
        _PK, ForeignKey("fl_projects.id"), nullable=True
    )
    milestone_id: Mapped[int | None] = mapped_column(_PK, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # SHA-256 of the (date, description, amount) natural key. Only rows written
    # by the export importer carry it; NULLs never collide under UNIQUE.
    import_fingerprint: Mapped[str | None] = mapped_column(CHAR(64), nullable=True, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "type in ('LOCK','UNLOCK','CURRENCY_CONVERSION','MILESTONE_PAYMENT',"
            "'PREFERRED_FEE','HOURLY_FEE','PROJECT_FEE','WITHDRAWAL','MEMBERSHIP',"
            "'EXAM','REFUND','ARBITRATION','OTHER')",
            name="ck_fl_ledger_entries_type",
        ),
        Index("ix_fl_ledger_entries_natural_key", "date", "description", "amount"),
        Index("ix_fl_ledger_entries_milestone", "milestone_id", "type"),
    )


__all__ = [
    "Base",
    "FlClient",
    "FlProject",
    "FlMilestone",
    "FlLedgerEntry",
]
