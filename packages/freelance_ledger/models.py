"""Typed records for ``freelance_ledger``.

``ParsedRow`` is the transient output of the export parser and stays a plain
frozen dataclass. Records that cross the package boundary (ledger entries,
filters, summaries, collaborator records) are pydantic models so they can be
validated on input and dumped to JSON by the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionKind(str, Enum):
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"
    CURRENCY_CONVERSION = "CURRENCY_CONVERSION"
    MILESTONE_PAYMENT = "MILESTONE_PAYMENT"
    PREFERRED_FEE = "PREFERRED_FEE"
    HOURLY_FEE = "HOURLY_FEE"
    PROJECT_FEE = "PROJECT_FEE"
    WITHDRAWAL = "WITHDRAWAL"
    MEMBERSHIP = "MEMBERSHIP"
    EXAM = "EXAM"
    REFUND = "REFUND"
    ARBITRATION = "ARBITRATION"
    OTHER = "OTHER"


# Internal platform bookkeeping; never persisted by the importer.
NON_ECONOMIC_KINDS: frozenset[TransactionKind] = frozenset(
    {
        TransactionKind.LOCK,
        TransactionKind.UNLOCK,
        TransactionKind.CURRENCY_CONVERSION,
    }
)

FEE_KINDS: frozenset[TransactionKind] = frozenset(
    {
        TransactionKind.PROJECT_FEE,
        TransactionKind.PREFERRED_FEE,
        TransactionKind.HOURLY_FEE,
    }
)


class Platform(str, Enum):
    FREELANCER = "FREELANCER"


class ClientType(str, Enum):
    UPWORK = "UPWORK"
    DIRECT = "DIRECT"
    FREELANCER = "FREELANCER"


class ProjectStatus(str, Enum):
    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MilestoneStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Parser output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedRow:
    """One export line after parsing, classification and entity extraction.

    Attributes
    ----------
    date:
        Minute-precision, naive timestamp.
    description:
        HTML-entity-decoded free text.
    amount:
        Signed; positive means value flowing to the account holder.
    gst:
        Signed tax amount, ``None`` when the column is absent or blank.
    """

    date: datetime
    description: str
    type: TransactionKind
    amount: Decimal
    currency: str
    gst: Decimal | None
    project_name: str | None
    client_name: str | None
    platform: Platform = Platform.FREELANCER

    @property
    def natural_key(self) -> tuple[datetime, str, Decimal]:
        return (self.date, self.description, self.amount)


# ---------------------------------------------------------------------------
# Ledger entries
# ---------------------------------------------------------------------------


class LedgerEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime
    description: str
    type: TransactionKind
    amount: Decimal
    currency: str = "USD"
    gst: Decimal | None = None
    platform: Platform = Platform.FREELANCER
    project_name: str | None = None
    client_name: str | None = None
    project_id: int | None = None
    milestone_id: int | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NewLedgerEntry(BaseModel):
    """Fields for a ledger entry that has not been persisted yet.

    ``date`` is left ``None`` by callers that want "now"; the entry helpers
    fill it in before the row reaches a store.
    """

    date: datetime | None = None
    description: str
    type: TransactionKind
    amount: Decimal
    currency: str
    gst: Decimal | None = None
    platform: Platform = Platform.FREELANCER
    project_name: str | None = None
    client_name: str | None = None
    project_id: int | None = None
    milestone_id: int | None = None
    notes: str | None = None

    @field_validator("description", "currency")
    @classmethod
    def _require_text(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("must be a non-empty string")
        return s

    @classmethod
    def from_parsed(cls, row: ParsedRow) -> NewLedgerEntry:
        return cls(
            date=row.date,
            description=row.description,
            type=row.type,
            amount=row.amount,
            currency=row.currency,
            gst=row.gst,
            platform=row.platform,
            project_name=row.project_name,
            client_name=row.client_name,
        )


class LedgerEntryUpdate(BaseModel):
    """Partial correction of a manually entered ledger entry."""

    model_config = ConfigDict(extra="forbid")

    date: datetime | None = None
    description: str | None = None
    type: TransactionKind | None = None
    amount: Decimal | None = None
    currency: str | None = None
    gst: Decimal | None = None
    project_name: str | None = None
    client_name: str | None = None
    project_id: int | None = None
    milestone_id: int | None = None
    notes: str | None = None


class EntryFilters(BaseModel):
    type: TransactionKind | None = None
    currency: str | None = None
    project_name: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    search: str | None = None


class EntryPage(BaseModel):
    items: list[LedgerEntry]
    total: int
    page: int
    limit: int
    total_pages: int


class ImportResult(BaseModel):
    imported: int = 0
    skipped: int = 0
    # Rows dropped by the parser (empty/unparseable date or description).
    discarded: int = 0


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


class TypeBucket(BaseModel):
    count: int = 0
    total: dict[str, Decimal] = Field(default_factory=dict)


class ProjectBucket(BaseModel):
    count: int = 0
    total: Decimal = Decimal("0")
    currency: str


class ClientBucket(BaseModel):
    count: int = 0
    total: Decimal = Decimal("0")


class LedgerSummary(BaseModel):
    total_earnings: dict[str, Decimal] = Field(default_factory=dict)
    total_fees: dict[str, Decimal] = Field(default_factory=dict)
    total_withdrawals: dict[str, Decimal] = Field(default_factory=dict)
    by_type: dict[TransactionKind, TypeBucket] = Field(default_factory=dict)
    by_project: dict[str, ProjectBucket] = Field(default_factory=dict)
    by_client: dict[str, ClientBucket] = Field(default_factory=dict)


class ProjectHistory(BaseModel):
    name: str
    client: str | None
    total_earned: Decimal
    currency: str
    payment_count: int
    first_payment_date: datetime
    last_payment_date: datetime


# ---------------------------------------------------------------------------
# Collaborators (project subsystem)
# ---------------------------------------------------------------------------


class MilestoneDescriptor(BaseModel):
    """Released milestone as reported by the project subsystem."""

    id: int
    title: str
    amount: Decimal
    currency: str = "USD"
    project_id: int | None = None
    project_name: str
    client_name: str | None = None
    platform_fee_percent: Decimal = Decimal("0")


class ClientRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    client_type: ClientType


class ProjectRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    client_id: int | None
    status: ProjectStatus
    start_date: datetime | None = None
    end_date: datetime | None = None
    budget: Decimal | None = None
    currency: str = "USD"


class MilestoneRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    title: str
    amount: Decimal | None
    currency: str
    status: MilestoneStatus
    due_date: date | None = None
    released_at: datetime | None = None


__all__ = [
    "TransactionKind",
    "NON_ECONOMIC_KINDS",
    "FEE_KINDS",
    "Platform",
    "ClientType",
    "ProjectStatus",
    "MilestoneStatus",
    "ParsedRow",
    "LedgerEntry",
    "NewLedgerEntry",
    "LedgerEntryUpdate",
    "EntryFilters",
    "EntryPage",
    "ImportResult",
    "TypeBucket",
    "ProjectBucket",
    "ClientBucket",
    "LedgerSummary",
    "ProjectHistory",
    "MilestoneDescriptor",
    "ClientRecord",
    "ProjectRecord",
    "MilestoneRecord",
]
