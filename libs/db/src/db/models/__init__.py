"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the ledger domain models used by ``freelance_ledger``.
"""

from .ledger import Base, FlClient, FlLedgerEntry, FlMilestone, FlProject

__all__ = [
    "Base",
    "FlClient",
    "FlLedgerEntry",
    "FlMilestone",
    "FlProject",
]
