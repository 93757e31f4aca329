"""Pytest configuration for test isolation.

``db.client`` keeps one process-wide engine bound to a single URL and refuses
to switch URLs silently. Tests each bootstrap their own SQLite file, so the
shared engine is disposed after every test to keep cases independent.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engine, get_session
from sqlalchemy.orm import Session

from tests.helpers.db import bootstrap_sqlite_db
from tests.helpers.memory_store import InMemoryLedgerStore

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _reset_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Forget the shared engine and keep ambient env vars out of the way."""

    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("FREELANCE_LEDGER_PLATFORM_FEE_PERCENT", raising=False)
    yield
    dispose_engine()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "ledger.db")


@pytest.fixture
def session(db_url: str) -> Iterator[Session]:
    s = get_session(database_url=db_url)
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def sample_export_text() -> str:
    return (DATA_DIR / "freelancer_export_sample.csv").read_text(encoding="utf-8")
