from datetime import datetime
from decimal import Decimal

from freelance_ledger.importer import import_from_export
from freelance_ledger.models import NewLedgerEntry, TransactionKind as K
from freelance_ledger.summary import get_summary, list_distinct_projects


def _add(store, when, kind, amount, *, currency="USD", project=None, client=None, desc=None):
    return store.add(
        NewLedgerEntry(
            date=when,
            description=desc or f"{kind.value} {amount}",
            type=kind,
            amount=Decimal(amount),
            currency=currency,
            project_name=project,
            client_name=client,
        )
    )


def test_totals_by_currency(memory_store):
    _add(memory_store, datetime(2026, 1, 1), K.MILESTONE_PAYMENT, "100", project="A", client="X")
    _add(memory_store, datetime(2026, 1, 2), K.MILESTONE_PAYMENT, "200", project="A", client="X")
    _add(memory_store, datetime(2026, 1, 2), K.PROJECT_FEE, "-20", project="A")
    _add(memory_store, datetime(2026, 1, 3), K.PREFERRED_FEE, "-10")
    _add(memory_store, datetime(2026, 1, 4), K.WITHDRAWAL, "-150")
    _add(memory_store, datetime(2026, 1, 5), K.MILESTONE_PAYMENT, "50", currency="EUR", project="B")

    s = get_summary(memory_store)

    assert s.total_earnings == {"USD": Decimal("300"), "EUR": Decimal("50")}
    assert s.total_fees == {"USD": Decimal("30")}
    assert s.total_withdrawals == {"USD": Decimal("150")}
    assert s.by_type[K.MILESTONE_PAYMENT].count == 3
    assert s.by_type[K.PROJECT_FEE].total == {"USD": Decimal("-20")}
    assert s.by_project["A"].count == 2
    assert s.by_project["A"].total == Decimal("300")
    assert s.by_project["B"].currency == "EUR"
    assert s.by_client["X"].total == Decimal("300")


def test_negative_milestone_payment_is_not_an_earning(memory_store):
    _add(memory_store, datetime(2026, 1, 1), K.MILESTONE_PAYMENT, "-40", project="A", client="X")
    s = get_summary(memory_store)
    assert s.total_earnings == {}
    assert s.by_project == {}
    assert s.by_client == {}
    assert s.by_type[K.MILESTONE_PAYMENT].count == 1


def test_positive_withdrawal_is_not_counted(memory_store):
    _add(memory_store, datetime(2026, 1, 1), K.WITHDRAWAL, "15")
    assert get_summary(memory_store).total_withdrawals == {}


def test_date_bounds_are_inclusive(memory_store):
    for day in (1, 2, 3, 4):
        _add(memory_store, datetime(2026, 1, day), K.MILESTONE_PAYMENT, "10", project="A")
    s = get_summary(memory_store, start=datetime(2026, 1, 2), end=datetime(2026, 1, 3))
    assert s.total_earnings == {"USD": Decimal("20")}


def test_empty_ledger(memory_store):
    s = get_summary(memory_store)
    assert s.total_earnings == {} and s.by_type == {}


def test_summary_of_imported_export(memory_store, sample_export_text):
    import_from_export(memory_store, sample_export_text)
    s = get_summary(memory_store)
    assert s.total_earnings == {"USD": Decimal("1434.56")}
    assert s.total_fees == {"USD": Decimal("123.46")}
    assert s.total_withdrawals == {"USD": Decimal("1000.00")}
    assert set(s.by_client) == {"John D.", "Acme & Co"}
    assert K.LOCK not in s.by_type


def test_list_distinct_projects(memory_store):
    _add(memory_store, datetime(2026, 1, 1), K.MILESTONE_PAYMENT, "100", project="A", client="Old")
    _add(memory_store, datetime(2026, 3, 1), K.MILESTONE_PAYMENT, "50", project="A", client="New")
    _add(memory_store, datetime(2026, 2, 1), K.MILESTONE_PAYMENT, "70", project="B")
    _add(memory_store, datetime(2026, 4, 1), K.PROJECT_FEE, "-5", project="B")
    _add(memory_store, datetime(2026, 4, 2), K.MILESTONE_PAYMENT, "5")

    projects = list_distinct_projects(memory_store)

    assert [p.name for p in projects] == ["A", "B"]
    a = projects[0]
    assert a.client == "New"
    assert a.total_earned == Decimal("150")
    assert a.payment_count == 2
    assert a.first_payment_date == datetime(2026, 1, 1)
    assert a.last_payment_date == datetime(2026, 3, 1)
    assert projects[1].payment_count == 1
