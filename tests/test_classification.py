import pytest

from freelance_ledger.classification import (
    CLASSIFICATION_RULES,
    ClassificationRule,
    classify,
    contains_any,
)
from freelance_ledger.models import TransactionKind as K


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("Locked due to process Express withdrawal", K.LOCK),
        ("Removal of [Locked Funds] for Express withdrawal", K.UNLOCK),
        ("Currency conversion from USD to INR", K.CURRENCY_CONVERSION),
        ("Done Milestone Payment received from X", K.MILESTONE_PAYMENT),
        ("Transfer from arbitration case 991", K.MILESTONE_PAYMENT),
        ("Preferred Freelancer Program project fee for Logo", K.PREFERRED_FEE),
        ("Hourly project fee for Support retainer", K.HOURLY_FEE),
        ("Project fee taken (Website Redesign)", K.PROJECT_FEE),
        ("Offsite payment fee", K.PROJECT_FEE),
        ("Express withdrawal to bank", K.WITHDRAWAL),
        ("Payoneer withdrawal", K.WITHDRAWAL),
        ("Plus Membership monthly", K.MEMBERSHIP),
        ("US English exam fee", K.EXAM),
        ("Refund of project fee taken twice", K.PROJECT_FEE),
        ("Refund for cancelled bid", K.REFUND),
        ("Arbitration fee", K.ARBITRATION),
        ("Something new the platform invented", K.OTHER),
        ("", K.OTHER),
    ],
)
def test_classify(description, expected):
    assert classify(description) is expected


def test_lock_wins_over_withdrawal_regardless_of_case():
    assert classify("LOCKED DUE TO PROCESS EXPRESS WITHDRAWAL #42") is K.LOCK


def test_rule_table_order_puts_fund_locks_before_withdrawals():
    names = [r.name for r in CLASSIFICATION_RULES]
    assert names.index("fund_lock") < names.index("withdrawal")
    assert names.index("fund_unlock") < names.index("withdrawal")


def test_custom_rules_are_evaluated_in_order():
    rules = (
        ClassificationRule("bonus", contains_any("bonus"), K.MILESTONE_PAYMENT),
        ClassificationRule("anything", lambda _: True, K.REFUND),
    )
    assert classify("Holiday BONUS", rules) is K.MILESTONE_PAYMENT
    assert classify("whatever", rules) is K.REFUND
    assert classify("whatever", ()) is K.OTHER
