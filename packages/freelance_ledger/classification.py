"""Description → :class:`TransactionKind` classification.

Classification is an ordered rule table evaluated top to bottom; the first
rule whose predicate matches the lower-cased description wins and anything
unmatched is ``OTHER``. Order is load-bearing: a fund-lock description such
as ``"Locked due to process Express withdrawal"`` also contains the
withdrawal phrase, so the lock/unlock rules must sit above the withdrawal
rule.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .models import TransactionKind

type Predicate = Callable[[str], bool]


def contains_any(*phrases: str) -> Predicate:
    """Return a predicate matching text that contains any of ``phrases``."""

    needles = tuple(p.lower() for p in phrases)

    def _match(text: str) -> bool:
        return any(n in text for n in needles)

    return _match


@dataclass(frozen=True, slots=True)
class ClassificationRule:
    name: str
    predicate: Predicate
    kind: TransactionKind

    def matches(self, lowered: str) -> bool:
        return self.predicate(lowered)


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "fund_lock", contains_any("locked due to process"), TransactionKind.LOCK
    ),
    ClassificationRule(
        "fund_unlock", contains_any("removal of [locked"), TransactionKind.UNLOCK
    ),
    ClassificationRule(
        "currency_conversion",
        contains_any("currency conversion"),
        TransactionKind.CURRENCY_CONVERSION,
    ),
    # Arbitration transfers ("transfer from ...") count as income.
    ClassificationRule(
        "milestone_payment",
        contains_any("done milestone payment", "transfer from"),
        TransactionKind.MILESTONE_PAYMENT,
    ),
    ClassificationRule(
        "preferred_fee",
        contains_any("preferred freelancer program project fee"),
        TransactionKind.PREFERRED_FEE,
    ),
    ClassificationRule(
        "hourly_fee", contains_any("hourly project fee"), TransactionKind.HOURLY_FEE
    ),
    ClassificationRule(
        "project_fee",
        contains_any("project fee taken", "offsite payment"),
        TransactionKind.PROJECT_FEE,
    ),
    ClassificationRule(
        "withdrawal",
        contains_any("express withdrawal", "payoneer withdrawal"),
        TransactionKind.WITHDRAWAL,
    ),
    ClassificationRule("membership", contains_any("membership"), TransactionKind.MEMBERSHIP),
    ClassificationRule("exam_fee", contains_any("exam fee"), TransactionKind.EXAM),
    ClassificationRule("refund", contains_any("refund"), TransactionKind.REFUND),
    ClassificationRule("arbitration", contains_any("arbitration"), TransactionKind.ARBITRATION),
)


def classify(
    description: str,
    rules: Sequence[ClassificationRule] = CLASSIFICATION_RULES,
) -> TransactionKind:
    """Return the kind of the first rule matching ``description``, else ``OTHER``."""

    lowered = description.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.kind
    return TransactionKind.OTHER


__all__ = [
    "ClassificationRule",
    "CLASSIFICATION_RULES",
    "classify",
    "contains_any",
]
