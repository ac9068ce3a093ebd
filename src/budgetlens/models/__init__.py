"""Entity records consumed by the analyzers."""

from budgetlens.models.entities import (
    Account,
    AccountType,
    Budget,
    BudgetPeriod,
    Category,
    ContributionSource,
    Frequency,
    GoalCategory,
    GoalContribution,
    Priority,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    TransactionType,
    User,
    coerce_records,
    parse_date,
)
from budgetlens.models.snapshot import Snapshot

__all__ = [
    "Account",
    "AccountType",
    "Budget",
    "BudgetPeriod",
    "Category",
    "ContributionSource",
    "Frequency",
    "GoalCategory",
    "GoalContribution",
    "Priority",
    "RecurringTransaction",
    "SavingsGoal",
    "Snapshot",
    "Transaction",
    "TransactionType",
    "User",
    "coerce_records",
    "parse_date",
]
