"""
Budget, goal and account helpers used by screens and the health score.

All helpers return 0 instead of dividing by zero.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from budgetlens.models.entities import (
    Account,
    AccountType,
    Budget,
    Category,
    SavingsGoal,
    Transaction,
    TransactionType,
    coerce_records,
)


class BudgetStatus(str, Enum):
    """How close spending is to a budget's limit."""

    GOOD = "good"
    WARNING = "warning"  # 80-99% used
    EXCEEDED = "exceeded"  # >= 100%


def category_matches(transaction: Transaction, category: str) -> bool:
    """Transactions point at categories by name, not by id."""
    return transaction.category == category


def find_category(
    categories: Iterable[Category | dict[str, Any]],
    name: str,
    type: TransactionType | str,
) -> Category | None:
    """Resolve a transaction's category string to a Category record.

    Names are only unique per type, so "Bonus" the income category and "Bonus"
    the expense category are different records.
    """
    wanted = TransactionType(type)
    for category in coerce_records(categories, Category):
        if category.name == name and category.type == wanted:
            return category
    return None


def budget_spent(budget: Budget, transactions: Iterable[Transaction | dict[str, Any]]) -> float:
    """All-time expense total for the budget's category.

    The budget's start/end window is not applied.
    """
    return sum(
        t.amount
        for t in coerce_records(transactions, Transaction)
        if t.is_expense and category_matches(t, budget.category)
    )


def budget_progress(budget: Budget, transactions: Iterable[Transaction | dict[str, Any]]) -> float:
    """Percent of the budget used, capped at 100."""
    if budget.amount <= 0:
        return 0.0
    return min(100.0, budget_spent(budget, transactions) / budget.amount * 100)


def budget_status(progress: float, warning_pct: float = 80.0) -> BudgetStatus:
    if progress >= 100:
        return BudgetStatus.EXCEEDED
    if progress >= warning_pct:
        return BudgetStatus.WARNING
    return BudgetStatus.GOOD


def goal_progress(goal: SavingsGoal) -> float:
    """Percent of the target saved, capped at 100."""
    if goal.target_amount <= 0:
        return 0.0
    return min(100.0, goal.current_amount / goal.target_amount * 100)


def active_accounts(accounts: Iterable[Account | dict[str, Any]]) -> list[Account]:
    return [a for a in coerce_records(accounts, Account) if a.is_active]


def accounts_by_type(accounts: Iterable[Account | dict[str, Any]], type: AccountType | str) -> list[Account]:
    wanted = AccountType(type)
    return [a for a in active_accounts(accounts) if a.type == wanted]


def default_account(accounts: Iterable[Account | dict[str, Any]]) -> Account | None:
    """The active default account, falling back to the first active one."""
    active = active_accounts(accounts)
    for account in active:
        if account.is_default:
            return account
    return active[0] if active else None


def total_balance(accounts: Iterable[Account | dict[str, Any]]) -> float:
    """Net worth across active accounts; card balances are already negative."""
    return sum(a.balance for a in active_accounts(accounts))


def credit_card_debt(accounts: Iterable[Account | dict[str, Any]]) -> float:
    return sum(abs(a.balance) for a in accounts_by_type(accounts, AccountType.CREDIT_CARD))


def available_credit(accounts: Iterable[Account | dict[str, Any]]) -> float:
    """Unused credit across active cards; a card without a limit counts as 0."""
    return sum(
        (a.credit_limit or 0.0) - abs(a.balance)
        for a in accounts_by_type(accounts, AccountType.CREDIT_CARD)
    )
