"""Tests for budget, goal and account helpers."""

from typing import Any

import pytest

from budgetlens.analyzers.progress import (
    BudgetStatus,
    accounts_by_type,
    active_accounts,
    available_credit,
    budget_progress,
    budget_spent,
    budget_status,
    credit_card_debt,
    default_account,
    find_category,
    goal_progress,
    total_balance,
)
from budgetlens.models import Account, Budget, SavingsGoal, TransactionType


def _make_txn(i: int, amount: float, category: str = "Food", type: str = "expense") -> dict[str, Any]:
    return {"id": f"txn_{i:04d}", "amount": amount, "date": "2025-01-10", "type": type, "category": category}


def _budget(amount: float, category: str = "Food") -> Budget:
    return Budget(
        id="b1",
        name=category,
        category=category,
        amount=amount,
        start_date="2025-01-01",
        end_date="2025-01-31",
    )


class TestBudgetProgress:
    def test_exceeded_is_capped(self) -> None:
        budget = _budget(100)
        txns = [_make_txn(1, 60), _make_txn(2, 50)]

        assert budget_spent(budget, txns) == pytest.approx(110)
        assert budget_progress(budget, txns) == 100
        assert budget_status(budget_progress(budget, txns)) == BudgetStatus.EXCEEDED

    def test_only_matching_expenses_count(self) -> None:
        txns = [
            _make_txn(1, 40),
            _make_txn(2, 500, category="Rent"),
            _make_txn(3, 1000, category="Food", type="income"),
        ]
        assert budget_progress(_budget(100), txns) == pytest.approx(40)

    def test_budget_window_not_applied(self) -> None:
        txn = dict(_make_txn(1, 30), date="2023-06-01")
        assert budget_spent(_budget(100), [txn]) == pytest.approx(30)

    def test_zero_limit(self) -> None:
        assert budget_progress(_budget(0), [_make_txn(1, 10)]) == 0

    def test_status_thresholds(self) -> None:
        assert budget_status(79.9) == BudgetStatus.GOOD
        assert budget_status(80) == BudgetStatus.WARNING
        assert budget_status(99.9) == BudgetStatus.WARNING
        assert budget_status(100) == BudgetStatus.EXCEEDED
        assert budget_status(85, warning_pct=90) == BudgetStatus.GOOD


class TestGoalProgress:
    def test_partial(self) -> None:
        goal = SavingsGoal(id="g1", target_amount=400, current_amount=100)
        assert goal_progress(goal) == pytest.approx(25)

    def test_capped_at_100(self) -> None:
        goal = SavingsGoal(id="g1", target_amount=400, current_amount=900)
        assert goal_progress(goal) == 100

    def test_zero_target(self) -> None:
        assert goal_progress(SavingsGoal(id="g1", target_amount=0)) == 0


class TestCategories:
    def test_same_name_different_type(self) -> None:
        categories = [
            {"id": "c1", "name": "Bonus", "type": "income"},
            {"id": "c2", "name": "Bonus", "type": "expense"},
        ]
        assert find_category(categories, "Bonus", TransactionType.EXPENSE).id == "c2"
        assert find_category(categories, "Bonus", "income").id == "c1"
        assert find_category(categories, "Gifts", "income") is None


class TestAccounts:
    @pytest.fixture
    def accounts(self) -> list[Account]:
        return [
            Account(id="a1", type="checking", balance=1500, is_default=False),
            Account(id="a2", type="savings", balance=3000, is_default=True),
            Account(id="a3", type="credit_card", balance=-200, credit_limit=1000),
            Account(id="a4", type="checking", balance=999, is_active=False),
        ]

    def test_credit_metrics(self) -> None:
        card = [{"id": "cc", "type": "credit_card", "balance": -200, "creditLimit": 1000}]
        assert credit_card_debt(card) == pytest.approx(200)
        assert available_credit(card) == pytest.approx(800)

    def test_card_without_limit(self) -> None:
        card = [{"id": "cc", "type": "credit_card", "balance": -150}]
        assert available_credit(card) == pytest.approx(-150)

    def test_total_balance_active_only(self, accounts: list[Account]) -> None:
        assert total_balance(accounts) == pytest.approx(4300)

    def test_filters(self, accounts: list[Account]) -> None:
        assert [a.id for a in active_accounts(accounts)] == ["a1", "a2", "a3"]
        assert [a.id for a in accounts_by_type(accounts, "checking")] == ["a1"]

    def test_default_account(self, accounts: list[Account]) -> None:
        assert default_account(accounts).id == "a2"
        assert default_account(accounts[:1]).id == "a1"
        assert default_account([]) is None

    def test_empty(self) -> None:
        assert total_balance([]) == 0
        assert credit_card_debt([]) == 0
        assert available_credit([]) == 0
