"""Tests for entity models and snapshots."""

import json
import logging
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from budgetlens.exceptions import SnapshotError
from budgetlens.models import (
    Account,
    AccountType,
    Budget,
    RecurringTransaction,
    SavingsGoal,
    Snapshot,
    Transaction,
    TransactionType,
    coerce_records,
    parse_date,
)


class TestTransaction:
    def test_camel_case_input(self) -> None:
        txn = Transaction.model_validate({
            "id": "t1",
            "amount": 12.5,
            "type": "expense",
            "category": "Food",
            "date": "2025-01-15T10:30:00.000Z",
            "accountId": "acc_1",
        })
        assert txn.date == date(2025, 1, 15)
        assert txn.account_id == "acc_1"
        assert txn.type == TransactionType.EXPENSE
        assert txn.is_expense and not txn.is_income

    def test_snake_case_input(self) -> None:
        txn = Transaction(id="t1", amount=1, type="income", date="2025-01-15", account_id="a")
        assert txn.is_income
        assert txn.account_id == "a"

    def test_amount_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Transaction(id="t1", amount=0, type="expense", date="2025-01-15")
        with pytest.raises(ValidationError):
            Transaction(id="t1", amount=-5, type="expense", date="2025-01-15")

    def test_rejects_nan_and_bad_dates(self) -> None:
        with pytest.raises(ValidationError):
            Transaction(id="t1", amount=float("nan"), type="expense", date="2025-01-15")
        with pytest.raises(ValidationError):
            Transaction(id="t1", amount=1, type="expense", date="15/01/2025")

    def test_frozen(self) -> None:
        txn = Transaction(id="t1", amount=1, type="expense", date="2025-01-15")
        with pytest.raises(ValidationError):
            txn.amount = 2


class TestOtherEntities:
    def test_budget_window(self) -> None:
        with pytest.raises(ValidationError, match="end_date must be after start_date"):
            Budget(id="b", category="Food", amount=10, start_date="2025-02-01", end_date="2025-01-01")

    def test_account_types(self) -> None:
        card = Account.model_validate({"id": "a", "type": "credit_card", "balance": -10, "creditLimit": 500})
        assert card.is_credit_card
        assert card.type == AccountType.CREDIT_CARD
        assert card.credit_limit == 500
        assert card.is_active is True

    def test_goal_defaults(self) -> None:
        goal = SavingsGoal.model_validate({"id": "g", "targetAmount": 100, "targetDate": "2026-01-01"})
        assert goal.current_amount == 0
        assert goal.target_date == date(2026, 1, 1)
        assert goal.is_completed is False

    def test_recurring(self) -> None:
        item = RecurringTransaction.model_validate({
            "id": "r", "amount": 9.99, "frequency": "monthly", "nextDueDate": "2025-04-01", "isSubscription": True,
        })
        assert item.is_subscription
        assert item.type == TransactionType.EXPENSE


class TestCoercion:
    def test_parse_date(self) -> None:
        assert parse_date("2025-03-04") == date(2025, 3, 4)
        assert parse_date(" 2025-03-04T00:00:00Z") == date(2025, 3, 4)
        assert parse_date("garbage") is None
        assert parse_date(None) is None

    def test_malformed_records_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        raw = [
            {"id": "ok", "amount": 5, "type": "expense", "date": "2025-01-01"},
            {"id": "bad_date", "amount": 5, "type": "expense", "date": "yesterday"},
            {"id": "bad_type", "amount": 5, "type": "transfer", "date": "2025-01-01"},
            {"id": "nan", "amount": float("nan"), "type": "expense", "date": "2025-01-01"},
        ]
        with caplog.at_level(logging.WARNING, logger="budgetlens.models"):
            valid = coerce_records(raw, Transaction)

        assert [t.id for t in valid] == ["ok"]
        assert "Dropped 3 malformed Transaction record(s)" in caplog.text

    def test_instances_pass_through(self) -> None:
        txn = Transaction(id="t1", amount=1, type="expense", date="2025-01-15")
        assert coerce_records([txn], Transaction)[0] is txn

    def test_none_and_empty(self) -> None:
        assert coerce_records(None, Transaction) == []
        assert coerce_records([], Transaction) == []


class TestSnapshot:
    def test_app_export_keys(self) -> None:
        snapshot = Snapshot.model_validate({
            "transactions": [{"id": "t", "amount": 3, "type": "expense", "date": "2025-01-01"}],
            "savingsGoals": [{"id": "g", "targetAmount": 10}],
            "recurringTransactions": [{"id": "r", "amount": 5, "frequency": "weekly", "nextDueDate": "2025-01-02"}],
        })
        assert len(snapshot.transactions) == 1
        assert snapshot.goals[0].target_amount == 10
        assert snapshot.recurring[0].frequency == "weekly"
        assert snapshot.budgets == []
        assert snapshot.user is None

    def test_malformed_entries_dropped(self) -> None:
        snapshot = Snapshot.model_validate({
            "transactions": [
                {"id": "t1", "amount": 3, "type": "expense", "date": "2025-01-01"},
                {"id": "t2", "amount": "lots", "type": "expense", "date": "2025-01-01"},
            ],
            "accounts": None,
        })
        assert [t.id for t in snapshot.transactions] == ["t1"]
        assert snapshot.accounts == []

    def test_collection_must_be_list(self) -> None:
        with pytest.raises(ValidationError):
            Snapshot.model_validate({"transactions": {"id": "t1"}})

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"accounts": [{"id": "a", "type": "cash", "balance": 20}]}))
        snapshot = Snapshot.load(path)
        assert snapshot.accounts[0].balance == 20

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(SnapshotError, match="not found"):
            Snapshot.load(tmp_path / "nope.json")

    def test_load_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="not valid JSON"):
            Snapshot.load(path)

    def test_load_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(SnapshotError, match="JSON object"):
            Snapshot.load(path)

    def test_load_bad_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"transactions": {"id": "t1"}}))
        with pytest.raises(SnapshotError, match="invalid layout"):
            Snapshot.load(path)
