"""Tests for the analytics service and full report."""

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from budgetlens import AnalyticsService, BudgetLensConfig, Snapshot
from budgetlens.analyzers.alerts import SpendingAlertType
from budgetlens.analyzers.anomaly import AnomalyType, Severity
from budgetlens.analyzers.goals import MilestoneType
from budgetlens.analyzers.health import RiskLevel
from budgetlens.analyzers.progress import BudgetStatus
from budgetlens.models import GoalContribution, SavingsGoal


def _snapshot_data() -> dict[str, Any]:
    expenses = [10, 12, 11, 13, 8, 512]
    return {
        "transactions": [
            {"id": "inc_1", "amount": 3000, "type": "income", "category": "Salary", "date": "2025-01-01"},
            {"id": "inc_2", "amount": 3000, "type": "income", "category": "Salary", "date": "2025-02-01"},
            *[
                {
                    "id": f"exp_{i}",
                    "amount": amount,
                    "type": "expense",
                    "category": "Food",
                    "date": f"2025-02-{i + 9:02d}",
                }
                for i, amount in enumerate(expenses)
            ],
            {"id": "broken", "amount": 40, "type": "expense", "date": "sometime"},
        ],
        "budgets": [
            {
                "id": "b_food",
                "name": "Groceries",
                "category": "Food",
                "amount": 600,
                "startDate": "2025-02-01",
                "endDate": "2025-02-28",
            },
        ],
        "accounts": [
            {"id": "chk", "type": "checking", "balance": 4000},
            {"id": "cc", "type": "credit_card", "balance": -200, "creditLimit": 1000},
        ],
        "savingsGoals": [{"id": "g1", "name": "Trip", "targetAmount": 1000, "currentAmount": 250}],
        "recurringTransactions": [
            {"id": "rent", "title": "Rent", "amount": 1200, "frequency": "monthly", "nextDueDate": "2025-02-16"},
            {"id": "gym", "title": "Gym", "amount": 30, "frequency": "monthly", "nextDueDate": "2025-03-30"},
        ],
    }


@pytest.fixture
def snapshot() -> Snapshot:
    return Snapshot.model_validate(_snapshot_data())


class TestBuildReport:
    def test_full_report(self, snapshot: Snapshot) -> None:
        report = AnalyticsService().build_report(snapshot)

        assert report.as_of == date(2025, 2, 14)
        assert len(snapshot.transactions) == 8
        assert [t.period for t in report.trends] == ["2025-02"]
        assert report.category_insights[0].category == "Food"
        assert report.prediction.sufficient_data is False

        unusual = [a for a in report.anomalies if a.type == AnomalyType.UNUSUAL_SPENDING]
        assert [(a.transaction_id, a.severity) for a in unusual] == [("exp_5", Severity.MEDIUM)]

        assert report.cash_flow.monthly.income == pytest.approx(6000)
        assert report.accounts.total_balance == pytest.approx(3800)
        assert report.accounts.credit_card_debt == pytest.approx(200)
        assert report.accounts.available_credit == pytest.approx(800)
        assert report.accounts.active_accounts == 2

        assert report.budgets[0].name == "Groceries"
        assert report.budgets[0].spent == pytest.approx(566)
        assert report.budgets[0].status == BudgetStatus.WARNING
        assert report.goals[0].progress == pytest.approx(25)

        assert [a.budget_id for a in report.budget_alerts] == ["b_food"]
        assert [(a.type, a.amount) for a in report.spending_alerts] == [
            (SpendingAlertType.HIGH, 512),
            (SpendingAlertType.UNUSUAL, 512),
        ]
        assert [r.title for r in report.bill_reminders] == ["Rent"]
        assert report.bill_reminders[0].days_until_due == 2
        assert report.monthly_recurring_cost == pytest.approx(1230)

        assert 0 <= report.health.overall <= 100
        assert report.health.risk_level in set(RiskLevel)

    def test_as_of_override(self, snapshot: Snapshot) -> None:
        report = AnalyticsService().build_report(snapshot, as_of=date(2025, 3, 25))
        assert report.as_of == date(2025, 3, 25)
        assert [r.title for r in report.bill_reminders] == ["Gym"]

    def test_period(self, snapshot: Snapshot) -> None:
        report = AnalyticsService().build_report(snapshot, period="year")
        assert [t.period for t in report.trends] == ["2025"]

    def test_to_dict_is_json_ready(self, snapshot: Snapshot) -> None:
        payload = AnalyticsService().build_report(snapshot).to_dict()
        assert payload["as_of"] == "2025-02-14"
        assert payload["health"]["risk_level"] in {"low", "medium", "high"}
        assert payload["budget_alerts"][0]["title"] == "Budget Warning"
        json.dumps(payload)

    def test_empty_snapshot(self) -> None:
        report = AnalyticsService().build_report(Snapshot())
        assert report.as_of is None
        assert report.trends == []
        assert report.anomalies == []
        assert report.bill_reminders == []
        assert report.health.overall == 45
        assert report.to_dict()["prediction"]["sufficient_data"] is False

    def test_deterministic(self, snapshot: Snapshot) -> None:
        service = AnalyticsService()
        assert service.build_report(snapshot).to_dict() == service.build_report(snapshot).to_dict()


class TestConfiguredService:
    def test_disabled_notifications(self, snapshot: Snapshot) -> None:
        config = BudgetLensConfig.load(
            notifications={"budget_alerts": False, "spending_alerts": False, "bill_reminders": False},
        )
        report = AnalyticsService(config=config).build_report(snapshot)
        assert report.budget_alerts == []
        assert report.spending_alerts == []
        assert report.bill_reminders == []

    def test_thresholds_from_config(self, snapshot: Snapshot) -> None:
        config = BudgetLensConfig.load(
            analytics={"budget_warning_pct": 95},
            notifications={"spending_threshold": 10},
        )
        service = AnalyticsService(config=config)
        report = service.build_report(snapshot)
        assert report.budgets[0].status == BudgetStatus.GOOD
        high = [a for a in report.spending_alerts if a.type == SpendingAlertType.HIGH]
        assert len(high) == 4

    def test_from_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "budgetlens.yaml"
        config_file.write_text("analytics:\n  z_score_threshold: 1000\n")
        service = AnalyticsService.from_config(str(config_file))
        assert service.config.analytics.z_score_threshold == 1000

        snapshot = Snapshot.model_validate(_snapshot_data())
        unusual = [a for a in service.anomalies(snapshot.transactions) if a.type == AnomalyType.UNUSUAL_SPENDING]
        assert unusual == []

    def test_contribute_respects_milestone_setting(self) -> None:
        goal = SavingsGoal(id="g1", target_amount=100)
        contribution = GoalContribution(id="c1", goal_id="g1", amount=60, date="2025-01-05")

        outcome = AnalyticsService().contribute(goal, contribution)
        assert [m.type for m in outcome.new_milestones] == [MilestoneType.QUARTER, MilestoneType.HALF]

        quiet = AnalyticsService(config=BudgetLensConfig.load(notifications={"goal_milestones": False}))
        outcome = quiet.contribute(goal, contribution)
        assert outcome.new_milestones == []
        assert outcome.goal.current_amount == 60

    def test_category_overrun_in_spending_alerts(self) -> None:
        data = _snapshot_data()
        data["budgets"][0]["amount"] = 500
        report = AnalyticsService().build_report(Snapshot.model_validate(data))

        overrun = [a for a in report.spending_alerts if a.type == SpendingAlertType.CATEGORY_EXCEEDED]
        assert len(overrun) == 1
        assert overrun[0].amount == pytest.approx(66)
        assert overrun[0].date == date(2025, 2, 14)
        assert report.budget_alerts[0].message == "You've exceeded your Groceries budget by 13%"
