"""
BudgetLens — analytics service.

AnalyticsService is the entry point the app's screens and notification layer
call. It holds a configuration and nothing else: every method takes the
entity collections it needs and returns a fresh result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from budgetlens.analyzers.alerts import AlertBuilder, BudgetAlert, SpendingAlert
from budgetlens.analyzers.anomaly import Anomaly, AnomalyDetector
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.analyzers.cashflow import CashFlowAnalysis, CashFlowAnalyzer
from budgetlens.analyzers.goals import ContributionOutcome, GoalMilestone, apply_contribution
from budgetlens.analyzers.health import FinancialHealthScore, HealthScoreCalculator
from budgetlens.analyzers.prediction import SpendingPrediction, SpendingPredictor
from budgetlens.analyzers.progress import (
    BudgetStatus,
    available_credit,
    budget_progress,
    budget_spent,
    budget_status,
    credit_card_debt,
    goal_progress,
    total_balance,
)
from budgetlens.analyzers.recurring import BillReminder, monthly_recurring_cost, upcoming_bill_reminders
from budgetlens.analyzers.trends import CategoryInsight, SpendingTrend, TrendAnalyzer
from budgetlens.config import BudgetLensConfig
from budgetlens.models.entities import Budget, GoalContribution, SavingsGoal, Transaction
from budgetlens.models.snapshot import Snapshot

logger = logging.getLogger("budgetlens")


@dataclass
class BudgetProgressItem(AnalysisResult):
    budget_id: str
    name: str
    category: str
    limit: float
    spent: float
    progress: float
    status: BudgetStatus


@dataclass
class GoalProgressItem(AnalysisResult):
    goal_id: str
    name: str
    target_amount: float
    current_amount: float
    progress: float
    is_completed: bool


@dataclass
class AccountSummary(AnalysisResult):
    total_balance: float = 0.0
    credit_card_debt: float = 0.0
    available_credit: float = 0.0
    active_accounts: int = 0


@dataclass
class FinancialReport(AnalysisResult):
    """Everything the dashboard and reports screens show, in one result."""

    as_of: date | None
    health: FinancialHealthScore
    trends: list[SpendingTrend] = field(default_factory=list)
    category_insights: list[CategoryInsight] = field(default_factory=list)
    prediction: SpendingPrediction = field(default_factory=SpendingPrediction)
    anomalies: list[Anomaly] = field(default_factory=list)
    cash_flow: CashFlowAnalysis = field(default_factory=CashFlowAnalysis)
    budgets: list[BudgetProgressItem] = field(default_factory=list)
    goals: list[GoalProgressItem] = field(default_factory=list)
    accounts: AccountSummary = field(default_factory=AccountSummary)
    budget_alerts: list[BudgetAlert] = field(default_factory=list)
    spending_alerts: list[SpendingAlert] = field(default_factory=list)
    bill_reminders: list[BillReminder] = field(default_factory=list)
    monthly_recurring_cost: float = 0.0


@dataclass
class AnalyticsService:
    """Configured front door to the analyzers.

    Usage::

        from budgetlens import AnalyticsService, Snapshot

        service = AnalyticsService.from_config("budgetlens.yaml")
        report = service.build_report(Snapshot.load("export.json"))
        print(report.health.overall)

    Construct one per configuration and pass it where it is needed; there is
    no shared instance.
    """

    config: BudgetLensConfig = field(default_factory=BudgetLensConfig)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> AnalyticsService:
        """Create a service from a config file or keyword arguments."""
        return cls(config=BudgetLensConfig.load(config_path, **overrides))

    # ------------------------------------------------------------------ #
    #  Derivations with configured thresholds                             #
    # ------------------------------------------------------------------ #

    def spending_trends(
        self,
        transactions: Iterable[Transaction | dict[str, Any]],
        period: str = "month",
    ) -> list[SpendingTrend]:
        return TrendAnalyzer.spending_trends(transactions, period)

    def category_insights(self, transactions: Iterable[Transaction | dict[str, Any]]) -> list[CategoryInsight]:
        return TrendAnalyzer.category_insights(transactions)

    def health_score(self, snapshot: Snapshot) -> FinancialHealthScore:
        return HealthScoreCalculator.calculate(
            snapshot.transactions, snapshot.budgets, snapshot.goals, snapshot.accounts
        )

    def predict(self, transactions: Iterable[Transaction | dict[str, Any]]) -> SpendingPrediction:
        return SpendingPredictor.predict(transactions, min_months=self.config.analytics.min_prediction_months)

    def anomalies(
        self,
        transactions: Iterable[Transaction | dict[str, Any]],
        as_of: date | None = None,
    ) -> list[Anomaly]:
        settings = self.config.analytics
        return AnomalyDetector.detect(
            transactions,
            as_of=as_of,
            z_threshold=settings.z_score_threshold,
            high_z=settings.high_severity_z_score,
            window_days=settings.pattern_window_days,
            run_length=settings.pattern_run_length,
        )

    def cash_flow(self, transactions: Iterable[Transaction | dict[str, Any]]) -> CashFlowAnalysis:
        return CashFlowAnalyzer.analyze(transactions)

    def budget_alerts(self, snapshot: Snapshot) -> list[BudgetAlert]:
        notifications = self.config.notifications
        if not notifications.budget_alerts:
            return []
        return AlertBuilder.budget_alerts(
            snapshot.budgets, snapshot.transactions, threshold=notifications.budget_threshold
        )

    def spending_alerts(self, snapshot: Snapshot) -> list[SpendingAlert]:
        """Large expenses, unusual expenses, then overspent categories."""
        notifications = self.config.notifications
        if not notifications.spending_alerts:
            return []
        txns = snapshot.transactions
        return [
            *AlertBuilder.spending_alerts(txns, threshold=notifications.spending_threshold),
            *AlertBuilder.unusual_spending_alerts(self.anomalies(txns)),
            *AlertBuilder.category_exceeded_alerts(snapshot.budgets, txns),
        ]

    def bill_reminders(self, snapshot: Snapshot, as_of: date) -> list[BillReminder]:
        notifications = self.config.notifications
        if not notifications.bill_reminders:
            return []
        return upcoming_bill_reminders(snapshot.recurring, as_of, notifications.reminder_days_ahead)

    def contribute(
        self,
        goal: SavingsGoal,
        contribution: GoalContribution,
        existing_milestones: Iterable[GoalMilestone] = (),
    ) -> ContributionOutcome:
        """Apply a contribution; milestones are withheld when milestone notifications are off."""
        outcome = apply_contribution(goal, contribution, existing_milestones)
        if not self.config.notifications.goal_milestones:
            outcome.new_milestones = []
        return outcome

    # ------------------------------------------------------------------ #
    #  Report                                                             #
    # ------------------------------------------------------------------ #

    def build_report(self, snapshot: Snapshot, *, as_of: date | None = None, period: str = "month") -> FinancialReport:
        """Run every analyzer over a snapshot.

        Args:
            snapshot: Entity collections from the storage layer.
            as_of: Reference date for anomaly windows and bill reminders.
                Defaults to the latest transaction date in the snapshot.
            period: Granularity for spending trends.

        Returns:
            FinancialReport ready for display or ``to_dict()`` serialization.
        """
        txns = snapshot.transactions
        if as_of is None and txns:
            as_of = max(t.date for t in txns)

        report = FinancialReport(
            as_of=as_of,
            health=self.health_score(snapshot),
            trends=self.spending_trends(txns, period),
            category_insights=self.category_insights(txns),
            prediction=self.predict(txns),
            anomalies=self.anomalies(txns, as_of),
            cash_flow=self.cash_flow(txns),
            budgets=[self._budget_item(b, txns) for b in snapshot.budgets],
            goals=[self._goal_item(g) for g in snapshot.goals],
            accounts=AccountSummary(
                total_balance=total_balance(snapshot.accounts),
                credit_card_debt=credit_card_debt(snapshot.accounts),
                available_credit=available_credit(snapshot.accounts),
                active_accounts=sum(1 for a in snapshot.accounts if a.is_active),
            ),
            budget_alerts=self.budget_alerts(snapshot),
            spending_alerts=self.spending_alerts(snapshot),
            bill_reminders=self.bill_reminders(snapshot, as_of) if as_of else [],
            monthly_recurring_cost=monthly_recurring_cost(snapshot.recurring),
        )
        logger.info(
            "Report built: %d transactions, health %d (%s), %d anomalies",
            len(txns),
            report.health.overall,
            report.health.risk_level.value,
            len(report.anomalies),
        )
        return report

    def _budget_item(self, budget: Budget, txns: list[Transaction]) -> BudgetProgressItem:
        progress = budget_progress(budget, txns)
        return BudgetProgressItem(
            budget_id=budget.id,
            name=budget.name or budget.category,
            category=budget.category,
            limit=budget.amount,
            spent=budget_spent(budget, txns),
            progress=progress,
            status=budget_status(progress, self.config.analytics.budget_warning_pct),
        )

    @staticmethod
    def _goal_item(goal: SavingsGoal) -> GoalProgressItem:
        return GoalProgressItem(
            goal_id=goal.id,
            name=goal.name,
            target_amount=goal.target_amount,
            current_amount=goal.current_amount,
            progress=goal_progress(goal),
            is_completed=goal.is_completed,
        )
