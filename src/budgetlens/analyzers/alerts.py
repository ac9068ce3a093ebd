"""
Alert payloads — what the notification layer should tell the user.

Builds the data only: budget warnings and overruns, plus spending alerts for
large or unusual expenses and overspent categories. Scheduling and delivery
belong to the notification service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable

from budgetlens.analyzers.anomaly import Anomaly, AnomalyType
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.analyzers.progress import budget_spent, category_matches
from budgetlens.models.entities import Budget, Transaction, coerce_records

logger = logging.getLogger("budgetlens.analyzers.alerts")


class BudgetAlertType(str, Enum):
    WARNING = "warning"
    EXCEEDED = "exceeded"


class SpendingAlertType(str, Enum):
    UNUSUAL = "unusual"
    HIGH = "high"
    CATEGORY_EXCEEDED = "category_exceeded"


@dataclass
class BudgetAlert(AnalysisResult):
    """Payload for a budget warning or overrun notification."""

    budget_id: str
    budget_name: str
    category: str
    spent: float
    limit: float
    percentage: float  # uncapped, so an overrun reads above 100
    type: BudgetAlertType

    @property
    def title(self) -> str:
        if self.type == BudgetAlertType.EXCEEDED:
            return "Budget Exceeded!"
        return "Budget Warning"

    @property
    def message(self) -> str:
        if self.type == BudgetAlertType.EXCEEDED:
            # overrun past the limit, not total usage
            return f"You've exceeded your {self.budget_name} budget by {self.percentage - 100:.0f}%"
        return f"You've used {self.percentage:.0f}% of your {self.budget_name} budget"

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(title=self.title, message=self.message)
        return payload


@dataclass
class SpendingAlert(AnalysisResult):
    id: str
    type: SpendingAlertType
    message: str
    amount: float
    date: date
    category: str | None = None


class AlertBuilder:
    """Turn budgets and transactions into notification payloads."""

    @classmethod
    def budget_alerts(
        cls,
        budgets: Iterable[Budget | dict[str, Any]],
        transactions: Iterable[Transaction | dict[str, Any]],
        *,
        threshold: float = 80.0,
    ) -> list[BudgetAlert]:
        """One alert per budget at or above ``threshold`` percent used.

        Budgets with a zero limit are skipped.
        """
        txns = coerce_records(transactions, Transaction)
        alerts: list[BudgetAlert] = []
        for budget in coerce_records(budgets, Budget):
            if budget.amount <= 0:
                continue
            spent = budget_spent(budget, txns)
            percentage = spent / budget.amount * 100
            if percentage >= 100:
                alert_type = BudgetAlertType.EXCEEDED
            elif percentage >= threshold:
                alert_type = BudgetAlertType.WARNING
            else:
                continue
            alerts.append(BudgetAlert(
                budget_id=budget.id,
                budget_name=budget.name or budget.category,
                category=budget.category,
                spent=spent,
                limit=budget.amount,
                percentage=percentage,
                type=alert_type,
            ))

        if alerts:
            logger.info("Built %d budget alert(s)", len(alerts))
        return alerts

    @classmethod
    def spending_alerts(
        cls,
        transactions: Iterable[Transaction | dict[str, Any]],
        *,
        threshold: float = 500.0,
    ) -> list[SpendingAlert]:
        """Flag single expenses above ``threshold``."""
        alerts: list[SpendingAlert] = []
        for t in coerce_records(transactions, Transaction):
            if t.is_expense and t.amount > threshold:
                alerts.append(SpendingAlert(
                    id=f"spending_{t.id}",
                    type=SpendingAlertType.HIGH,
                    message=f"Large expense of ${t.amount:,.2f} in {t.category or 'uncategorized'}",
                    amount=t.amount,
                    date=t.date,
                    category=t.category or None,
                ))
        return alerts

    @classmethod
    def unusual_spending_alerts(cls, anomalies: Iterable[Anomaly]) -> list[SpendingAlert]:
        """One alert per ``unusual_spending`` anomaly; run findings are skipped."""
        alerts: list[SpendingAlert] = []
        for a in anomalies:
            if a.type != AnomalyType.UNUSUAL_SPENDING:
                continue
            alerts.append(SpendingAlert(
                id=f"unusual_{a.transaction_id}",
                type=SpendingAlertType.UNUSUAL,
                message=f"Unusual spending pattern detected: ${a.amount:,.2f} in {a.category or 'uncategorized'}",
                amount=a.amount,
                date=a.date,
                category=a.category or None,
            ))
        return alerts

    @classmethod
    def category_exceeded_alerts(
        cls,
        budgets: Iterable[Budget | dict[str, Any]],
        transactions: Iterable[Transaction | dict[str, Any]],
    ) -> list[SpendingAlert]:
        """Flag budgets whose category spending is over the limit.

        ``amount`` is the overrun in currency (spent - limit); ``date`` is the
        latest matching expense. Budgets with a zero limit are skipped.
        """
        txns = coerce_records(transactions, Transaction)
        alerts: list[SpendingAlert] = []
        for budget in coerce_records(budgets, Budget):
            if budget.amount <= 0:
                continue
            spent = budget_spent(budget, txns)
            if spent <= budget.amount:
                continue
            over = spent - budget.amount
            latest = max(t.date for t in txns if t.is_expense and category_matches(t, budget.category))
            alerts.append(SpendingAlert(
                id=f"category_{budget.id}",
                type=SpendingAlertType.CATEGORY_EXCEEDED,
                message=f"You've exceeded your {budget.category} budget by ${over:,.2f}",
                amount=over,
                date=latest,
                category=budget.category,
            ))
        return alerts


def build_budget_alerts(
    budgets: Iterable[Budget | dict[str, Any]],
    transactions: Iterable[Transaction | dict[str, Any]],
    *,
    threshold: float = 80.0,
) -> list[BudgetAlert]:
    """Convenience function; see AlertBuilder.budget_alerts()."""
    return AlertBuilder.budget_alerts(budgets, transactions, threshold=threshold)


def build_spending_alerts(
    transactions: Iterable[Transaction | dict[str, Any]],
    *,
    threshold: float = 500.0,
) -> list[SpendingAlert]:
    """Convenience function; see AlertBuilder.spending_alerts()."""
    return AlertBuilder.spending_alerts(transactions, threshold=threshold)


def build_unusual_spending_alerts(anomalies: Iterable[Anomaly]) -> list[SpendingAlert]:
    """Convenience function; see AlertBuilder.unusual_spending_alerts()."""
    return AlertBuilder.unusual_spending_alerts(anomalies)


def build_category_exceeded_alerts(
    budgets: Iterable[Budget | dict[str, Any]],
    transactions: Iterable[Transaction | dict[str, Any]],
) -> list[SpendingAlert]:
    """Convenience function; see AlertBuilder.category_exceeded_alerts()."""
    return AlertBuilder.category_exceeded_alerts(budgets, transactions)
