"""
Spending Trends — period-over-period change and per-category insights.

1. **Spending trends**: expense totals per week/month/quarter/year with the
   absolute and percentage change from the previous period.
2. **Category insights**: total, average, share of spend and a rough
   direction for each expense category.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable

from budgetlens.analyzers.aggregation import group_by_period
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.models.entities import Transaction, coerce_records

logger = logging.getLogger("budgetlens.analyzers.trends")


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass
class SpendingTrend(AnalysisResult):
    """Expense total for one period and its change from the previous one."""

    period: str  # "2025-03", "2025-Q1", "2025", or a week-start date
    amount: float
    change: float
    change_percentage: float


@dataclass
class CategoryInsight(AnalysisResult):
    """Spending summary for one expense category."""

    category: str
    total_spent: float
    average_spent: float
    transaction_count: int
    trend: TrendDirection
    percentage_of_total: float
    last_transaction_date: date | None = None


class TrendAnalyzer:
    """Period-over-period spending analysis."""

    @classmethod
    def spending_trends(
        cls,
        transactions: Iterable[Transaction | dict[str, Any]],
        period: str = "month",
    ) -> list[SpendingTrend]:
        """Expense totals per period, oldest first, with change vs. the prior period.

        The first period has no predecessor, so its change and percentage are 0.
        Percentage change is 0 whenever the previous amount is 0.
        """
        expenses = [t for t in coerce_records(transactions, Transaction) if t.is_expense]
        grouped = group_by_period(expenses, period)

        trends: list[SpendingTrend] = []
        previous: float | None = None
        for key, amount in grouped.items():
            if previous is None:
                change = 0.0
                change_pct = 0.0
            else:
                change = amount - previous
                change_pct = change / previous * 100 if previous > 0 else 0.0
            trends.append(SpendingTrend(period=key, amount=amount, change=change, change_percentage=change_pct))
            previous = amount
        return trends

    @classmethod
    def category_insights(cls, transactions: Iterable[Transaction | dict[str, Any]]) -> list[CategoryInsight]:
        """Per-category totals, sorted by total spent (largest first)."""
        expenses = [t for t in coerce_records(transactions, Transaction) if t.is_expense]

        amounts: dict[str, float] = defaultdict(float)
        dates: dict[str, list[date]] = defaultdict(list)
        for txn in expenses:
            amounts[txn.category] += txn.amount
            dates[txn.category].append(txn.date)

        grand_total = sum(amounts.values())
        insights: list[CategoryInsight] = []
        for category, spent in amounts.items():
            category_dates = sorted(dates[category])
            count = len(category_dates)
            insights.append(CategoryInsight(
                category=category,
                total_spent=spent,
                average_spent=spent / count if count else 0.0,
                transaction_count=count,
                trend=cls._date_count_trend(category_dates),
                percentage_of_total=spent / grand_total * 100 if grand_total > 0 else 0.0,
                last_transaction_date=category_dates[-1] if category_dates else None,
            ))

        insights.sort(key=lambda i: i.total_spent, reverse=True)
        return insights

    @staticmethod
    def _date_count_trend(sorted_dates: list[date]) -> TrendDirection:
        """Compare how many transactions fall in each chronological half.

        This counts transactions, it does not weigh amounts. Splitting at
        ``len // 2`` puts the odd element in the second half, so a category
        with an odd count reads as increasing.
        """
        if len(sorted_dates) < 2:
            return TrendDirection.STABLE

        mid = len(sorted_dates) // 2
        first_half = sorted_dates[:mid]
        second_half = sorted_dates[mid:]

        if len(second_half) > len(first_half):
            return TrendDirection.INCREASING
        if len(first_half) > len(second_half):
            return TrendDirection.DECREASING
        return TrendDirection.STABLE


def get_spending_trends(
    transactions: Iterable[Transaction | dict[str, Any]],
    period: str = "month",
) -> list[SpendingTrend]:
    """Convenience function; see TrendAnalyzer.spending_trends()."""
    return TrendAnalyzer.spending_trends(transactions, period)


def get_category_insights(transactions: Iterable[Transaction | dict[str, Any]]) -> list[CategoryInsight]:
    """Convenience function; see TrendAnalyzer.category_insights()."""
    return TrendAnalyzer.category_insights(transactions)
