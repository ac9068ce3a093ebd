"""
Cash Flow Analyzer — income vs. expenses at three granularities.

For months, quarters and years it reports whole-range totals and a trend read
from how many individual periods closed positive vs. negative.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from budgetlens.analyzers.aggregation import group_by_period
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.models.entities import Transaction, coerce_records

logger = logging.getLogger("budgetlens.analyzers.cashflow")


class FlowTrend(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    STABLE = "stable"


@dataclass
class PeriodCashFlow(AnalysisResult):
    """Totals across the whole input range for one granularity."""

    income: float = 0.0
    expenses: float = 0.0
    net_flow: float = 0.0
    trend: FlowTrend = FlowTrend.STABLE
    positive_periods: int = 0
    negative_periods: int = 0
    period_count: int = 0


@dataclass
class CashFlowAnalysis(AnalysisResult):
    monthly: PeriodCashFlow = field(default_factory=PeriodCashFlow)
    quarterly: PeriodCashFlow = field(default_factory=PeriodCashFlow)
    yearly: PeriodCashFlow = field(default_factory=PeriodCashFlow)


class CashFlowAnalyzer:
    """Summarize net flow by month, quarter and year."""

    @classmethod
    def analyze(cls, transactions: Iterable[Transaction | dict[str, Any]]) -> CashFlowAnalysis:
        """Run cash flow analysis.

        Args:
            transactions: Transactions of both types.

        Returns:
            CashFlowAnalysis; an empty input gives zero totals and stable trends.
        """
        txns = coerce_records(transactions, Transaction)
        income = [t for t in txns if t.is_income]
        expenses = [t for t in txns if t.is_expense]

        return CashFlowAnalysis(
            monthly=cls._period_flow(income, expenses, "month"),
            quarterly=cls._period_flow(income, expenses, "quarter"),
            yearly=cls._period_flow(income, expenses, "year"),
        )

    @staticmethod
    def _period_flow(income: list[Transaction], expenses: list[Transaction], period: str) -> PeriodCashFlow:
        income_by_period = group_by_period(income, period)
        expenses_by_period = group_by_period(expenses, period)
        periods = sorted(set(income_by_period) | set(expenses_by_period))

        positive = negative = 0
        for key in periods:
            net = income_by_period.get(key, 0.0) - expenses_by_period.get(key, 0.0)
            if net > 0:
                positive += 1
            elif net < 0:
                negative += 1

        if positive > negative:
            trend = FlowTrend.POSITIVE
        elif negative > positive:
            trend = FlowTrend.NEGATIVE
        else:
            trend = FlowTrend.STABLE

        total_income = sum(income_by_period.values(), 0.0)
        total_expenses = sum(expenses_by_period.values(), 0.0)
        return PeriodCashFlow(
            income=total_income,
            expenses=total_expenses,
            net_flow=total_income - total_expenses,
            trend=trend,
            positive_periods=positive,
            negative_periods=negative,
            period_count=len(periods),
        )


def analyze_cash_flow(transactions: Iterable[Transaction | dict[str, Any]]) -> CashFlowAnalysis:
    """Convenience function; see CashFlowAnalyzer.analyze()."""
    return CashFlowAnalyzer.analyze(transactions)
