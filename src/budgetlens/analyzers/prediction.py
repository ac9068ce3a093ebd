"""
Spending Predictor — next month/quarter/year expense projection.

Fits a least-squares line through monthly expense totals and adds its slope
to the monthly average. Confidence drops as month-to-month variance grows.
This is a heuristic, not a validated model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from budgetlens.analyzers.aggregation import group_by_period, linear_trend, mean, round_half_up, variance
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.models.entities import Transaction, coerce_records

logger = logging.getLogger("budgetlens.analyzers.prediction")

INSUFFICIENT_DATA = "Insufficient data for prediction"
TREND_INCREASING = "Spending trend is increasing"
TREND_DECREASING = "Spending trend is decreasing"
INCONSISTENT_PATTERN = "Spending patterns are inconsistent"


@dataclass
class SpendingPrediction(AnalysisResult):
    """Projected expenses. Figures are whole currency units."""

    next_month: int = 0
    next_quarter: int = 0
    next_year: int = 0
    confidence: int = 0  # 0-100
    factors: list[str] = field(default_factory=list)
    sufficient_data: bool = True
    months_analyzed: int = 0
    monthly_trend: float = 0.0


class SpendingPredictor:
    """Project future spending from monthly history."""

    MIN_MONTHS = 3
    LOW_CONFIDENCE = 50

    @classmethod
    def predict(
        cls,
        transactions: Iterable[Transaction | dict[str, Any]],
        *,
        min_months: int = MIN_MONTHS,
    ) -> SpendingPrediction:
        """Project spending for the next month, quarter and year.

        Args:
            transactions: Transactions; only expenses are used.
            min_months: Months of history required before projecting.

        Returns:
            SpendingPrediction. With too little history every figure is 0,
            ``sufficient_data`` is False and the factors explain why.
        """
        expenses = [t for t in coerce_records(transactions, Transaction) if t.is_expense]
        monthly = list(group_by_period(expenses, "month").values())

        if len(monthly) < min_months:
            logger.debug("Only %d month(s) of expenses; need %d to predict", len(monthly), min_months)
            return SpendingPrediction(
                factors=[INSUFFICIENT_DATA],
                sufficient_data=False,
                months_analyzed=len(monthly),
            )

        trend = linear_trend(monthly)
        average = mean(monthly)

        next_month = max(0.0, average + trend)
        next_quarter = next_month * 3
        next_year = next_month * 12

        if average > 0:
            confidence = max(0.0, min(100.0, 100 - variance(monthly) / average * 100))
        else:
            confidence = 0.0

        factors: list[str] = []
        if trend > 0:
            factors.append(TREND_INCREASING)
        elif trend < 0:
            factors.append(TREND_DECREASING)
        if confidence < cls.LOW_CONFIDENCE:
            factors.append(INCONSISTENT_PATTERN)

        return SpendingPrediction(
            next_month=round_half_up(next_month),
            next_quarter=round_half_up(next_quarter),
            next_year=round_half_up(next_year),
            confidence=round_half_up(confidence),
            factors=factors,
            sufficient_data=True,
            months_analyzed=len(monthly),
            monthly_trend=trend,
        )


def predict_spending(
    transactions: Iterable[Transaction | dict[str, Any]],
    *,
    min_months: int = SpendingPredictor.MIN_MONTHS,
) -> SpendingPrediction:
    """Convenience function; see SpendingPredictor.predict()."""
    return SpendingPredictor.predict(transactions, min_months=min_months)
