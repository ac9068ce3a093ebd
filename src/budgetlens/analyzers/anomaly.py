"""
Anomaly Detector — heuristic detection of unusual spending.

Implements two independent checks over expense transactions:
1. **Z-score**: flags individual transactions more than N population standard
   deviations from the mean expense amount.
2. **High-value run**: within a trailing window, flags every transaction that
   extends a run of consecutive above-normal amounts past a set length.

Both checks may flag the same transaction. No model training involved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any, Iterable

from budgetlens.analyzers.aggregation import mean, std_dev
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.models.entities import Transaction, coerce_records

logger = logging.getLogger("budgetlens.analyzers.anomaly")

_EPSILON = 1e-9


class AnomalyType(str, Enum):
    UNUSUAL_SPENDING = "unusual_spending"
    SUSPICIOUS_PATTERN = "suspicious_pattern"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class Anomaly(AnalysisResult):
    """A single flagged transaction."""

    type: AnomalyType
    description: str
    amount: float
    date: date
    severity: Severity
    category: str | None = None
    transaction_id: str | None = None
    z_score: float | None = None


class AnomalyDetector:
    """Statistical anomaly detection for personal expenses."""

    @classmethod
    def detect(
        cls,
        transactions: Iterable[Transaction | dict[str, Any]],
        *,
        as_of: date | None = None,
        z_threshold: float = 2.0,
        high_z: float = 3.0,
        window_days: int = 30,
        run_length: int = 3,
    ) -> list[Anomaly]:
        """Run both detection methods on expense transactions.

        Args:
            transactions: Transactions; only expenses are examined.
            as_of: End of the trailing window for run detection. Defaults to
                the latest expense date so results do not depend on the clock.
            z_threshold: Z-score above which a transaction is unusual.
            high_z: Z-score above which an unusual transaction is high severity.
            window_days: Length of the trailing window for run detection.
            run_length: Consecutive above-normal transactions that form a run.

        Returns:
            Anomalies, z-score findings first, then run findings.
        """
        expenses = [t for t in coerce_records(transactions, Transaction) if t.is_expense]
        if not expenses:
            return []

        amounts = [t.amount for t in expenses]
        mean_val = mean(amounts)
        std_val = std_dev(amounts)

        anomalies = cls._z_score_detection(expenses, mean_val, std_val, z_threshold, high_z)

        if as_of is None:
            as_of = max(t.date for t in expenses)
        anomalies.extend(
            cls._high_value_runs(expenses, mean_val + std_val, as_of, window_days, run_length)
        )

        logger.debug(
            "Checked %d expenses (mean %.2f, std %.2f): %d anomalies",
            len(expenses), mean_val, std_val, len(anomalies),
        )
        return anomalies

    # ------------------------------------------------------------------ #
    #  Detection methods                                                  #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _z_score_detection(
        expenses: list[Transaction],
        mean_val: float,
        std_val: float,
        threshold: float,
        high_z: float,
    ) -> list[Anomaly]:
        """Flag transactions with |amount - mean| / std > threshold.

        Mean and population std dev are taken over all expenses. With no
        spread (all amounts equal) nothing is flagged.
        """
        if std_val <= _EPSILON:
            return []

        anomalies: list[Anomaly] = []
        for t in expenses:
            z = abs(t.amount - mean_val) / std_val
            # float noise must not push a boundary score over the threshold
            if z - threshold > _EPSILON:
                anomalies.append(Anomaly(
                    type=AnomalyType.UNUSUAL_SPENDING,
                    description=f"Unusually high spending: ${t.amount:,.2f}",
                    amount=t.amount,
                    date=t.date,
                    severity=Severity.HIGH if z > high_z else Severity.MEDIUM,
                    category=t.category,
                    transaction_id=t.id,
                    z_score=round(z, 3),
                ))
        return anomalies

    @staticmethod
    def _high_value_runs(
        expenses: list[Transaction],
        threshold: float,
        as_of: date,
        window_days: int,
        run_length: int,
    ) -> list[Anomaly]:
        """Flag each transaction that extends a run of above-threshold amounts.

        The counter resets whenever an amount is at or below ``threshold``;
        every transaction at which the run reaches ``run_length`` is flagged.
        """
        window_start = as_of - timedelta(days=window_days)
        recent = sorted(
            (t for t in expenses if window_start <= t.date <= as_of),
            key=lambda t: t.date,
        )

        anomalies: list[Anomaly] = []
        consecutive = 0
        for t in recent:
            if t.amount > threshold:
                consecutive += 1
            else:
                consecutive = 0

            if consecutive >= run_length:
                anomalies.append(Anomaly(
                    type=AnomalyType.SUSPICIOUS_PATTERN,
                    description="Multiple high-value transactions detected",
                    amount=t.amount,
                    date=t.date,
                    severity=Severity.HIGH,
                    category=t.category,
                    transaction_id=t.id,
                ))
        return anomalies


def detect_anomalies(
    transactions: Iterable[Transaction | dict[str, Any]],
    *,
    as_of: date | None = None,
) -> list[Anomaly]:
    """Convenience function; see AnomalyDetector.detect()."""
    return AnomalyDetector.detect(transactions, as_of=as_of)
