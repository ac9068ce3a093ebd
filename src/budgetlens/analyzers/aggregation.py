"""
Aggregation primitives — grouping and simple statistics.

Every helper here is total over its input: empty sequences give 0.0, never an
exception. The derivation modules build on these.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Iterable, Sequence

from budgetlens.models.entities import Transaction, coerce_records

PERIODS = ("week", "month", "quarter", "year")


def period_key(d: date, period: str) -> str:
    """Calendar bucket key for ``d``.

    ``week`` is the ISO date of the Sunday starting the week, ``month`` is
    ``YYYY-MM``, ``quarter`` is ``YYYY-Q<n>`` and ``year`` is ``YYYY``.
    """
    if period == "week":
        week_start = d - timedelta(days=(d.weekday() + 1) % 7)
        return week_start.isoformat()
    if period == "month":
        return f"{d.year}-{d.month:02d}"
    if period == "quarter":
        return f"{d.year}-Q{(d.month - 1) // 3 + 1}"
    if period == "year":
        return str(d.year)
    raise ValueError(f"Unknown period {period!r}; expected one of {', '.join(PERIODS)}")


def group_by_period(transactions: Iterable[Transaction | dict[str, Any]], period: str) -> dict[str, float]:
    """Sum transaction amounts per calendar period, keys in ascending order.

    Records that fail validation (unparseable date, non-finite amount) are
    dropped before grouping.
    """
    grouped: dict[str, float] = defaultdict(float)
    for txn in coerce_records(transactions, Transaction):
        grouped[period_key(txn.date, period)] += txn.amount
    return {key: grouped[key] for key in sorted(grouped)}


def total(values: Iterable[float]) -> float:
    return float(sum(values))


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return total(values) / len(values)


def variance(values: Sequence[float]) -> float:
    """Population variance (divides by n)."""
    if not values:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def std_dev(values: Sequence[float]) -> float:
    return variance(values) ** 0.5


def linear_trend(values: Sequence[float]) -> float:
    """Least-squares slope of ``values`` against their index.

    Fewer than two points have no slope; 0.0 is returned and callers treat it
    as insufficient data.
    """
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_xx = (n - 1) * n * (2 * n - 1) / 6
    sum_y = total(values)
    sum_xy = sum(i * v for i, v in enumerate(values))

    denominator = n * sum_xx - sum_x * sum_x
    return (n * sum_xy - sum_x * sum_y) / denominator


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, as the mobile app displays it."""
    return math.floor(value + 0.5)
