"""
BudgetLens — analytics for a personal budget tracker.

Trends, category insights, a financial health score, spending predictions,
anomaly detection and cash flow, computed from plain entity snapshots.
"""

__version__ = "0.3.0"
__all__ = ["AnalyticsService", "BudgetLensConfig", "Snapshot"]

from budgetlens.config import BudgetLensConfig  # noqa: E402
from budgetlens.models.snapshot import Snapshot  # noqa: E402
from budgetlens.service import AnalyticsService  # noqa: E402
