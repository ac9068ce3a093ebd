"""
BudgetLens analyzers — pure computation over entity snapshots.

Each module exposes an analyzer class with classmethods and module-level
convenience functions. Nothing here performs I/O or keeps state.
"""

from budgetlens.analyzers.aggregation import (
    group_by_period,
    linear_trend,
    mean,
    period_key,
    std_dev,
    total,
    variance,
)
from budgetlens.analyzers.alerts import (
    AlertBuilder,
    BudgetAlert,
    SpendingAlert,
    build_budget_alerts,
    build_category_exceeded_alerts,
    build_spending_alerts,
    build_unusual_spending_alerts,
)
from budgetlens.analyzers.anomaly import Anomaly, AnomalyDetector, AnomalyType, Severity, detect_anomalies
from budgetlens.analyzers.cashflow import (
    CashFlowAnalysis,
    CashFlowAnalyzer,
    FlowTrend,
    PeriodCashFlow,
    analyze_cash_flow,
)
from budgetlens.analyzers.goals import (
    ContributionOutcome,
    GoalMilestone,
    MilestoneType,
    apply_contribution,
    contributed_total,
    goal_milestones,
    reconcile_goal,
    round_up_amount,
)
from budgetlens.analyzers.health import (
    FinancialHealthScore,
    HealthBreakdown,
    HealthScoreCalculator,
    RiskLevel,
    calculate_financial_health_score,
)
from budgetlens.analyzers.prediction import SpendingPrediction, SpendingPredictor, predict_spending
from budgetlens.analyzers.progress import (
    BudgetStatus,
    accounts_by_type,
    active_accounts,
    available_credit,
    budget_progress,
    budget_spent,
    budget_status,
    category_matches,
    credit_card_debt,
    default_account,
    find_category,
    goal_progress,
    total_balance,
)
from budgetlens.analyzers.recurring import (
    BillReminder,
    advance_recurring,
    due_on_or_before,
    due_within,
    is_due,
    monthly_recurring_cost,
    next_due_date,
    upcoming_bill_reminders,
)
from budgetlens.analyzers.trends import (
    CategoryInsight,
    SpendingTrend,
    TrendAnalyzer,
    TrendDirection,
    get_category_insights,
    get_spending_trends,
)

__all__ = [
    # Aggregation
    "group_by_period",
    "linear_trend",
    "mean",
    "period_key",
    "std_dev",
    "total",
    "variance",
    # Derivations
    "Anomaly",
    "AnomalyDetector",
    "AnomalyType",
    "CashFlowAnalysis",
    "CashFlowAnalyzer",
    "CategoryInsight",
    "FinancialHealthScore",
    "FlowTrend",
    "HealthBreakdown",
    "HealthScoreCalculator",
    "PeriodCashFlow",
    "RiskLevel",
    "Severity",
    "SpendingPrediction",
    "SpendingPredictor",
    "SpendingTrend",
    "TrendAnalyzer",
    "TrendDirection",
    "analyze_cash_flow",
    "calculate_financial_health_score",
    "detect_anomalies",
    "get_category_insights",
    "get_spending_trends",
    "predict_spending",
    # Progress helpers
    "BudgetStatus",
    "accounts_by_type",
    "active_accounts",
    "available_credit",
    "budget_progress",
    "budget_spent",
    "budget_status",
    "category_matches",
    "credit_card_debt",
    "default_account",
    "find_category",
    "goal_progress",
    "total_balance",
    # Alerts, goals, recurring
    "AlertBuilder",
    "BillReminder",
    "BudgetAlert",
    "ContributionOutcome",
    "GoalMilestone",
    "MilestoneType",
    "SpendingAlert",
    "advance_recurring",
    "apply_contribution",
    "build_budget_alerts",
    "build_category_exceeded_alerts",
    "build_spending_alerts",
    "build_unusual_spending_alerts",
    "contributed_total",
    "due_on_or_before",
    "due_within",
    "goal_milestones",
    "is_due",
    "monthly_recurring_cost",
    "next_due_date",
    "reconcile_goal",
    "round_up_amount",
    "upcoming_bill_reminders",
]
