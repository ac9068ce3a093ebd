"""
Financial Health Score — a 0-100 composite of four sub-scores.

1. **Spending**: expenses as a share of income.
2. **Saving**: progress across all savings goals.
3. **Budgeting**: how far spending stays under each budget.
4. **Debt**: credit-card debt relative to other account balances.

The overall score is the rounded mean of the four. Given the same inputs the
result is always identical; nothing here reads the clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from budgetlens.analyzers.aggregation import mean, round_half_up
from budgetlens.analyzers.base import AnalysisResult
from budgetlens.analyzers.progress import budget_spent
from budgetlens.models.entities import (
    Account,
    Budget,
    SavingsGoal,
    Transaction,
    coerce_records,
)

logger = logging.getLogger("budgetlens.analyzers.health")


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class HealthBreakdown(AnalysisResult):
    spending: float = 0.0
    saving: float = 0.0
    budgeting: float = 0.0
    debt: float = 0.0

    def values(self) -> list[float]:
        return [self.spending, self.saving, self.budgeting, self.debt]


@dataclass
class FinancialHealthScore(AnalysisResult):
    """Composite score with the sub-scores that produced it."""

    overall: int
    breakdown: HealthBreakdown
    risk_level: RiskLevel
    recommendations: list[str] = field(default_factory=list)


class HealthScoreCalculator:
    """Heuristic financial health scoring."""

    # (max ratio, score) pairs, checked in order
    SPENDING_BANDS = ((0.5, 100.0), (0.7, 80.0), (0.9, 60.0))
    DEBT_BANDS = ((0.1, 90.0), (0.3, 70.0), (0.5, 50.0))

    NO_GOALS_SCORE = 50.0
    NO_BUDGETS_SCORE = 30.0
    NO_ASSETS_SCORE = 30.0

    @classmethod
    def calculate(
        cls,
        transactions: Iterable[Transaction | dict[str, Any]],
        budgets: Iterable[Budget | dict[str, Any]],
        goals: Iterable[SavingsGoal | dict[str, Any]],
        accounts: Iterable[Account | dict[str, Any]],
    ) -> FinancialHealthScore:
        """Score the user's finances.

        Args:
            transactions: All income and expense transactions.
            budgets: Budgets to measure compliance against.
            goals: Savings goals.
            accounts: Accounts; credit-card balances are negative.

        Returns:
            FinancialHealthScore with the overall score, risk level and
            recommendations in the order the sub-scores were computed.
        """
        txns = coerce_records(transactions, Transaction)
        budget_list = coerce_records(budgets, Budget)
        goal_list = coerce_records(goals, SavingsGoal)
        account_list = coerce_records(accounts, Account)

        recommendations: list[str] = []
        breakdown = HealthBreakdown(
            spending=cls._spending_score(txns, recommendations),
            saving=cls._saving_score(goal_list, recommendations),
            budgeting=cls._budgeting_score(txns, budget_list, recommendations),
            debt=cls._debt_score(account_list, recommendations),
        )

        raw_overall = mean(breakdown.values())
        if raw_overall < 40:
            risk = RiskLevel.HIGH
        elif raw_overall < 70:
            risk = RiskLevel.MEDIUM
        else:
            risk = RiskLevel.LOW

        result = FinancialHealthScore(
            overall=round_half_up(raw_overall),
            breakdown=breakdown,
            risk_level=risk,
            recommendations=recommendations,
        )
        logger.debug("Health score %d (%s): %s", result.overall, risk.value, breakdown)
        return result

    # ------------------------------------------------------------------ #
    #  Sub-scores                                                         #
    # ------------------------------------------------------------------ #

    @classmethod
    def _spending_score(cls, txns: list[Transaction], recommendations: list[str]) -> float:
        total_income = sum(t.amount for t in txns if t.is_income)
        total_expenses = sum(t.amount for t in txns if t.is_expense)
        if total_income <= 0:
            return 0.0

        ratio = total_expenses / total_income
        for max_ratio, score in cls.SPENDING_BANDS:
            if ratio <= max_ratio:
                return score
        recommendations.append("Consider reducing your expenses to improve financial health")
        return 30.0

    @classmethod
    def _saving_score(cls, goals: list[SavingsGoal], recommendations: list[str]) -> float:
        total_saved = sum(g.current_amount for g in goals)
        total_target = sum(g.target_amount for g in goals)

        if total_target > 0:
            score = min(100.0, total_saved / total_target * 100)
        else:
            score = cls.NO_GOALS_SCORE

        if score < 50:
            recommendations.append("Set up savings goals to build your financial future")
        return score

    @classmethod
    def _budgeting_score(
        cls,
        txns: list[Transaction],
        budgets: list[Budget],
        recommendations: list[str],
    ) -> float:
        if not budgets:
            recommendations.append("Create budgets to track and control your spending")
            return cls.NO_BUDGETS_SCORE

        compliance = mean([cls._compliance(b, txns) for b in budgets])
        if compliance < 70:
            recommendations.append("Improve budget adherence to better control your spending")
        return compliance

    @staticmethod
    def _compliance(budget: Budget, txns: list[Transaction]) -> float:
        """Percent of the limit left unspent, floored at 0."""
        if budget.amount <= 0:
            return 0.0
        return max(0.0, 100 - budget_spent(budget, txns) / budget.amount * 100)

    @classmethod
    def _debt_score(cls, accounts: list[Account], recommendations: list[str]) -> float:
        debt = sum(abs(a.balance) for a in accounts if a.is_credit_card)
        assets = sum(a.balance for a in accounts if not a.is_credit_card)

        if debt == 0:
            return 100.0
        if assets <= 0:
            recommendations.append("Build emergency savings before taking on more debt")
            return cls.NO_ASSETS_SCORE

        ratio = debt / assets
        for max_ratio, score in cls.DEBT_BANDS:
            if ratio <= max_ratio:
                return score
        recommendations.append("Focus on paying down high-interest debt")
        return 20.0


def calculate_financial_health_score(
    transactions: Iterable[Transaction | dict[str, Any]],
    budgets: Iterable[Budget | dict[str, Any]],
    goals: Iterable[SavingsGoal | dict[str, Any]],
    accounts: Iterable[Account | dict[str, Any]],
) -> FinancialHealthScore:
    """Convenience function; see HealthScoreCalculator.calculate()."""
    return HealthScoreCalculator.calculate(transactions, budgets, goals, accounts)
