"""
Savings goal ledger — contributions, milestones and round-ups.

A goal's ``current_amount`` should equal the sum of its contributions.
Applying a contribution returns a new goal record; inputs are never mutated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable

from budgetlens.analyzers.base import AnalysisResult
from budgetlens.analyzers.progress import goal_progress
from budgetlens.models.entities import GoalContribution, SavingsGoal, coerce_records

logger = logging.getLogger("budgetlens.analyzers.goals")


class MilestoneType(str, Enum):
    QUARTER = "quarter"
    HALF = "half"
    THREE_QUARTERS = "three_quarters"
    COMPLETED = "completed"


MILESTONE_PERCENTAGES: dict[MilestoneType, float] = {
    MilestoneType.QUARTER: 25.0,
    MilestoneType.HALF: 50.0,
    MilestoneType.THREE_QUARTERS: 75.0,
    MilestoneType.COMPLETED: 100.0,
}


@dataclass(frozen=True)
class GoalMilestone(AnalysisResult):
    goal_id: str
    type: MilestoneType
    percentage: float
    amount: float
    achieved_on: date | None = None


@dataclass
class ContributionOutcome(AnalysisResult):
    """A goal after a contribution, plus any milestones it just crossed."""

    goal: SavingsGoal
    new_milestones: list[GoalMilestone]

    @property
    def completed(self) -> bool:
        return self.goal.is_completed


def contributed_total(goal: SavingsGoal, contributions: Iterable[GoalContribution | dict[str, Any]]) -> float:
    """Sum of ledger entries for ``goal``."""
    return math.fsum(c.amount for c in coerce_records(contributions, GoalContribution) if c.goal_id == goal.id)


def reconcile_goal(goal: SavingsGoal, contributions: Iterable[GoalContribution | dict[str, Any]]) -> float:
    """Ledger total minus ``current_amount``; 0 when they agree."""
    return contributed_total(goal, contributions) - goal.current_amount


def goal_milestones(goal: SavingsGoal, achieved_on: date | None = None) -> list[GoalMilestone]:
    """Milestones reached at the goal's current amount, lowest first."""
    progress = goal_progress(goal)
    return [
        GoalMilestone(
            goal_id=goal.id,
            type=milestone,
            percentage=pct,
            amount=goal.current_amount,
            achieved_on=achieved_on,
        )
        for milestone, pct in MILESTONE_PERCENTAGES.items()
        if progress >= pct
    ]


def apply_contribution(
    goal: SavingsGoal,
    contribution: GoalContribution,
    existing_milestones: Iterable[GoalMilestone] = (),
) -> ContributionOutcome:
    """Add a contribution to a goal.

    Returns the updated goal (completed once the target is met) and the
    milestones crossed for the first time. ``existing_milestones`` holds
    milestones already awarded; none is awarded twice per goal.
    """
    if contribution.goal_id != goal.id:
        raise ValueError(f"Contribution {contribution.id} belongs to goal {contribution.goal_id}, not {goal.id}")

    new_amount = max(0.0, goal.current_amount + contribution.amount)
    completed = goal.is_completed or (goal.target_amount > 0 and new_amount >= goal.target_amount)
    updated = goal.model_copy(update={"current_amount": new_amount, "is_completed": completed})

    awarded = {m.type for m in existing_milestones if m.goal_id == goal.id}
    new_milestones = [
        m for m in goal_milestones(updated, achieved_on=contribution.date)
        if m.type not in awarded
    ]
    for milestone in new_milestones:
        logger.info("Goal %s reached %s (%.0f%%)", goal.id, milestone.type.value, milestone.percentage)

    return ContributionOutcome(goal=updated, new_milestones=new_milestones)


def round_up_amount(amount: float, unit: float = 1.0) -> float:
    """Spare change from rounding ``amount`` up to the next multiple of ``unit``.

    Exact multiples round up by nothing.
    """
    if unit <= 0 or amount <= 0:
        return 0.0
    cents = round(amount * 100)
    unit_cents = round(unit * 100)
    if unit_cents == 0:
        return 0.0
    remainder = cents % unit_cents
    if remainder == 0:
        return 0.0
    return (unit_cents - remainder) / 100
