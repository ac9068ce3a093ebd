"""
Snapshot — every entity collection the analyzers need, in one document.

The storage layer owns persistence; a snapshot is just what it hands over.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from budgetlens.exceptions import SnapshotError
from budgetlens.models.entities import (
    Account,
    Budget,
    Category,
    GoalContribution,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    User,
    coerce_records,
)

_COLLECTIONS: dict[str, type[BaseModel]] = {
    "transactions": Transaction,
    "budgets": Budget,
    "categories": Category,
    "accounts": Account,
    "goals": SavingsGoal,
    "contributions": GoalContribution,
    "recurring": RecurringTransaction,
}


class Snapshot(BaseModel):
    """Complete set of entity collections for analysis.

    Malformed entries in any collection are dropped rather than failing the
    whole snapshot.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)
    goals: list[SavingsGoal] = Field(default_factory=list, validation_alias="savingsGoals")
    contributions: list[GoalContribution] = Field(default_factory=list)
    recurring: list[RecurringTransaction] = Field(default_factory=list, validation_alias="recurringTransactions")
    user: User | None = None

    @field_validator(*_COLLECTIONS, mode="before")
    @classmethod
    def drop_malformed(cls, value: Any, info: ValidationInfo) -> list[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError(f"{info.field_name} must be a list")
        return coerce_records(value, _COLLECTIONS[info.field_name])

    @classmethod
    def load(cls, path: str | Path) -> Snapshot:
        """Read a JSON snapshot exported by the storage layer."""
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except FileNotFoundError as exc:
            raise SnapshotError(f"Snapshot not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Snapshot is not valid JSON: {path} ({exc.msg})") from exc
        if not isinstance(data, dict):
            raise SnapshotError(f"Snapshot must be a JSON object: {path}")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise SnapshotError(f"Snapshot has an invalid layout: {path} ({exc.error_count()} error(s))") from exc
