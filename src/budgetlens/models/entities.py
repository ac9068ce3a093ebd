"""
Entity records — transactions, budgets, categories, accounts, goals.

These mirror the JSON the mobile app keeps in local storage. Keys may arrive
in camelCase (``targetAmount``) or snake_case (``target_amount``). Records are
frozen: analyzers read them, update helpers return copies.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger("budgetlens.models")

RecordT = TypeVar("RecordT", bound=BaseModel)


def parse_date(raw: Any) -> date | None:
    """Parse an ISO date or datetime string (or a date) into a ``date``."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw.strip()[:10])
        except ValueError:
            return None
    return None


class TransactionType(str, Enum):
    """Whether money came in or went out."""

    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    CASH = "cash"
    OTHER = "other"


class GoalCategory(str, Enum):
    EMERGENCY = "emergency"
    VACATION = "vacation"
    HOUSE = "house"
    CAR = "car"
    EDUCATION = "education"
    RETIREMENT = "retirement"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContributionSource(str, Enum):
    MANUAL = "manual"
    ROUNDUP = "roundup"
    RECURRING = "recurring"
    BONUS = "bonus"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Record(BaseModel):
    """Base for all entity records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _coerce_date(value: Any) -> Any:
    if isinstance(value, (str, datetime)):
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError(f"unparseable date: {value!r}")
        return parsed
    return value


class Transaction(Record):
    """A single income or expense.

    ``amount`` is always positive; ``type`` decides the direction.
    ``category`` is a free string matched against ``Category.name``.
    """

    id: str
    amount: float = Field(gt=0, allow_inf_nan=False)
    type: TransactionType
    category: str = ""
    date: date
    description: str = ""
    account_id: str | None = None

    validate_date = field_validator("date", mode="before")(_coerce_date)

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME


class Budget(Record):
    """A spending limit for one category over a period."""

    id: str
    name: str = ""
    category: str
    amount: float = Field(ge=0, allow_inf_nan=False)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: date
    end_date: date

    validate_dates = field_validator("start_date", "end_date", mode="before")(_coerce_date)

    @model_validator(mode="after")
    def check_window(self) -> Budget:
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class Category(Record):
    id: str
    name: str
    type: TransactionType
    color: str = ""
    icon: str = ""


class Account(Record):
    """A bank, card or cash account. Credit-card balances are negative."""

    id: str
    name: str = ""
    type: AccountType
    balance: float = Field(allow_inf_nan=False)
    currency: str = "USD"
    credit_limit: float | None = Field(default=None, ge=0)
    is_active: bool = True
    is_default: bool = False

    @property
    def is_credit_card(self) -> bool:
        return self.type == AccountType.CREDIT_CARD


class SavingsGoal(Record):
    id: str
    name: str = ""
    target_amount: float = Field(ge=0, allow_inf_nan=False)
    current_amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    category: GoalCategory = GoalCategory.OTHER
    priority: Priority = Priority.MEDIUM
    target_date: date | None = None
    is_completed: bool = False

    validate_target_date = field_validator("target_date", mode="before")(_coerce_date)


class GoalContribution(Record):
    """One entry in a goal's append-only contribution ledger."""

    id: str
    goal_id: str
    amount: float = Field(allow_inf_nan=False)
    date: date
    description: str = ""
    source: ContributionSource = ContributionSource.MANUAL

    validate_date = field_validator("date", mode="before")(_coerce_date)


class RecurringTransaction(Record):
    id: str
    title: str = ""
    amount: float = Field(gt=0, allow_inf_nan=False)
    category: str = ""
    type: TransactionType = TransactionType.EXPENSE
    frequency: Frequency
    start_date: date | None = None
    end_date: date | None = None
    next_due_date: date
    is_active: bool = True
    is_subscription: bool = False

    validate_dates = field_validator("start_date", "end_date", "next_due_date", mode="before")(_coerce_date)


class User(Record):
    id: str
    name: str = ""
    email: str = ""
    currency: str = "USD"
    preferences: dict[str, Any] = Field(default_factory=dict)


def coerce_records(records: Iterable[Any] | None, model: type[RecordT]) -> list[RecordT]:
    """Validate raw records into ``model`` instances, skipping malformed ones.

    Model instances pass through untouched. Mappings are validated; any that
    fail (bad date, NaN amount, unknown enum value) are dropped and logged so
    that one bad row never sinks a whole computation.
    """
    if not records:
        return []

    valid: list[RecordT] = []
    skipped = 0
    for raw in records:
        if isinstance(raw, model):
            valid.append(raw)
            continue
        try:
            valid.append(model.model_validate(raw))
        except ValidationError as exc:
            skipped += 1
            logger.debug("Skipping malformed %s record %r: %s", model.__name__, raw, exc.errors()[0]["msg"])

    if skipped:
        logger.warning("Dropped %d malformed %s record(s)", skipped, model.__name__)
    return valid
