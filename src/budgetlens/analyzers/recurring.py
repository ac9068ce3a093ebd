"""
Recurring transactions — due dates, reminders and monthly cost.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable

from budgetlens.analyzers.base import AnalysisResult
from budgetlens.models.entities import Frequency, RecurringTransaction, TransactionType, coerce_records

logger = logging.getLogger("budgetlens.analyzers.recurring")

# Occurrences per month, for normalizing costs
MONTHLY_FACTOR: dict[Frequency, float] = {
    Frequency.DAILY: 30.0,
    Frequency.WEEKLY: 52.0 / 12.0,
    Frequency.MONTHLY: 1.0,
    Frequency.YEARLY: 1.0 / 12.0,
}


@dataclass
class BillReminder(AnalysisResult):
    """Payload for an upcoming-bill notification."""

    id: str
    title: str
    amount: float
    due_date: date
    category: str
    is_recurring: bool = True
    frequency: Frequency | None = None
    days_until_due: int = 0


def _add_months(d: date, months: int) -> date:
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_due_date(frequency: Frequency | str, last_due: date) -> date:
    """The due date after ``last_due``.

    Month and year steps clamp to the end of shorter months, so Jan 31 is
    followed by Feb 28 (or 29) and Feb 29 by Feb 28 the next year.
    """
    frequency = Frequency(frequency)
    if frequency == Frequency.DAILY:
        return last_due + timedelta(days=1)
    if frequency == Frequency.WEEKLY:
        return last_due + timedelta(days=7)
    if frequency == Frequency.MONTHLY:
        return _add_months(last_due, 1)
    return _add_months(last_due, 12)


def advance_recurring(item: RecurringTransaction) -> RecurringTransaction:
    """Copy of ``item`` with its next due date moved one step forward."""
    return item.model_copy(update={"next_due_date": next_due_date(item.frequency, item.next_due_date)})


def is_due(item: RecurringTransaction, as_of: date) -> bool:
    if not item.is_active:
        return False
    if item.end_date is not None and item.next_due_date > item.end_date:
        return False
    return item.next_due_date <= as_of


def due_on_or_before(items: Iterable[RecurringTransaction | dict[str, Any]], as_of: date) -> list[RecurringTransaction]:
    """Active items due on ``as_of`` or already overdue."""
    return [i for i in coerce_records(items, RecurringTransaction) if is_due(i, as_of)]


def due_within(
    items: Iterable[RecurringTransaction | dict[str, Any]],
    as_of: date,
    days: int = 7,
) -> list[RecurringTransaction]:
    """Active items falling due between ``as_of`` and ``as_of + days``, soonest first."""
    horizon = as_of + timedelta(days=days)
    upcoming = [
        i for i in coerce_records(items, RecurringTransaction)
        if i.is_active
        and as_of <= i.next_due_date <= horizon
        and (i.end_date is None or i.next_due_date <= i.end_date)
    ]
    return sorted(upcoming, key=lambda i: i.next_due_date)


def upcoming_bill_reminders(
    items: Iterable[RecurringTransaction | dict[str, Any]],
    as_of: date,
    days: int = 7,
) -> list[BillReminder]:
    """Reminder payloads for expense items due within ``days``."""
    return [
        BillReminder(
            id=f"bill_{i.id}_{i.next_due_date.isoformat()}",
            title=i.title or i.category,
            amount=i.amount,
            due_date=i.next_due_date,
            category=i.category,
            frequency=i.frequency,
            days_until_due=(i.next_due_date - as_of).days,
        )
        for i in due_within(items, as_of, days)
        if i.type == TransactionType.EXPENSE
    ]


def monthly_recurring_cost(items: Iterable[RecurringTransaction | dict[str, Any]]) -> float:
    """Normalized monthly total of active recurring expenses."""
    return sum(
        i.amount * MONTHLY_FACTOR[i.frequency]
        for i in coerce_records(items, RecurringTransaction)
        if i.is_active and i.type == TransactionType.EXPENSE
    )
