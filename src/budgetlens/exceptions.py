"""BudgetLens exception types."""


class BudgetLensError(Exception):
    """Base class for errors raised by BudgetLens."""


class SnapshotError(BudgetLensError):
    """A snapshot file could not be read or parsed."""
