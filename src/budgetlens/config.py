"""
BudgetLens configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Thresholds used by the derivation functions."""

    z_score_threshold: float = Field(default=2.0, gt=0.0, description="Flag amounts beyond this many std devs")
    high_severity_z_score: float = Field(default=3.0, gt=0.0, description="Z-score above which severity is high")
    pattern_window_days: int = Field(default=30, ge=1, description="Trailing window for high-value runs")
    pattern_run_length: int = Field(default=3, ge=1, description="Consecutive high-value count that is suspicious")
    min_prediction_months: int = Field(default=3, ge=2, description="Months of history needed to predict")
    budget_warning_pct: float = Field(default=80.0, ge=0.0, le=100.0)


class NotificationConfig(BaseModel):
    """Which alert payloads to build, and their thresholds."""

    budget_alerts: bool = True
    bill_reminders: bool = True
    spending_alerts: bool = True
    goal_milestones: bool = True
    budget_threshold: float = Field(default=80.0, ge=0.0, description="Percent of a budget that triggers a warning")
    spending_threshold: float = Field(default=500.0, ge=0.0, description="Single expense amount that is alerted")
    reminder_days_ahead: int = Field(default=7, ge=0)


class BudgetLensConfig(BaseModel):
    """Root configuration for BudgetLens."""

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    # Presentation settings
    currency: str = Field(default="USD")
    log_level: str = Field(default="WARNING")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> BudgetLensConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_currency = os.environ.get("BUDGETLENS_CURRENCY")
        env_level = os.environ.get("BUDGETLENS_LOG_LEVEL")
        env_threshold = os.environ.get("BUDGETLENS_BUDGET_THRESHOLD")

        if env_currency:
            data["currency"] = env_currency
        if env_level:
            data["log_level"] = env_level.upper()
        if env_threshold:
            notifications = data.get("notifications") or {}
            notifications["budget_threshold"] = env_threshold
            data["notifications"] = notifications

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
