"""
BudgetLens CLI — command-line interface.

Usage:
    budgetlens report export.json
    budgetlens report export.json --config budgetlens.yaml --json
    budgetlens anomalies export.json --as-of 2025-03-31
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from budgetlens import __version__
from budgetlens.analyzers.anomaly import Severity
from budgetlens.analyzers.health import RiskLevel
from budgetlens.analyzers.progress import BudgetStatus
from budgetlens.config import BudgetLensConfig
from budgetlens.exceptions import BudgetLensError
from budgetlens.models.entities import parse_date
from budgetlens.models.snapshot import Snapshot
from budgetlens.service import AnalyticsService, FinancialReport

app = typer.Typer(
    name="budgetlens",
    help="BudgetLens — spending analytics for your budget tracker export",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

SEVERITY_COLORS = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
}
RISK_COLORS = {
    RiskLevel.HIGH: "red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "green",
}
STATUS_COLORS = {
    BudgetStatus.EXCEEDED: "red",
    BudgetStatus.WARNING: "yellow",
    BudgetStatus.GOOD: "green",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]BudgetLens[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """BudgetLens — trends, health score, predictions and anomalies."""


def _setup(config: str | None) -> AnalyticsService:
    config_path = config if config and Path(config).exists() else None
    settings = BudgetLensConfig.load(config_path)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return AnalyticsService(config=settings)


def _load_snapshot(path: str) -> Snapshot:
    try:
        return Snapshot.load(path)
    except BudgetLensError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1) from exc


def _parse_as_of(raw: str | None) -> date | None:
    if raw is None:
        return None
    parsed = parse_date(raw)
    if parsed is None:
        console.print(f"[red]Error: --as-of must be an ISO date, got {raw!r}[/red]")
        raise typer.Exit(1)
    return parsed


@app.command()
def report(
    snapshot: str = typer.Argument(..., help="Path to a JSON snapshot exported by the app"),
    config: str = typer.Option(
        "budgetlens.yaml",
        "--config",
        "-c",
        help="Path to config file",
    ),
    period: str = typer.Option(
        "month",
        "--period",
        "-p",
        help="Trend granularity: week, month, quarter, year",
    ),
    as_of: str = typer.Option(
        None,
        "--as-of",
        help="Reference date (YYYY-MM-DD); defaults to the latest transaction",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full report as JSON",
    ),
    output: str = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON report to this path",
    ),
) -> None:
    """Build a full financial report from a snapshot."""
    service = _setup(config)
    data = _load_snapshot(snapshot)
    reference = _parse_as_of(as_of)

    try:
        result = service.build_report(data, as_of=reference, period=period)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1) from exc

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        console.print(Panel.fit(
            "[bold blue]BudgetLens[/bold blue] — Financial Report",
            subtitle=f"v{__version__}",
        ))
        _display_report(result, service.config.currency)

    if output:
        _save_report(result, output)


@app.command()
def anomalies(
    snapshot: str = typer.Argument(..., help="Path to a JSON snapshot exported by the app"),
    config: str = typer.Option(
        "budgetlens.yaml",
        "--config",
        "-c",
        help="Path to config file",
    ),
    as_of: str = typer.Option(
        None,
        "--as-of",
        help="End of the trailing window (YYYY-MM-DD)",
    ),
) -> None:
    """List unusual expenses and suspicious runs."""
    service = _setup(config)
    data = _load_snapshot(snapshot)
    found = service.anomalies(data.transactions, _parse_as_of(as_of))

    if not found:
        console.print("[green]✓[/green] No anomalies found")
        return

    table = Table(title=f"Anomalies ({len(found)})")
    table.add_column("Date")
    table.add_column("Type", style="bold")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Severity")
    for anomaly in found:
        color = SEVERITY_COLORS.get(anomaly.severity, "white")
        table.add_row(
            anomaly.date.isoformat(),
            anomaly.type.value,
            anomaly.category or "-",
            f"{anomaly.amount:,.2f}",
            f"[{color}]{anomaly.severity.value.upper()}[/{color}]",
        )
    console.print(table)


def _display_report(result: FinancialReport, currency: str) -> None:
    """Display report summary in the terminal."""
    health = result.health
    risk_color = RISK_COLORS.get(health.risk_level, "white")

    console.print()
    table = Table(title="Summary", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Health Score", f"{health.overall}/100")
    table.add_row("Risk Level", f"[{risk_color}]{health.risk_level.value}[/{risk_color}]")
    table.add_row("Net Worth", f"{result.accounts.total_balance:,.2f} {currency}")
    table.add_row("Credit Card Debt", f"{result.accounts.credit_card_debt:,.2f} {currency}")
    table.add_row("Net Flow (all time)", f"{result.cash_flow.monthly.net_flow:,.2f} {currency}")
    if result.prediction.sufficient_data:
        table.add_row(
            "Predicted Next Month",
            f"{result.prediction.next_month:,} {currency} ({result.prediction.confidence}% confidence)",
        )
    else:
        table.add_row("Predicted Next Month", "[dim]not enough history[/dim]")
    table.add_row("Anomalies", str(len(result.anomalies)))
    console.print(table)
    console.print()

    if result.budgets:
        budgets = Table(title="Budgets")
        budgets.add_column("Budget", style="bold")
        budgets.add_column("Spent", justify="right")
        budgets.add_column("Limit", justify="right")
        budgets.add_column("Status")
        for item in result.budgets:
            color = STATUS_COLORS.get(item.status, "white")
            budgets.add_row(
                item.name,
                f"{item.spent:,.2f}",
                f"{item.limit:,.2f}",
                f"[{color}]{item.status.value}[/{color}]",
            )
        console.print(budgets)
        console.print()

    if result.category_insights:
        console.print("[bold]Top Categories:[/bold]")
        for i, insight in enumerate(result.category_insights[:5], 1):
            console.print(
                f"  {i}. {insight.category or 'uncategorized'} — "
                f"{insight.total_spent:,.2f} ({insight.percentage_of_total:.1f}%)"
            )
        console.print()

    if health.recommendations:
        console.print("[bold]Recommendations:[/bold]")
        for rec in health.recommendations:
            console.print(f"  • {rec}")
        console.print()


def _save_report(result: FinancialReport, output: str) -> None:
    """Save report to file as JSON."""
    path = Path(output)
    path.write_text(json.dumps(result.to_dict(), indent=2))
    console.print(f"[green]✓[/green] Report saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
