"""Command-line interface for the debt payoff engine.

This module uses the ``click`` library to implement a multi-command
interface over a portfolio file (loans plus budgets as JSON). Users can
project payoff under a strategy, compare it with paying minimums only,
inspect the month-by-month schedule or list the payoff order. Results can be
printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from .config import Settings
from .data_models import (
    STRATEGY_TYPES,
    Loan,
    LoanId,
    MonthlyBudget,
    MonthRecord,
    Portfolio,
    ProjectionReport,
    StrategyProjection,
)
from .engine import budget_allocation, compare_scenarios, project
from .formatter import print_comparison, print_order, print_projection, print_schedule
from .logging_config import get_logger, setup_logging
from .records import active_budget, load_portfolio
from .simulator import simulate
from .strategies import active_loans, infer_strategy, normalize_strategy, order_by_strategy
from .utils import decimal_from_str

logger = get_logger(__name__)

STRATEGY_CHOICES = list(STRATEGY_TYPES) + ["none"]


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("25000") and shorthand with ``k``/``m`` suffixes
    (e.g., "200k" meaning 200_000). Returns a Decimal.
    """
    value = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        amount = decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")
    if not amount.is_finite() or amount < 0:
        raise click.BadParameter(f"Invalid amount: {value}")
    return amount


def _load(path: str) -> Portfolio:
    try:
        portfolio = load_portfolio(Path(path))
    except ValueError as exc:
        raise click.ClickException(str(exc))
    logger.info(
        "Loaded %d loans and %d budgets from %s",
        len(portfolio.loans),
        len(portfolio.budgets),
        path,
        extra={"path": path, "loans": len(portfolio.loans)},
    )
    return portfolio


def _resolve_budget(portfolio: Portfolio, budget: Optional[str]) -> Optional[MonthlyBudget]:
    if budget:
        return MonthlyBudget(monthly_allocation=parse_amount(budget))
    return active_budget(portfolio.budgets)


def _resolve_strategy(option: Optional[str], loans: List[Loan], settings: Settings) -> Optional[str]:
    """An explicit option wins, then the loans' stored strategy, then the configured default."""
    if option is not None:
        return normalize_strategy(option)
    return infer_strategy(loans) or normalize_strategy(settings.default_strategy)


def _money(value: Decimal) -> float:
    return float(value)


def projection_to_dict(projection: StrategyProjection) -> Dict[str, Any]:
    """Convert a projection into a JSON-serialisable dictionary."""
    return {
        "loans": [
            {
                "loanId": p.loan_id,
                "monthlyPayment": _money(p.monthly_payment),
                "monthsToPayoff": p.months_to_payoff,
                "totalInterest": _money(p.total_interest),
                "payoffDate": p.payoff_date.isoformat(),
                "paidOff": p.paid_off,
            }
            for p in projection.loans
        ],
        "totalMonths": projection.total_months,
        "totalInterest": _money(projection.total_interest),
        "interestSavings": _money(projection.interest_savings),
        "timeSavings": projection.time_savings,
        "extraPaymentAllocations": {
            str(loan_id): _money(extra)
            for loan_id, extra in projection.extra_payment_allocations.items()
        },
    }


def report_to_dict(report: ProjectionReport) -> Dict[str, Any]:
    return {
        "minimumPayment": {
            "monthlyObligation": _money(report.monthly_obligation),
            "projections": projection_to_dict(report.minimum),
        },
        "strategy": {
            "strategyType": report.strategy_type,
            "projections": projection_to_dict(report.strategy),
        },
        "comparison": {
            "interestSavings": _money(report.interest_savings),
            "timeSavings": report.time_savings,
        },
    }


def export_to_json(path: Path, data: Dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_schedule_to_csv(path: Path, schedule: List[MonthRecord]) -> None:
    """Export a simulated schedule to CSV, one row per loan per month."""
    header = ["Period", "Loan", "Payment", "Interest", "Ending_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for record in schedule:
            for loan_id, payment in record.payments.items():
                writer.writerow(
                    [
                        record.period,
                        loan_id,
                        f"{payment:.2f}",
                        f"{record.interest[loan_id]:.2f}",
                        f"{record.balances[loan_id]:.2f}",
                    ]
                )


def schedule_to_list(schedule: List[MonthRecord]) -> List[Dict[str, Any]]:
    return [
        {
            "period": record.period,
            "payments": {str(k): _money(v) for k, v in record.payments.items()},
            "interest": {str(k): _money(v) for k, v in record.interest.items()},
            "balances": {str(k): _money(v) for k, v in record.balances.items()},
        }
        for record in schedule
    ]


portfolio_option = click.option(
    "--portfolio",
    "-f",
    "portfolio_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file with 'loans' and 'budgets'",
)
strategy_option = click.option(
    "--strategy",
    "-s",
    "strategy",
    type=click.Choice(STRATEGY_CHOICES, case_sensitive=False),
    default=None,
    help="Repayment strategy (defaults to the strategy stored on the loans)",
)
budget_option = click.option(
    "--budget", "-b", "budget", help="Monthly budget, overriding the portfolio's active budget"
)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Project debt payoff under snowball, avalanche or custom strategies."""
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise click.ClickException(str(exc))
    setup_logging(settings)
    ctx.obj = settings


@cli.command("project")
@portfolio_option
@strategy_option
@budget_option
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_obj
def project_command(
    settings: Settings,
    portfolio_path: str,
    strategy: Optional[str],
    budget: Optional[str],
    output: Optional[str],
) -> None:
    """Project payoff for the chosen strategy against minimum payments."""
    portfolio = _load(portfolio_path)
    strategy_type = _resolve_strategy(strategy, portfolio.loans, settings)
    projection = project(portfolio.loans, _resolve_budget(portfolio, budget), strategy_type)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Projection export must use .json extension")
        export_to_json(path, projection_to_dict(projection))
        click.echo(f"Projection exported to {path}")
    else:
        print_projection(projection, portfolio.loans, strategy_type, settings)


@cli.command("compare")
@portfolio_option
@strategy_option
@budget_option
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_obj
def compare_command(
    settings: Settings,
    portfolio_path: str,
    strategy: Optional[str],
    budget: Optional[str],
    output: Optional[str],
) -> None:
    """Compare paying minimums only with the chosen strategy."""
    portfolio = _load(portfolio_path)
    strategy_type = _resolve_strategy(strategy, portfolio.loans, settings)
    report = compare_scenarios(portfolio.loans, _resolve_budget(portfolio, budget), strategy_type)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Comparison export must use .json extension")
        export_to_json(path, report_to_dict(report))
        click.echo(f"Comparison exported to {path}")
    else:
        print_comparison(report, settings)


@cli.command("schedule")
@portfolio_option
@strategy_option
@budget_option
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.pass_obj
def schedule_command(
    settings: Settings,
    portfolio_path: str,
    strategy: Optional[str],
    budget: Optional[str],
    output: Optional[str],
) -> None:
    """Print the month-by-month simulation for the chosen strategy."""
    portfolio = _load(portfolio_path)
    loans = active_loans(portfolio.loans)
    strategy_type = _resolve_strategy(strategy, loans, settings)
    allocation = budget_allocation(loans, _resolve_budget(portfolio, budget))
    result = simulate(loans, allocation, strategy_type)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, {"schedule": schedule_to_list(result.schedule)})
        elif path.suffix.lower() == ".csv":
            export_schedule_to_csv(path, result.schedule)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    loan_ids: List[LoanId] = [loan.id for loan in order_by_strategy(loans, strategy_type)]
    max_rows = settings.max_rows
    if len(result.schedule) > max_rows:
        click.echo(f"Schedule has {len(result.schedule)} rows; showing first {max_rows} rows.")
    print_schedule(result.schedule[:max_rows], loan_ids)


@cli.command("order")
@portfolio_option
@strategy_option
@click.pass_obj
def order_command(settings: Settings, portfolio_path: str, strategy: Optional[str]) -> None:
    """List active loans in the order extra payments reach them."""
    portfolio = _load(portfolio_path)
    strategy_type = _resolve_strategy(strategy, portfolio.loans, settings)
    print_order(order_by_strategy(portfolio.loans, strategy_type), strategy_type)


if __name__ == "__main__":
    cli()
