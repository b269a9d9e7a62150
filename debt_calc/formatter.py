"""Output helpers for the debt payoff engine.

This module renders projections, scenario comparisons and simulated
schedules in a plain tabular text format using built-in printing and string
formatting. Amounts are shown with the configured currency prefix/suffix.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .config import Settings
from .data_models import Loan, LoanId, MonthRecord, ProjectionReport, StrategyProjection


def format_money(amount: Decimal, settings: Optional[Settings] = None) -> str:
    settings = settings or Settings()
    return f"{settings.currency_prefix}{amount:,.2f}{settings.currency_suffix}"


def format_months(months: int) -> str:
    """Render a month count as "X years Y months"."""
    sign = "-" if months < 0 else ""
    years, rest = divmod(abs(months), 12)
    if years and rest:
        return f"{sign}{years} years {rest} months"
    if years:
        return f"{sign}{years} years"
    return f"{sign}{rest} months"


def _loan_names(loans: Iterable[Loan]) -> Dict[LoanId, str]:
    return {loan.id: loan.lender_name or str(loan.id) for loan in loans}


def print_projection(
    projection: StrategyProjection,
    loans: Iterable[Loan],
    strategy_type: Optional[str],
    settings: Optional[Settings] = None,
) -> None:
    """Print a strategy projection with one row per loan."""
    names = _loan_names(loans)
    print(f"Projection ({strategy_type or 'minimum payments only'})")
    print("-" * 72)
    print(f"Time to debt-free  : {format_months(projection.total_months)}")
    print(f"Total interest     : {format_money(projection.total_interest, settings)}")
    print(f"Interest saved     : {format_money(projection.interest_savings, settings)}")
    print(f"Time saved         : {format_months(projection.time_savings)}")
    print("-" * 72)
    print("\t".join(["Loan", "Payment", "Months", "Interest", "Payoff", "Extra"]))
    for p in projection.loans:
        extra = projection.extra_payment_allocations.get(p.loan_id, Decimal("0"))
        months = str(p.months_to_payoff) if p.paid_off else f"{p.months_to_payoff}+"
        print(
            "\t".join(
                [
                    names.get(p.loan_id, str(p.loan_id)),
                    f"{p.monthly_payment:.2f}",
                    months,
                    f"{p.total_interest:.2f}",
                    p.payoff_date.strftime("%Y-%m"),
                    f"{extra:.2f}",
                ]
            )
        )
    print("-" * 72)


def print_comparison(report: ProjectionReport, settings: Optional[Settings] = None) -> None:
    """Print minimum-only and strategy scenarios side by side.

    The difference column is minimum minus strategy, so a positive value is
    what the strategy saves.
    """
    print("Comparison")
    print("=" * 72)
    print(f"Monthly obligation : {format_money(report.monthly_obligation, settings)}")
    label = report.strategy_type or "none"
    print(f"{'Metric':20s} {'Minimum':>15s} {label.capitalize():>15s} {'Savings':>15s}")
    print(
        f"{'total_interest':20s} {report.minimum.total_interest:15.2f} "
        f"{report.strategy.total_interest:15.2f} {report.interest_savings:15.2f}"
    )
    print(
        f"{'total_months':20s} {report.minimum.total_months:15d} "
        f"{report.strategy.total_months:15d} {report.time_savings:15d}"
    )
    print("=" * 72)


def print_schedule(schedule: List[MonthRecord], loan_ids: List[LoanId]) -> None:
    """Print a simulated schedule, one row per month and one column per loan.

    Loans already retired in a month are shown as ``-``.
    """
    headers = ["Period", "Total"] + [f"Pay[{loan_id}]" for loan_id in loan_ids]
    headers += [f"Bal[{loan_id}]" for loan_id in loan_ids]
    print("\t".join(headers))
    for record in schedule:
        row = [str(record.period), f"{record.total_payment:.2f}"]
        for loan_id in loan_ids:
            value = record.payments.get(loan_id)
            row.append("-" if value is None else f"{value:.2f}")
        for loan_id in loan_ids:
            value = record.balances.get(loan_id)
            row.append("-" if value is None else f"{value:.2f}")
        print("\t".join(row))


def print_order(loans: List[Loan], strategy_type: Optional[str]) -> None:
    """Print loans in the order extra payments will reach them."""
    print(f"Payoff order ({strategy_type or 'input order'})")
    print("\t".join(["#", "Loan", "Balance", "Rate", "Minimum", "Priority"]))
    for position, loan in enumerate(loans, start=1):
        print(
            "\t".join(
                [
                    str(position),
                    loan.lender_name or str(loan.id),
                    f"{loan.current_balance:.2f}",
                    f"{loan.interest_rate:.2f}%",
                    f"{loan.minimum_payment:.2f}",
                    "-" if loan.priority_order is None else str(loan.priority_order),
                ]
            )
        )
