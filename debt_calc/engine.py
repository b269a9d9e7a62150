"""Strategy projections built on the rollover simulator.

A projection runs the simulator twice: once paying only the minimums (the
baseline) and once with the chosen strategy and the active budget. The
difference between the two runs is the interest and time a strategy saves.
Both numbers may be negative; that is reported, not treated as an error.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Optional

from .allocator import allocate, monthly_obligation, payable_loans
from .data_models import (
    Loan,
    LoanId,
    MonthlyBudget,
    ProjectionReport,
    SimulationResult,
    StrategyProjection,
)
from .logging_config import get_logger
from .simulator import simulate
from .strategies import active_loans, normalize_strategy
from .utils import round_cents

logger = get_logger(__name__)

DISPLAY_EPSILON = Decimal("0.001")


def budget_allocation(loans: Iterable[Loan], budget: Optional[MonthlyBudget]) -> Decimal:
    """Monthly funds for the strategy run.

    Without an active budget the engine falls back to the sum of minimum
    payments, i.e. no extra allocation.
    """
    if budget is None or not budget.is_active:
        return monthly_obligation(loans)
    return budget.monthly_allocation


def extra_payment_snapshot(
    loans: Iterable[Loan], monthly_allocation: Decimal, strategy_type: Optional[str]
) -> Dict[LoanId, Decimal]:
    """Extra above minimum each loan receives in the first month.

    This is computed directly from the allocator with the full requested
    budget, not from the simulation, so it answers "what would I pay
    differently this month".
    """
    active = active_loans(loans)
    allocations = allocate(active, monthly_allocation, strategy_type)
    extras: Dict[LoanId, Decimal] = {}
    for loan in payable_loans(active):
        extra = allocations[loan.id] - loan.minimum_payment
        if extra > DISPLAY_EPSILON:
            extras[loan.id] = round_cents(extra)
    return extras


def baseline_simulation(loans: Iterable[Loan]) -> SimulationResult:
    """Minimum payments only: no strategy, budget pinned to the obligation."""
    active = active_loans(loans)
    return simulate(active, monthly_obligation(active), None)


def project(
    loans: Iterable[Loan],
    budget: Optional[MonthlyBudget],
    strategy_type: Optional[str],
) -> StrategyProjection:
    """Project payoff under ``strategy_type`` and compare with the baseline.

    Parameters
    ----------
    loans: Iterable[Loan]
        Loan records; inactive ones are ignored.
    budget: Optional[MonthlyBudget]
        The active monthly budget, if any.
    strategy_type: Optional[str]
        ``"snowball"``, ``"avalanche"``, ``"custom"`` or None.

    Returns
    -------
    StrategyProjection
        Per-loan projections for the strategy run, its totals, the savings
        against the baseline and the first-month extra allocation snapshot.
    """
    active = active_loans(loans)
    strategy = normalize_strategy(strategy_type)
    allocation = budget_allocation(active, budget)

    baseline = baseline_simulation(active)
    chosen = simulate(active, allocation, strategy)

    projection = StrategyProjection(
        loans=chosen.projections,
        total_months=chosen.total_months,
        total_interest=chosen.total_interest,
        interest_savings=baseline.total_interest - chosen.total_interest,
        time_savings=baseline.total_months - chosen.total_months,
        extra_payment_allocations=extra_payment_snapshot(active, allocation, strategy),
    )
    logger.info(
        "Projected %d loans with strategy %s: %d months, interest %s",
        len(active),
        strategy or "none",
        projection.total_months,
        projection.total_interest,
        extra={"strategy": strategy, "loans": len(active), "months": projection.total_months},
    )
    return projection


def compare_scenarios(
    loans: Iterable[Loan],
    budget: Optional[MonthlyBudget],
    strategy_type: Optional[str],
) -> ProjectionReport:
    """Minimum-only projection and strategy projection side by side."""
    active = active_loans(loans)
    strategy = normalize_strategy(strategy_type)
    minimum = project(active, budget, None)
    chosen = project(active, budget, strategy)
    return ProjectionReport(
        monthly_obligation=monthly_obligation(active),
        minimum=minimum,
        strategy_type=strategy,
        strategy=chosen,
        interest_savings=minimum.total_interest - chosen.total_interest,
        time_savings=minimum.total_months - chosen.total_months,
    )
