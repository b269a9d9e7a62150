"""Month-by-month rollover simulation across several loans.

Each simulated month the allocator is called again with the full budget
against the loans still outstanding. When a loan is retired its minimum
payment stops being an obligation, so the following month the same budget
leaves more surplus for the loans that remain. That is the snowball or
avalanche "rollover".
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, List, Optional

from .allocator import allocate, available_extra_funds, is_payable
from .amortization import BALANCE_EPSILON, HORIZON_MONTHS, monthly_rate
from .data_models import Loan, MonthRecord, PaymentProjection, SimulationResult
from .logging_config import get_logger
from .strategies import active_loans
from .utils import ZERO, add_months, round_cents

logger = get_logger(__name__)


@dataclass
class _LoanState:
    """Working copy of a loan's balance and running totals."""

    loan: Loan
    balance: Decimal
    rate: Decimal
    interest: Decimal = ZERO
    max_payment: Decimal = ZERO
    months: Optional[int] = None

    def snapshot(self) -> Loan:
        return replace(self.loan, current_balance=self.balance)

    def to_projection(self, months: int, paid_off: bool) -> PaymentProjection:
        return PaymentProjection(
            loan_id=self.loan.id,
            monthly_payment=round_cents(self.max_payment),
            months_to_payoff=months,
            total_interest=round_cents(self.interest),
            payoff_date=add_months(self.loan.start_date, months),
            paid_off=paid_off,
        )


def simulate(
    loans: Iterable[Loan],
    monthly_budget,
    strategy_type: Optional[str],
    horizon: int = HORIZON_MONTHS,
) -> SimulationResult:
    """Run the rollover simulation and return per-loan projections.

    ``horizon`` can only shorten the run; it is clamped to 600 months.
    """
    horizon = max(0, min(horizon, HORIZON_MONTHS))
    states = [
        _LoanState(loan=loan, balance=loan.current_balance, rate=monthly_rate(loan.interest_rate))
        for loan in active_loans(loans)
    ]
    for state in states:
        # Non-finite figures retire the loan untouched, like a zero balance.
        if not is_payable(state.loan) or state.balance <= BALANCE_EPSILON:
            state.balance = ZERO
            state.months = 0

    working = [state for state in states if state.months is None]
    # A budget that only covers the starting minimums is a minimum-only run;
    # freed minimums are not redistributed.
    if available_extra_funds(monthly_budget, [state.loan for state in working]) <= ZERO:
        strategy_type = None
    schedule: List[MonthRecord] = []
    run_interest = ZERO
    month = 0

    while working and month < horizon:
        allocations = allocate([state.snapshot() for state in working], monthly_budget, strategy_type)
        month += 1
        record = MonthRecord(period=month)

        for state in working:
            payment = allocations[state.loan.id]
            interest = state.balance * state.rate
            principal = min(state.balance, max(ZERO, payment - interest))
            applied = min(payment, interest) + principal
            state.interest += interest
            run_interest += interest
            state.balance -= principal
            state.max_payment = max(state.max_payment, applied)
            record.payments[state.loan.id] = applied
            record.interest[state.loan.id] = interest
            record.balances[state.loan.id] = state.balance

        for state in working:
            if state.balance <= BALANCE_EPSILON:
                state.balance = ZERO
                state.months = month
        working = [state for state in working if state.months is None]
        schedule.append(record)

    projections: List[PaymentProjection] = []
    for state in states:
        if state.months is None:
            logger.warning(
                "Loan %s still owes %s after %d months",
                state.loan.id,
                round_cents(state.balance),
                month,
                extra={"loan_id": state.loan.id, "months": month},
            )
            projections.append(state.to_projection(month, paid_off=False))
        else:
            projections.append(state.to_projection(state.months, paid_off=True))

    total_months = max((p.months_to_payoff for p in projections), default=0)
    result = SimulationResult(
        projections=projections,
        total_months=total_months,
        total_interest=round_cents(run_interest),
        schedule=schedule,
    )
    logger.debug(
        "Simulated %d loans over %d months",
        len(projections),
        total_months,
        extra={
            "strategy": strategy_type,
            "loans": len(projections),
            "months": total_months,
            "total_interest": str(result.total_interest),
        },
    )
    return result
