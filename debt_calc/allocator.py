"""Single-month budget allocation across loans.

Every active loan receives its minimum payment. Whatever is left of the
monthly budget is poured into loans in strategy order, each loan absorbing up
to its remaining principal capacity before the next one sees any of it.

A loan whose balance, minimum or rate is not a finite number is not payable:
it carries no obligation and is allocated nothing.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .amortization import BALANCE_EPSILON, monthly_rate
from .data_models import Loan, LoanId
from .strategies import active_loans, normalize_strategy, order_by_strategy
from .utils import ZERO, all_finite, is_positive, to_decimal


def is_payable(loan: Loan) -> bool:
    return all_finite(loan.current_balance, loan.minimum_payment, loan.interest_rate)


def payable_loans(loans: Iterable[Loan]) -> List[Loan]:
    """Active loans with finite balance, minimum and rate."""
    return [loan for loan in active_loans(loans) if is_payable(loan)]


def monthly_obligation(loans: Iterable[Loan]) -> Decimal:
    """Sum of minimum payments over the payable active loans."""
    return sum((loan.minimum_payment for loan in payable_loans(loans)), ZERO)


def available_extra_funds(monthly_allocation, loans: Iterable[Loan]) -> Decimal:
    """Budget left over once every payable minimum is paid (never negative)."""
    allocation = to_decimal(monthly_allocation)
    if not allocation.is_finite():
        return ZERO
    return max(ZERO, allocation - monthly_obligation(loans))


def allocate(
    loans: Iterable[Loan], monthly_budget, strategy_type: Optional[str]
) -> Dict[LoanId, Decimal]:
    """Return the payment each active loan receives this month.

    Parameters
    ----------
    loans: Iterable[Loan]
        Loans with their balances as of this month. Inactive loans are
        ignored; loans that are not payable receive zero.
    monthly_budget:
        Total funds for the month. A budget below the sum of minimums
        allocates no extra; minimums are never reduced.
    strategy_type: Optional[str]
        ``"snowball"``, ``"avalanche"``, ``"custom"`` or None. With no
        strategy only minimums are paid.
    """
    active = active_loans(loans)
    payable = payable_loans(active)
    allocations: Dict[LoanId, Decimal] = {
        loan.id: loan.minimum_payment if is_payable(loan) else ZERO for loan in active
    }

    strategy = normalize_strategy(strategy_type)
    extra = available_extra_funds(monthly_budget, payable)
    if strategy is None or not is_positive(extra):
        return allocations

    remaining_extra = extra
    for loan in order_by_strategy(payable, strategy):
        if remaining_extra <= BALANCE_EPSILON:
            break
        balance = loan.current_balance
        if not is_positive(balance):
            continue
        interest = balance * monthly_rate(loan.interest_rate)
        # Principal capacity is the balance itself; the loan cannot take more.
        current_principal = max(ZERO, allocations[loan.id] - interest)
        remaining_capacity = balance - current_principal
        if remaining_capacity > BALANCE_EPSILON:
            additional = min(remaining_extra, remaining_capacity)
            allocations[loan.id] += additional
            remaining_extra -= additional
    return allocations
