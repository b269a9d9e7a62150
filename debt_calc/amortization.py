"""Single-loan amortization primitives.

Payoff dates and interest totals are found by stepping through the loan one
month at a time instead of using the closed-form annuity formula. The budget
allocator can hand a loan a payment that does not amortize it evenly (a loan
near payoff gets a capped payment), and iteration handles that where the
annuity formula cannot.

Every loop is bounded by ``HORIZON_MONTHS``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Tuple

from .utils import ZERO, add_months, is_positive, round_cents, to_decimal

HORIZON_MONTHS = 600  # 50 years
BALANCE_EPSILON = Decimal("0.01")
# Guard against runaway interest totals from pathological inputs.
INTEREST_BOUND_FACTOR = 100


def monthly_rate(annual_percent) -> Decimal:
    """Return the monthly periodic rate for an annual percentage rate."""
    return to_decimal(annual_percent) / Decimal(100) / Decimal(12)


def _amortize(balance: Decimal, payment: Decimal, annual_rate) -> Tuple[int, Decimal, bool]:
    """Step a loan month by month under a fixed payment.

    Returns ``(months, interest, converged)``. When the payment does not cover
    the interest the balance cannot fall; the months run out to the horizon
    (or the interest bound) and ``converged`` is False.
    """
    rate = monthly_rate(annual_rate)
    remaining = balance
    interest_total = ZERO
    interest_bound = balance * INTEREST_BOUND_FACTOR
    months = 0
    while remaining > BALANCE_EPSILON and months < HORIZON_MONTHS:
        if interest_total >= interest_bound:
            return months, interest_total, False
        interest = remaining * rate
        principal = payment - interest
        interest_total += interest
        months += 1
        if principal <= ZERO:
            continue
        remaining = max(ZERO, remaining - principal)
    return months, interest_total, remaining <= BALANCE_EPSILON


def months_to_payoff(balance, monthly_payment, annual_rate) -> int:
    """Number of months until ``balance`` is repaid, capped at the horizon.

    Degenerate input (no positive balance or payment) needs zero months. A
    payment that never covers the accruing interest yields the horizon.
    """
    balance = to_decimal(balance)
    payment = to_decimal(monthly_payment)
    if not is_positive(balance) or not is_positive(payment):
        return 0
    rate = monthly_rate(annual_rate)
    if not rate.is_finite():
        return 0
    if payment - balance * rate <= ZERO:
        return HORIZON_MONTHS
    months, _, converged = _amortize(balance, payment, annual_rate)
    return months if converged else HORIZON_MONTHS


def payoff_date(balance, monthly_payment, annual_rate, start_date: date) -> date:
    """Return the date the loan is repaid when paying ``monthly_payment``.

    ``start_date`` is returned unchanged for degenerate input and advanced by
    the full horizon when the payment never covers the interest.
    """
    return add_months(start_date, months_to_payoff(balance, monthly_payment, annual_rate))


def total_interest(balance, monthly_payment, annual_rate) -> Decimal:
    """Total interest paid over the life of the loan, rounded to cents.

    A payment that never covers the interest leaves the balance flat, so
    interest keeps accruing until the horizon or the interest bound stops
    the loop.
    """
    balance = to_decimal(balance)
    payment = to_decimal(monthly_payment)
    if not is_positive(balance) or not is_positive(payment):
        return ZERO
    if not monthly_rate(annual_rate).is_finite():
        return ZERO
    _, interest, _ = _amortize(balance, payment, annual_rate)
    return round_cents(interest)
