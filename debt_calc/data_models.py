"""Data models for the debt payoff engine.

This module defines dataclasses for the entities the engine consumes (loans
and the monthly budget) and the records it produces (per-loan payment
projections, simulated months and strategy projections). Inputs are treated
as read-only; the simulator keeps its own working balances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union

LoanId = Union[int, str]

SNOWBALL = "snowball"
AVALANCHE = "avalanche"
CUSTOM = "custom"
STRATEGY_TYPES = (SNOWBALL, AVALANCHE, CUSTOM)

SOURCE_TYPES = ("bank", "mobile_app", "person")


@dataclass
class Loan:
    """A loan as supplied by the surrounding application.

    Attributes
    ----------
    id: LoanId
        Opaque identifier, unique within a simulation run.
    current_balance: Decimal
        Outstanding principal at simulation start.
    minimum_payment: Decimal
        Amount due every month.
    interest_rate: Decimal
        Annual percentage rate, e.g. ``Decimal("12")`` for 12 %.
    start_date: date
        Anchor for payoff date arithmetic.
    priority_order: Optional[int]
        Position under the custom strategy; loans without one sort last.
    """

    id: LoanId
    current_balance: Decimal
    minimum_payment: Decimal
    interest_rate: Decimal
    start_date: date
    priority_order: Optional[int] = None
    is_active: bool = True
    lender_name: str = ""
    source_type: Optional[str] = None  # 'bank', 'mobile_app' or 'person'
    strategy_type: Optional[str] = None  # strategy last chosen for this loan


@dataclass
class MonthlyBudget:
    """Total funds available each month across all loans."""

    monthly_allocation: Decimal
    effective_date: Optional[date] = None
    is_active: bool = True
    notes: Optional[str] = None


@dataclass
class Portfolio:
    """Loans and budgets loaded together from one source."""

    loans: List[Loan]
    budgets: List[MonthlyBudget] = field(default_factory=list)


@dataclass
class PaymentProjection:
    """Outcome of a simulation for a single loan.

    ``monthly_payment`` is the highest payment actually applied to the loan
    in any simulated month. ``paid_off`` is False when the horizon was
    reached with a balance still outstanding.
    """

    loan_id: LoanId
    monthly_payment: Decimal
    months_to_payoff: int
    total_interest: Decimal
    payoff_date: date
    paid_off: bool = True


@dataclass
class MonthRecord:
    """One simulated month, keyed by loan id.

    ``balances`` holds each loan's balance after the month's payment. Loans
    retired in an earlier month do not appear.
    """

    period: int
    payments: Dict[LoanId, Decimal] = field(default_factory=dict)
    interest: Dict[LoanId, Decimal] = field(default_factory=dict)
    balances: Dict[LoanId, Decimal] = field(default_factory=dict)

    @property
    def total_payment(self) -> Decimal:
        return sum(self.payments.values(), Decimal("0"))


@dataclass
class SimulationResult:
    projections: List[PaymentProjection]
    total_months: int
    total_interest: Decimal
    schedule: List[MonthRecord] = field(default_factory=list)


@dataclass
class StrategyProjection:
    """Aggregate projection for one strategy compared with the baseline.

    ``extra_payment_allocations`` is a first-month snapshot of the extra
    (above minimum) each loan receives, not a time series.
    """

    loans: List[PaymentProjection]
    total_months: int
    total_interest: Decimal
    interest_savings: Decimal
    time_savings: int
    extra_payment_allocations: Dict[LoanId, Decimal] = field(default_factory=dict)


@dataclass
class ProjectionReport:
    """Minimum-only and strategy projections side by side."""

    monthly_obligation: Decimal
    minimum: StrategyProjection
    strategy_type: Optional[str]
    strategy: StrategyProjection
    interest_savings: Decimal
    time_savings: int
