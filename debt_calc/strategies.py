"""Repayment strategy ordering.

- Snowball: smallest current balance first.
- Avalanche: highest interest rate first.
- Custom: ascending user-defined priority; loans without one go last.

Python's sort is stable, so loans that tie keep their input order.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .data_models import AVALANCHE, CUSTOM, SNOWBALL, STRATEGY_TYPES, Loan

DEFAULT_PRIORITY = 999


def normalize_strategy(value: Optional[str]) -> Optional[str]:
    """Map user or storage input to a known strategy, or None.

    Unknown values behave like "no strategy" rather than raising.
    """
    if value is None:
        return None
    cleaned = str(value).strip().lower()
    return cleaned if cleaned in STRATEGY_TYPES else None


def active_loans(loans: Iterable[Loan]) -> List[Loan]:
    return [loan for loan in loans if loan.is_active]


def order_by_strategy(loans: Iterable[Loan], strategy_type: Optional[str]) -> List[Loan]:
    """Return the active loans in the order extra money should reach them."""
    active = active_loans(loans)
    strategy = normalize_strategy(strategy_type)
    if strategy == SNOWBALL:
        return sorted(active, key=lambda loan: loan.current_balance)
    if strategy == AVALANCHE:
        # reverse=True keeps equal rates in input order
        return sorted(active, key=lambda loan: loan.interest_rate, reverse=True)
    if strategy == CUSTOM:
        return sorted(
            active,
            key=lambda loan: DEFAULT_PRIORITY if loan.priority_order is None else loan.priority_order,
        )
    return active


def infer_strategy(loans: Iterable[Loan], requested: Optional[str] = None) -> Optional[str]:
    """Pick the strategy for a projection request.

    An explicit request wins. Otherwise the strategy stored on the first
    active loan is used, since all loans share one strategy.
    """
    strategy = normalize_strategy(requested)
    if strategy is not None:
        return strategy
    active = active_loans(loans)
    if not active:
        return None
    return normalize_strategy(active[0].strategy_type)
