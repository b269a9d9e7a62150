"""Pytest configuration and shared fixtures for debt_calc tests.

Provides loan/budget factories, the three-loan reference portfolio and a
portfolio-file writer for the command-line tests.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from debt_calc.data_models import Loan, MonthlyBudget
from debt_calc.logging_config import ROOT_LOGGER


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by the CLI so they don't outlive a test's streams."""
    yield
    logging.getLogger(ROOT_LOGGER).handlers.clear()


@pytest.fixture
def loan_factory():
    """Factory for building loans with sensible defaults.

    Returns:
        Callable: Function that creates Loan instances
    """

    def _create_loan(
        id=1,
        balance="1000",
        minimum="50",
        rate="12",
        start=date(2024, 1, 1),
        priority=None,
        active=True,
        name="",
        strategy=None,
    ) -> Loan:
        return Loan(
            id=id,
            current_balance=Decimal(str(balance)),
            minimum_payment=Decimal(str(minimum)),
            interest_rate=Decimal(str(rate)),
            start_date=start,
            priority_order=priority,
            is_active=active,
            lender_name=name,
            strategy_type=strategy,
        )

    return _create_loan


@pytest.fixture
def budget_factory():
    def _create_budget(amount="400", active=True) -> MonthlyBudget:
        return MonthlyBudget(monthly_allocation=Decimal(str(amount)), is_active=active)

    return _create_budget


@pytest.fixture
def three_loans(loan_factory):
    """A(1000, 50, 12%), B(500, 50, 24%), C(2000, 100, 6%)."""
    return [
        loan_factory(id="A", balance="1000", minimum="50", rate="12", name="Bank A"),
        loan_factory(id="B", balance="500", minimum="50", rate="24", name="App B"),
        loan_factory(id="C", balance="2000", minimum="100", rate="6", name="Person C"),
    ]


@pytest.fixture
def portfolio_file(tmp_path: Path):
    """Write a portfolio JSON document and return its path."""

    def _write(loans=None, budgets=None, name="portfolio.json") -> Path:
        if loans is None:
            loans = [
                {
                    "id": 1,
                    "lenderName": "BDO",
                    "sourceType": "bank",
                    "currentBalance": "1000.00",
                    "minimumPayment": "50.00",
                    "interestRate": "12.00",
                    "startDate": "2024-01-15",
                    "isActive": True,
                },
                {
                    "id": 2,
                    "lenderName": "Tala",
                    "sourceType": "mobile_app",
                    "currentBalance": "500.00",
                    "minimumPayment": "50.00",
                    "interestRate": "24.00",
                    "startDate": "2024-01-15",
                    "isActive": True,
                },
                {
                    "id": 3,
                    "lenderName": "Maria Garcia",
                    "sourceType": "person",
                    "currentBalance": "2000.00",
                    "minimumPayment": "100.00",
                    "interestRate": "6.00",
                    "startDate": "2024-01-15",
                    "isActive": True,
                },
            ]
        if budgets is None:
            budgets = [{"monthlyAllocation": "400.00", "isActive": True}]
        path = tmp_path / name
        path.write_text(json.dumps({"loans": loans, "budgets": budgets}), encoding="utf-8")
        return path

    return _write
