"""Tests for the single-month budget allocator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from debt_calc.allocator import allocate, available_extra_funds, monthly_obligation


def test_monthly_obligation_sums_active_minimums(three_loans, loan_factory):
    loans = three_loans + [loan_factory(id="D", minimum="999", active=False)]
    assert monthly_obligation(loans) == Decimal("200")


def test_available_extra_funds_never_negative(three_loans):
    assert available_extra_funds(Decimal("400"), three_loans) == Decimal("200")
    assert available_extra_funds(Decimal("150"), three_loans) == Decimal("0")
    assert available_extra_funds(Decimal("NaN"), three_loans) == Decimal("0")


def test_avalanche_sends_surplus_to_highest_rate(three_loans):
    allocations = allocate(three_loans, Decimal("400"), "avalanche")
    assert allocations == {"A": Decimal("50"), "B": Decimal("250"), "C": Decimal("100")}


def test_surplus_spills_to_next_loan_once_first_is_saturated(three_loans):
    # B can absorb 460 of principal beyond its 40 minimum principal; 40 goes on to A.
    allocations = allocate(three_loans, Decimal("700"), "avalanche")
    assert allocations["B"] == Decimal("510")
    assert allocations["A"] == Decimal("90")
    assert allocations["C"] == Decimal("100")
    assert sum(allocations.values()) == Decimal("700")


@pytest.mark.parametrize("extra", [0, 1, 100, 459, 460, 461, 1000, 1420, 1421, 2500, 3330])
def test_waterfall_saturates_loans_in_order(three_loans, extra):
    # Principal capacities in avalanche order: B 460, A 960, C 1910
    capacities = [("B", Decimal("460")), ("A", Decimal("960")), ("C", Decimal("1910"))]
    minimums = {"A": Decimal("50"), "B": Decimal("50"), "C": Decimal("100")}
    allocations = allocate(three_loans, Decimal("200") + extra, "avalanche")

    remaining = Decimal(extra)
    for loan_id, capacity in capacities:
        expected = min(remaining, capacity)
        assert allocations[loan_id] - minimums[loan_id] == expected
        remaining -= expected


def test_budget_beyond_total_capacity_is_left_unallocated(three_loans):
    allocations = allocate(three_loans, Decimal("10000"), "avalanche")
    # Each loan is capped at balance + this month's interest
    assert allocations == {"A": Decimal("1010"), "B": Decimal("510"), "C": Decimal("2010")}


def test_no_strategy_pays_minimums_only(three_loans):
    allocations = allocate(three_loans, Decimal("1000"), None)
    assert allocations == {"A": Decimal("50"), "B": Decimal("50"), "C": Decimal("100")}


def test_budget_below_minimums_keeps_minimums(three_loans):
    allocations = allocate(three_loans, Decimal("120"), "snowball")
    assert allocations == {"A": Decimal("50"), "B": Decimal("50"), "C": Decimal("100")}


def test_custom_strategy_uses_priorities(loan_factory):
    loans = [
        loan_factory(id=1, balance="1000", minimum="50", rate="12", priority=2),
        loan_factory(id=2, balance="1000", minimum="50", rate="12", priority=1),
    ]
    allocations = allocate(loans, Decimal("200"), "custom")
    assert allocations == {1: Decimal("50"), 2: Decimal("150")}


def test_inactive_loans_receive_nothing(loan_factory):
    loans = [
        loan_factory(id=1, balance="1000", minimum="50"),
        loan_factory(id=2, balance="100", minimum="20", active=False),
    ]
    allocations = allocate(loans, Decimal("300"), "snowball")
    assert allocations == {1: Decimal("300")}


def test_zero_balance_loan_absorbs_no_extra(loan_factory):
    loans = [
        loan_factory(id=1, balance="0", minimum="25"),
        loan_factory(id=2, balance="800", minimum="50"),
    ]
    allocations = allocate(loans, Decimal("175"), "snowball")
    assert allocations == {1: Decimal("25"), 2: Decimal("150")}


def test_empty_loan_set():
    assert allocate([], Decimal("500"), "avalanche") == {}


def test_non_finite_loans_carry_no_obligation(three_loans, loan_factory):
    loans = three_loans + [
        loan_factory(id="D", minimum="NaN"),
        loan_factory(id="E", rate="NaN"),
        loan_factory(id="F", balance="Infinity"),
    ]
    assert monthly_obligation(loans) == Decimal("200")
    allocations = allocate(loans, Decimal("400"), "avalanche")
    assert allocations["B"] == Decimal("250")
    assert allocations["D"] == allocations["E"] == allocations["F"] == Decimal("0")
